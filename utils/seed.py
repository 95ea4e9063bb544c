from models import db
from models.space_type import SpaceType

DEFAULT_SPACE_TYPES = [
    ("Hot Desk", "Shared desk, first come first served"),
    ("Private Office", "Lockable office for one team"),
    ("Meeting Room", "Bookable room with screen and whiteboard"),
    ("Conference Room", "Large room for presentations and events"),
]

def seed_space_types():
    """Insert the default space types that are missing. Returns how many were added."""
    existing = {st.type_name for st in SpaceType.query.all()}
    added = 0
    for name, description in DEFAULT_SPACE_TYPES:
        if name not in existing:
            db.session.add(SpaceType(type_name=name, description=description))
            added += 1
    db.session.commit()
    return added
