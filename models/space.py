from datetime import datetime
from models.db import db


class Space(db.Model):
    __tablename__ = "spaces"

    id = db.Column(db.Integer, primary_key=True)

    location_id = db.Column(db.Integer, db.ForeignKey("locations.id"), nullable=False, index=True)
    space_type_id = db.Column(db.Integer, db.ForeignKey("space_types.id"), nullable=False, index=True)

    space_name = db.Column(db.String(120), nullable=False)
    description = db.Column(db.Text, nullable=True)
    capacity = db.Column(db.Integer, nullable=False)

    price_per_hour = db.Column(db.Numeric(10, 2), nullable=False)
    price_per_day = db.Column(db.Numeric(10, 2), nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    location = db.relationship("Location", back_populates="spaces")
    space_type = db.relationship("SpaceType")
    availability_blocks = db.relationship("Availability", cascade="all, delete-orphan")

    __table_args__ = (
        db.CheckConstraint("capacity > 0", name="ck_spaces_capacity_positive"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "location_id": self.location_id,
            "space_type_id": self.space_type_id,
            "space_name": self.space_name,
            "description": self.description,
            "capacity": self.capacity,
            "price_per_hour": str(self.price_per_hour),
            "price_per_day": str(self.price_per_day),
            "location_name": self.location.location_name if self.location else None,
            "type_name": self.space_type.type_name if self.space_type else None,
        }
