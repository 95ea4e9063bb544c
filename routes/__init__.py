from .health import health_bp
from .auth import auth_bp
from .users import users_bp
from .locations import location_bp
from .space_types import space_type_bp
from .spaces import space_bp
from .availability import availability_bp
from .bookings import bookings_bp
from .payments import payments_bp
from .additional_services import additional_service_bp
from .audit_logs import audit_bp
from .dashboards import dashboards_bp

ALL_BLUEPRINTS = (
    health_bp,
    auth_bp,
    users_bp,
    location_bp,
    space_type_bp,
    space_bp,
    availability_bp,
    bookings_bp,
    payments_bp,
    additional_service_bp,
    audit_bp,
    dashboards_bp,
)
