from .db import db
from .user import User
from .audit_log import AuditLog
from .location import Location
from .space_type import SpaceType
from .space import Space
from .availability import Availability
from .booking import Booking
from .payment import Payment
from .additional_service import AdditionalService
