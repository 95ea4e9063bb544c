from models.booking import BOOKING_STATUSES, TERMINAL_STATUSES
from utils.errors import InvalidState, ValidationError


def validate_status(status):
    if not status:
        raise ValidationError("status is required")
    if status not in BOOKING_STATUSES:
        raise ValidationError(f"Invalid status. Allowed: {', '.join(BOOKING_STATUSES)}")
    return status


def ensure_transition(current, target):
    """Any non-terminal status may move to any status; terminal ones never move."""
    validate_status(target)
    if current in TERMINAL_STATUSES:
        raise InvalidState(f"Cannot change the status of a booking that is already {current}")
    return target


def apply_transition(booking, target):
    ensure_transition(booking.status, target)
    previous = booking.status
    booking.status = target
    return previous
