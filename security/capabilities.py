"""
Capabilities of every protected operation, with their ownership predicates.

Managers are scoped to resources whose location lists them as ``manager_id``;
users are scoped to rows they own. Each predicate runs its own query so the
role check never depends on what the route happened to load.
"""
from models import db
from models.location import Location
from models.space import Space
from models.user import ROLE_ADMIN, ROLE_MANAGER
from security.rbac import ANY_ROLE, STAFF, Capability


def manages_location(actor, location_id) -> bool:
    if location_id is None:
        return False
    return (
        db.session.query(Location.id)
        .filter(Location.id == location_id, Location.manager_id == actor.id)
        .first()
        is not None
    )


def manages_space(actor, space_id) -> bool:
    if space_id is None:
        return False
    return (
        db.session.query(Space.id)
        .join(Location, Space.location_id == Location.id)
        .filter(Space.id == space_id, Location.manager_id == actor.id)
        .first()
        is not None
    )


def _owns_location(actor, location):
    return manages_location(actor, location.id)


def _owns_space(actor, space):
    return manages_space(actor, space.id)


def _owns_availability(actor, block):
    return manages_space(actor, block.space_id)


def _booking_manager(actor, booking):
    return manages_space(actor, booking.space_id)


def _booking_reader(actor, booking):
    if booking.user_id == actor.id:
        return True
    return actor.role == ROLE_MANAGER and manages_space(actor, booking.space_id)


def _booking_owner(actor, booking):
    return booking.user_id == actor.id


def _payment_manager(actor, payment):
    return manages_space(actor, payment.booking.space_id)


def _payment_reader(actor, payment):
    return _booking_reader(actor, payment.booking)


# catalogue entities
CREATE_LOCATION = Capability("create_location", [ROLE_ADMIN])
UPDATE_LOCATION = Capability("update_location", STAFF, owns=_owns_location)
DELETE_LOCATION = Capability("delete_location", [ROLE_ADMIN])
MANAGE_SPACE_TYPES = Capability("manage_space_types", [ROLE_ADMIN])
MANAGE_ADDITIONAL_SERVICES = Capability("manage_additional_services", [ROLE_ADMIN])
# the resource for CREATE_SPACE is the target Location
CREATE_SPACE = Capability("create_space", STAFF, owns=_owns_location)
MANAGE_SPACE = Capability("manage_space", STAFF, owns=_owns_space)
# the resource for CREATE_AVAILABILITY is the target Space
CREATE_AVAILABILITY = Capability("create_availability", STAFF, owns=_owns_space)
MANAGE_AVAILABILITY = Capability("manage_availability", STAFF, owns=_owns_availability)

# bookings
CREATE_BOOKING = Capability("create_booking", ANY_ROLE)
# the resource for BOOK_FOR_CLIENT is the booked Space
BOOK_FOR_CLIENT = Capability("book_for_client", STAFF, owns=_owns_space)
VIEW_BOOKING = Capability("view_booking", ANY_ROLE, owns=_booking_reader)
UPDATE_BOOKING_STATUS = Capability("update_booking_status", STAFF, owns=_booking_manager)
# non-admins may only delete their own bookings
DELETE_BOOKING = Capability("delete_booking", ANY_ROLE, owns=_booking_owner)

# payments
CREATE_PAYMENT = Capability(
    "create_payment", ANY_ROLE, owns=_booking_owner, scoped_roles=ANY_ROLE,
)
VIEW_PAYMENT = Capability("view_payment", ANY_ROLE, owns=_payment_reader)
PAY_FOR_CLIENT = Capability("pay_for_client", STAFF, owns=_booking_manager)
UPDATE_PAYMENT_STATUS = Capability("update_payment_status", STAFF, owns=_payment_manager)

VIEW_AUDIT_LOG = Capability("view_audit_log", [ROLE_ADMIN])
ASSIGN_ROLES = Capability("assign_roles", [ROLE_ADMIN])

# dashboards
VIEW_SYSTEM_DASHBOARD = Capability("view_system_dashboard", [ROLE_ADMIN])
VIEW_MANAGER_DASHBOARD = Capability("view_manager_dashboard", STAFF)
