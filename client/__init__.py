from .api import ApiClient, ApiError
from .bookings import BookingClient, StaffBookingClient
from .cache import TTLCache
