from decimal import Decimal

from .api import ApiError
from .cache import TTLCache

STATUS_LABELS = {
    "pending": "Pending",
    "confirmed": "Confirmed",
    "cancelled": "Cancelled",
    "completed": "Completed",
}

REQUIRED_BOOKING_FIELDS = ("space_id", "booking_date", "start_time", "end_time")


class BookingClient:
    """Booking calls used by the dashboards, with my-bookings reads cached."""

    def __init__(self, api, cache=None):
        self.api = api
        self.cache = cache if cache is not None else TTLCache()

    def my_bookings(self):
        return self.cache.get_or_load(
            "bookings",
            lambda: self.api.get("/bookings")["bookings"],
            params={"scope": "mine"},
        )

    def create_booking(self, space_id, booking_date, start_time, end_time):
        payload = {
            "space_id": space_id,
            "booking_date": booking_date,
            "start_time": start_time,
            "end_time": end_time,
        }
        missing = [f for f in REQUIRED_BOOKING_FIELDS if not payload[f]]
        if missing:
            raise ValueError(f"Missing required fields: {', '.join(missing)}")

        booking = self.api.post("/bookings", payload)["booking"]
        self.cache.invalidate_pattern("bookings")
        return booking

    def quote(self, space_id, start_time, end_time):
        data = self.api.post(
            "/bookings/quote",
            {"space_id": space_id, "start_time": start_time, "end_time": end_time},
        )
        return {
            "total_hours": Decimal(data["total_hours"]),
            "total_price": Decimal(data["total_price"]),
        }

    def delete(self, booking_id):
        """Withdraw a booking. Users may delete their own until it is confirmed or completed."""
        self.api.delete(f"/bookings/{booking_id}")
        self.cache.invalidate_pattern("bookings")

    def is_available(self, space_id, booking_date, start_time, end_time):
        try:
            result = self.api.post(
                "/bookings/check-availability",
                {
                    "space_id": space_id,
                    "booking_date": booking_date,
                    "start_time": start_time,
                    "end_time": end_time,
                },
            )
        except ApiError as e:
            if e.status_code == 404:
                return False
            raise
        return bool(result["available"])

    @staticmethod
    def status_label(status):
        return STATUS_LABELS.get(status, status)


class StaffBookingClient(BookingClient):
    """Front-desk calls for managers and admins."""

    def location_bookings(self, location_id):
        spaces = self.api.get("/spaces", params={"location_id": location_id})["spaces"]
        bookings = []
        for space in spaces:
            bookings.extend(self.api.get("/bookings", params={"space_id": space["id"]})["bookings"])
        return bookings

    def book_for_client(self, user_id, space_id, booking_date, start_time, end_time):
        payload = {
            "user_id": user_id,
            "space_id": space_id,
            "booking_date": booking_date,
            "start_time": start_time,
            "end_time": end_time,
        }
        missing = [f for f in ("user_id",) + REQUIRED_BOOKING_FIELDS if not payload[f]]
        if missing:
            raise ValueError(f"Missing required fields: {', '.join(missing)}")

        booking = self.api.post("/bookings", payload)["booking"]
        self.cache.invalidate_pattern("bookings")
        return booking

    def pay_for_client(self, booking_id, amount, payment_method="cash", transaction_id=None):
        payload = {"booking_id": booking_id, "amount": str(amount), "payment_method": payment_method}
        if transaction_id:
            payload["transaction_id"] = transaction_id
        data = self.api.post("/payments", payload)
        self.cache.invalidate_pattern("bookings")
        return data

    def set_status(self, booking_id, status):
        booking = self.api.patch(f"/bookings/{booking_id}/status", {"status": status})["booking"]
        self.cache.invalidate_pattern("bookings")
        return booking

    def cancel(self, booking_id):
        return self.set_status(booking_id, "cancelled")

    def dashboard(self):
        return self.api.get("/manager/dashboard")
