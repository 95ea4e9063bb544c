"""
Booking duration and price.

This is the only pricing rule in the system: API clients ask the server for a
quote instead of pricing on their own.
"""
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from utils.errors import ValidationError

DEFAULT_DAY_RATE_HOURS = 8
CENT = Decimal("0.01")


def compute_total_hours(start_time, end_time) -> Decimal:
    """Wall-clock hours between two times on the same day, to 2 decimals."""
    if end_time <= start_time:
        raise ValidationError("end_time must be after start_time")

    anchor = date(2000, 1, 1)
    delta = datetime.combine(anchor, end_time) - datetime.combine(anchor, start_time)
    hours = Decimal(int(delta.total_seconds())) / Decimal(3600)
    return hours.quantize(CENT, rounding=ROUND_HALF_UP)


def calculate_booking_price(total_hours, price_per_hour, price_per_day,
                            day_rate_hours=DEFAULT_DAY_RATE_HOURS) -> Decimal:
    """
    Day rate once the booking reaches ``day_rate_hours``, otherwise hourly.

    >>> calculate_booking_price(Decimal("2"), Decimal("15"), Decimal("90"))
    Decimal('30.00')
    >>> calculate_booking_price(Decimal("10"), Decimal("15"), Decimal("90"))
    Decimal('90.00')
    """
    total_hours = Decimal(str(total_hours))
    price_per_hour = Decimal(str(price_per_hour))
    price_per_day = Decimal(str(price_per_day))

    if total_hours < 0 or price_per_hour < 0 or price_per_day < 0:
        raise ValidationError("Hours and prices must be non-negative")

    if total_hours >= day_rate_hours:
        price = price_per_day
    else:
        price = price_per_hour * total_hours
    return price.quantize(CENT, rounding=ROUND_HALF_UP)
