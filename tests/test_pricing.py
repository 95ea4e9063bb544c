from datetime import time
from decimal import Decimal

import pytest

from services.pricing import calculate_booking_price, compute_total_hours
from utils.errors import ValidationError


def test_total_hours_rounds_to_two_decimals():
    assert compute_total_hours(time(9, 0), time(11, 30)) == Decimal("2.50")
    assert compute_total_hours(time(9, 0), time(9, 20)) == Decimal("0.33")


@pytest.mark.parametrize("start,end", [
    (time(10, 0), time(10, 0)),
    (time(22, 0), time(2, 0)),
])
def test_end_not_after_start_is_rejected(start, end):
    with pytest.raises(ValidationError):
        compute_total_hours(start, end)


def test_short_booking_is_priced_hourly():
    assert calculate_booking_price(Decimal("2"), Decimal("15.00"), Decimal("90.00")) == Decimal("30.00")


def test_day_rate_applies_from_threshold():
    assert calculate_booking_price(Decimal("8"), Decimal("15.00"), Decimal("90.00")) == Decimal("90.00")
    assert calculate_booking_price(Decimal("10"), Decimal("15.00"), Decimal("90.00")) == Decimal("90.00")


def test_just_below_threshold_stays_hourly():
    # 7.99h * 15 = 119.85, more than the day rate, still hourly
    assert calculate_booking_price(Decimal("7.99"), Decimal("15.00"), Decimal("90.00")) == Decimal("119.85")


def test_threshold_is_configurable():
    assert calculate_booking_price(Decimal("4"), Decimal("15"), Decimal("50"), day_rate_hours=4) == Decimal("50.00")


def test_price_is_exact_to_the_cent():
    # 0.33h * 10.00 = 3.30, no float drift
    assert calculate_booking_price(Decimal("0.33"), Decimal("10.00"), Decimal("60.00")) == Decimal("3.30")
    assert calculate_booking_price("1.5", "12.35", "80") == Decimal("18.53")


def test_negative_values_are_rejected():
    with pytest.raises(ValidationError):
        calculate_booking_price(Decimal("-1"), Decimal("15"), Decimal("90"))
