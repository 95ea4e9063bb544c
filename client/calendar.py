"""Calendar helpers for the booking views."""
import calendar
from datetime import date, time

ACTIVE_BOOKING_STATUSES = ("pending", "confirmed")


def month_grid(year, month):
    """Weeks of ``date`` objects for a month, Monday first, ``None`` outside the month."""
    weeks = calendar.Calendar(firstweekday=calendar.MONDAY).monthdayscalendar(year, month)
    return [[date(year, month, day) if day else None for day in week] for week in weeks]


def _as_time(value):
    if isinstance(value, time):
        return value
    return time.fromisoformat(value)


def _merge(windows):
    merged = []
    for start, end in sorted(windows):
        if merged and start <= merged[-1][1]:
            merged[-1][1] = max(merged[-1][1], end)
        else:
            merged.append([start, end])
    return merged


def free_slots(blocks, bookings):
    """
    Free windows of one space on one day.

    ``blocks`` are availability rows and ``bookings`` booking rows as returned
    by the API. Unavailable blocks and inactive bookings are ignored; the
    result is a sorted list of ``(start, end)`` ``time`` pairs.
    """
    open_windows = _merge(
        (_as_time(b["start_time"]), _as_time(b["end_time"]))
        for b in blocks
        if b.get("is_available", True)
    )
    taken = _merge(
        (_as_time(b["start_time"]), _as_time(b["end_time"]))
        for b in bookings
        if b.get("status") in ACTIVE_BOOKING_STATUSES
    )

    slots = []
    for start, end in open_windows:
        cursor = start
        for busy_start, busy_end in taken:
            if busy_end <= cursor or busy_start >= end:
                continue
            if busy_start > cursor:
                slots.append((cursor, busy_start))
            cursor = max(cursor, busy_end)
        if cursor < end:
            slots.append((cursor, end))
    return slots
