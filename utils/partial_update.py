from datetime import date, time
from decimal import Decimal, InvalidOperation

from utils.errors import ValidationError


def as_str(max_len=None, required=True):
    def coerce(value):
        if value is None:
            if required:
                raise ValueError("must not be null")
            return None
        if not isinstance(value, str):
            raise ValueError("must be a string")
        value = value.strip()
        if required and not value:
            raise ValueError("must not be empty")
        if max_len and len(value) > max_len:
            raise ValueError(f"must be at most {max_len} characters")
        return value
    return coerce


def as_int(minimum=None, nullable=False):
    def coerce(value):
        if value is None and nullable:
            return None
        if isinstance(value, bool):
            raise ValueError("must be an integer")
        try:
            value = int(value)
        except (TypeError, ValueError):
            raise ValueError("must be an integer")
        if minimum is not None and value < minimum:
            raise ValueError(f"must be >= {minimum}")
        return value
    return coerce


def as_money(value):
    if isinstance(value, bool) or value is None:
        raise ValueError("must be a number")
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValueError("must be a number")
    if not amount.is_finite() or amount < 0:
        raise ValueError("must be a non-negative number")
    return amount.quantize(Decimal("0.01"))


def as_bool(value):
    if not isinstance(value, bool):
        raise ValueError("must be true or false")
    return value


def as_date(value):
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValueError("must be a date (YYYY-MM-DD)")


def as_time(value):
    try:
        parsed = time.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValueError("must be a time (HH:MM or HH:MM:SS)")
    # windows are wall-clock times; offsets cannot be compared with them
    if parsed.tzinfo is not None:
        raise ValueError("must be a time (HH:MM or HH:MM:SS)")
    return parsed


def build_changes(data, schema):
    """
    Validate a partial update against a fixed schema.

    ``schema`` maps field name -> coercer. Only fields present in ``data``
    and known to the schema are returned; unknown keys are ignored. At least
    one field must be present.
    """
    if not isinstance(data, dict):
        raise ValidationError("JSON object body required")

    changes = {}
    errors = {}
    for field, coerce in schema.items():
        if field not in data:
            continue
        try:
            changes[field] = coerce(data[field])
        except ValueError as exc:
            errors[field] = str(exc)

    if errors:
        raise ValidationError("Invalid field values", details=errors)
    if not changes:
        raise ValidationError("No valid fields provided for update")
    return changes


def apply_changes(obj, changes):
    """Assign validated changes to a model; the ORM emits the parameterized UPDATE."""
    for field, value in changes.items():
        setattr(obj, field, value)
    return obj
