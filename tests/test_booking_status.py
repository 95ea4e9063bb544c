from types import SimpleNamespace

import pytest

from services.booking_status import apply_transition, ensure_transition, validate_status
from utils.errors import InvalidState, ValidationError


@pytest.mark.parametrize("current", ["pending", "confirmed"])
@pytest.mark.parametrize("target", ["pending", "confirmed", "cancelled", "completed"])
def test_active_status_can_move_anywhere(current, target):
    assert ensure_transition(current, target) == target


@pytest.mark.parametrize("current", ["cancelled", "completed"])
def test_terminal_status_never_moves(current):
    with pytest.raises(InvalidState):
        ensure_transition(current, "confirmed")


def test_unknown_status_is_a_validation_error():
    with pytest.raises(ValidationError):
        validate_status("archived")
    with pytest.raises(ValidationError):
        validate_status("")


def test_apply_transition_returns_previous_and_leaves_terminal_untouched():
    booking = SimpleNamespace(status="pending")
    assert apply_transition(booking, "confirmed") == "pending"
    assert booking.status == "confirmed"

    done = SimpleNamespace(status="completed")
    with pytest.raises(InvalidState):
        apply_transition(done, "cancelled")
    assert done.status == "completed"
