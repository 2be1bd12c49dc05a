from __future__ import annotations

import pytest

from app.models.shipment import ShipmentStatus
from app.services import shipment_lifecycle


def test_every_status_has_a_row_in_the_transition_table():
    assert set(shipment_lifecycle.TRANSITIONS) == set(ShipmentStatus)


@pytest.mark.parametrize("terminal", ["delivered", "cancelled"])
def test_terminal_states_have_no_outgoing_edges(terminal):
    assert shipment_lifecycle.is_terminal(terminal)
    for target in ShipmentStatus:
        assert not shipment_lifecycle.can_transition(terminal, target)


@pytest.mark.parametrize("current", ["draft", "submitted", "confirmed", "in_progress"])
def test_any_non_terminal_state_can_be_cancelled(current):
    assert shipment_lifecycle.can_transition(current, ShipmentStatus.CANCELLED)


def test_forward_progression_may_skip_steps_but_never_goes_back():
    assert shipment_lifecycle.can_transition("submitted", "in_progress")
    assert shipment_lifecycle.can_transition("draft", "delivered")
    assert not shipment_lifecycle.can_transition("confirmed", "submitted")
    assert not shipment_lifecycle.can_transition("in_progress", "draft")


def test_no_self_edges():
    for status in ShipmentStatus:
        assert not shipment_lifecycle.can_transition(status, status)


def test_unknown_status_values_are_rejected():
    assert shipment_lifecycle.parse_status("shipped") is None
    assert shipment_lifecycle.parse_status(None) is None
    assert shipment_lifecycle.parse_status(" Submitted ") == ShipmentStatus.SUBMITTED
    assert not shipment_lifecycle.can_transition("draft", "shipped")
    assert shipment_lifecycle.allowed_targets("bogus") == []


def test_only_drafts_may_be_deleted():
    assert shipment_lifecycle.allows_deletion("draft")
    assert not shipment_lifecycle.allows_deletion("submitted")
    assert not shipment_lifecycle.allows_deletion("cancelled")
