"""Unit tests for the Order status transition table."""

from __future__ import annotations

import pytest

from modules.orders.constants import (
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    OrderStatus,
)
from modules.orders.models import Order

pytestmark = pytest.mark.unit

ALLOWED = [
    (source, target)
    for source, targets in VALID_TRANSITIONS.items()
    for target in targets
]
FORBIDDEN = [
    (source, target)
    for source in OrderStatus.values
    for target in OrderStatus.values
    if target not in VALID_TRANSITIONS[source]
]


class TestTransitionTable:
    def test_every_status_has_an_entry(self):
        assert set(VALID_TRANSITIONS) == set(OrderStatus.values)

    def test_terminal_states_have_no_exits(self):
        for status in TERMINAL_STATES:
            assert VALID_TRANSITIONS[status] == set()

    def test_every_live_status_can_be_cancelled(self):
        for status in set(OrderStatus.values) - TERMINAL_STATES:
            assert OrderStatus.CANCELLED in VALID_TRANSITIONS[status]

    def test_pending_may_skip_to_preparing(self):
        assert OrderStatus.PREPARING in VALID_TRANSITIONS[OrderStatus.PENDING]

    def test_pending_is_never_a_target(self):
        for targets in VALID_TRANSITIONS.values():
            assert OrderStatus.PENDING not in targets


class TestOrderHelpers:
    @pytest.mark.parametrize("source,target", ALLOWED)
    def test_allowed_transitions(self, source, target):
        assert Order(status=source).can_transition_to(target)

    @pytest.mark.parametrize("source,target", FORBIDDEN)
    def test_forbidden_transitions(self, source, target):
        assert not Order(status=source).can_transition_to(target)

    def test_is_terminal(self):
        assert Order(status=OrderStatus.DELIVERED).is_terminal
        assert Order(status=OrderStatus.CANCELLED).is_terminal
        assert not Order(status=OrderStatus.READY).is_terminal
