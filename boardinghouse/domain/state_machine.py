"""Canonical state transition helpers for status-bearing entities."""

from __future__ import annotations

from collections.abc import Hashable, Mapping

from boardinghouse.core.exceptions import StateTransitionError


class StateMachine:
    """Table-driven state machine; states are any hashable values, ``None`` included."""

    def __init__(self, transitions: Mapping[Hashable, set]) -> None:
        self._transitions = transitions

    def targets(self, current: Hashable) -> set:
        return set(self._transitions.get(current, set()))

    def can_transition(self, current: Hashable, target: Hashable) -> bool:
        return target in self._transitions.get(current, set())

    def assert_transition(self, current: Hashable, target: Hashable) -> None:
        if not self.can_transition(current=current, target=target):
            raise StateTransitionError(_label(current), _label(target))


def _label(state: Hashable) -> str | None:
    if state is None:
        return None
    return str(getattr(state, "value", state))
