# Copyright 2026 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0

r"""Pure types for header matching.

Every matcher is a tri-state recognizer fed one header line at a time.
The transition rules live here as plain functions over :class:`State`
so they can be tested without feeding any text; matcher objects are
thin wrappers that hold the current state.

State machine::

    ┌──────────┐  qualifying line   ┌──────────┐
    │ UNKNOWN  │ ─────────────────► │   TRUE   │  (sticky)
    └──────────┘                    └──────────┘
         │
         │ finalize_state()
         ▼
    ┌──────────┐
    │  FALSE   │
    └──────────┘

This module has **zero** runtime dependencies beyond the standard library.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import Protocol, runtime_checkable

__all__ = [
    'AbstractMatcher',
    'Matcher',
    'State',
    'combine_all',
    'combine_any',
    'finalize',
    'invert',
    'latch',
]


class State(Enum):
    """Result of a matcher so far."""

    UNKNOWN = 'unknown'
    TRUE = 'true'
    FALSE = 'false'


def latch(state: State, hit: bool) -> State:
    """Return ``TRUE`` on a hit, otherwise leave *state* unchanged.

    >>> latch(State.UNKNOWN, True)
    <State.TRUE: 'true'>
    >>> latch(State.TRUE, False)
    <State.TRUE: 'true'>
    """
    return State.TRUE if hit else state


def finalize(state: State) -> State:
    """Map a lingering ``UNKNOWN`` to ``FALSE``.

    No evidence within the scanned header counts as a non-match.
    """
    return State.FALSE if state is State.UNKNOWN else state


def invert(state: State) -> State:
    """Swap ``TRUE`` and ``FALSE``; ``UNKNOWN`` stays ``UNKNOWN``."""
    if state is State.TRUE:
        return State.FALSE
    if state is State.FALSE:
        return State.TRUE
    return State.UNKNOWN


def combine_all(states: Iterable[State]) -> State:
    """Conjunction: ``FALSE`` if any is false, else ``UNKNOWN`` if any is unknown."""
    result = State.TRUE
    for state in states:
        if state is State.FALSE:
            return State.FALSE
        if state is State.UNKNOWN:
            result = State.UNKNOWN
    return result


def combine_any(states: Iterable[State]) -> State:
    """Disjunction: ``TRUE`` if any is true, else ``UNKNOWN`` if any is unknown."""
    result = State.FALSE
    for state in states:
        if state is State.TRUE:
            return State.TRUE
        if state is State.UNKNOWN:
            result = State.UNKNOWN
    return result


@runtime_checkable
class Matcher(Protocol):
    """Protocol every header matcher implements.

    Matchers are stateful: one instance accumulates state across the
    ordered lines of one file and must be :meth:`reset` (or cloned)
    before it is used for another.
    """

    @property
    def id(self) -> str | None:
        """Stable identifier, or ``None`` for anonymous matchers."""
        ...

    def matches(self, line: str) -> State:
        """Feed one line and return the resulting state."""
        ...

    def current_state(self) -> State:
        """Return the state without feeding anything."""
        ...

    def reset(self) -> None:
        """Return to ``UNKNOWN`` so the matcher can be reused."""
        ...

    def finalize_state(self) -> State:
        """Signal that no more lines follow and return the final state."""
        ...


class AbstractMatcher:
    """Base class for leaf matchers that latch to ``TRUE``.

    Subclasses implement :meth:`_hit` to say whether a single line
    qualifies.
    """

    def __init__(self, id: str | None = None) -> None:  # noqa: A002
        self._id = id or None
        self._state = State.UNKNOWN

    @property
    def id(self) -> str | None:
        """Stable identifier, or ``None``."""
        return self._id

    def _hit(self, line: str) -> bool:
        raise NotImplementedError

    def matches(self, line: str) -> State:
        """Feed one line; a qualifying line latches the state to ``TRUE``."""
        if self._state is State.UNKNOWN:
            self._state = latch(self._state, self._hit(line))
        return self._state

    def current_state(self) -> State:
        """Return the current state."""
        return self._state

    def reset(self) -> None:
        """Return to ``UNKNOWN``."""
        self._state = State.UNKNOWN

    def finalize_state(self) -> State:
        """Map ``UNKNOWN`` to ``FALSE`` and return the result."""
        self._state = finalize(self._state)
        return self._state

    def __repr__(self) -> str:
        """Return a debug representation including id and state."""
        return f'{type(self).__name__}(id={self._id!r}, state={self._state.value})'
