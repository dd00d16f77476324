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

r"""Boolean combinators and references over other matchers.

Semantics::

    ┌───────────┬──────────────────────────────────────────────────────┐
    │ Matcher   │ Result                                               │
    ├───────────┼──────────────────────────────────────────────────────┤
    │ And       │ FALSE once any child is FALSE, TRUE once all are     │
    │           │ TRUE, otherwise UNKNOWN.  Stops feeding a line at    │
    │           │ the first FALSE child.                               │
    ├───────────┼──────────────────────────────────────────────────────┤
    │ Or        │ TRUE once any child is TRUE, FALSE once all are      │
    │           │ FALSE, otherwise UNKNOWN.  Stops feeding a line at   │
    │           │ the first TRUE child.                                │
    ├───────────┼──────────────────────────────────────────────────────┤
    │ Not       │ The inverse of its single child.                     │
    ├───────────┼──────────────────────────────────────────────────────┤
    │ MatcherRef│ Delegates to a private copy of a named matcher.      │
    └───────────┴──────────────────────────────────────────────────────┘

Composites expose the same contract as leaves, so trees nest to any
depth.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable, Sequence

from licensekit.matchers._types import Matcher, State, combine_all, combine_any, invert

__all__ = [
    'AndMatcher',
    'MatcherRef',
    'NotMatcher',
    'OrMatcher',
]


class _CompositeMatcher:
    """Shared plumbing for matchers with children."""

    def __init__(self, children: Iterable[Matcher], id: str | None = None) -> None:  # noqa: A002
        self._id = id or None
        self.children: tuple[Matcher, ...] = tuple(children)
        if not self.children:
            raise ValueError(f'{type(self).__name__} requires at least one child matcher')

    @property
    def id(self) -> str | None:
        """Stable identifier, or ``None``."""
        return self._id

    def reset(self) -> None:
        """Reset every child."""
        for child in self.children:
            child.reset()

    def __repr__(self) -> str:
        """Return a debug representation including children."""
        return f'{type(self).__name__}(id={self._id!r}, children={list(self.children)!r})'


class AndMatcher(_CompositeMatcher):
    """True when every child matches."""

    def matches(self, line: str) -> State:
        """Feed *line* to each child until one is ``FALSE``."""
        for child in self.children:
            if child.matches(line) is State.FALSE:
                return State.FALSE
        return self.current_state()

    def current_state(self) -> State:
        """Combine child states with :func:`combine_all`."""
        return combine_all(child.current_state() for child in self.children)

    def finalize_state(self) -> State:
        """Finalize every child, then combine."""
        return combine_all([child.finalize_state() for child in self.children])


class OrMatcher(_CompositeMatcher):
    """True when any child matches."""

    def matches(self, line: str) -> State:
        """Feed *line* to each child until one is ``TRUE``."""
        for child in self.children:
            if child.matches(line) is State.TRUE:
                return State.TRUE
        return self.current_state()

    def current_state(self) -> State:
        """Combine child states with :func:`combine_any`."""
        return combine_any(child.current_state() for child in self.children)

    def finalize_state(self) -> State:
        """Finalize every child, then combine."""
        return combine_any([child.finalize_state() for child in self.children])


class NotMatcher(_CompositeMatcher):
    """Inverts exactly one child."""

    def __init__(self, children: Sequence[Matcher] | Matcher, id: str | None = None) -> None:  # noqa: A002
        if isinstance(children, Matcher):
            children = [children]
        super().__init__(children, id=id)
        if len(self.children) != 1:
            raise ValueError(f'NotMatcher requires exactly one child matcher, got {len(self.children)}')

    @property
    def child(self) -> Matcher:
        """The inverted matcher."""
        return self.children[0]

    def matches(self, line: str) -> State:
        """Feed *line* to the child and invert."""
        return invert(self.child.matches(line))

    def current_state(self) -> State:
        """Inverted child state."""
        return invert(self.child.current_state())

    def finalize_state(self) -> State:
        """Inverted final child state."""
        return invert(self.child.finalize_state())


class MatcherRef:
    """Stands in for the matcher registered under *refid*.

    The target is copied when the reference is created, so every
    referring tree owns independent state and a line is never fed
    twice to the same instance.
    """

    def __init__(self, refid: str, target: Matcher, id: str | None = None) -> None:  # noqa: A002
        self._id = id
        self.refid = refid
        self.target: Matcher = copy.deepcopy(target)
        self.target.reset()

    @property
    def id(self) -> str | None:
        """The reference's own identifier, distinct from :attr:`refid`."""
        return self._id

    def matches(self, line: str) -> State:
        """Delegate to the copied target."""
        return self.target.matches(line)

    def current_state(self) -> State:
        """Delegate to the copied target."""
        return self.target.current_state()

    def reset(self) -> None:
        """Delegate to the copied target."""
        self.target.reset()

    def finalize_state(self) -> State:
        """Delegate to the copied target."""
        return self.target.finalize_state()

    def __repr__(self) -> str:
        """Return a debug representation naming the referenced id."""
        return f'MatcherRef(refid={self.refid!r})'
