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

r"""Copyright notice matcher.

Recognizes a typical copyright header line with an optional year or
year range and an optional owner.  Matching is case-insensitive for the
copyright word, the symbols and the owner.

Supported lines, with ``owner='FooBar'``, ``start='2010'``::

    * Copyright 2010 FooBar. *
    * Copyright (c) 2010-2012 FooBar *
    # copyright 2010 foobar
    // (C) FooBar, 2010

How a line is tested::

    "  * Copyright (c) 2010-2012 FooBar. *"
         └───┬───┘└──────────┬──────────┘
        symbol found    remainder: must match the date/owner pattern
                        at its very start (after an optional second
                        symbol and whitespace)

The owner is a regular-expression fragment, so special characters must
be escaped: use ``FooBar \(www\.foobar\.com\)`` to match
``FooBar (www.foobar.com)``.  A fragment that does not compile raises
:class:`~licensekit.errors.ConfigurationError` at construction.
"""

from __future__ import annotations

import re

from licensekit.errors import ConfigurationError
from licensekit.matchers._types import AbstractMatcher, State, latch

__all__ = [
    'CopyrightMatcher',
    'compile_patterns',
    'step',
]

_SYMBOL = r'\([Cc]\)|©'
_COPYRIGHT_RE = re.compile(rf'(\b)?{_SYMBOL}|Copyright\b', re.IGNORECASE)
_ONE_PART = r'\s+((' + _SYMBOL + r')\s+)?{0}'
_TWO_PART = r'\s+((' + _SYMBOL + r')\s+)?{0},?\s+{1}'
_ANY_YEAR = '[0-9]{4}'


def _date_expression(start: str | None, stop: str | None) -> str:
    start = (start or '').strip()
    stop = (stop or '').strip()
    if not start:
        return ''
    if stop:
        return rf'{start}\s*-\s*{stop}'
    return start


def compile_patterns(
    start: str | None = None,
    stop: str | None = None,
    owner: str | None = None,
) -> tuple[re.Pattern[str], ...]:
    """Compile the remainder patterns for a copyright configuration.

    Returns one pattern, or two (date-owner and owner-date) when both an
    owner and a date are configured.

    Raises:
        ConfigurationError: If *owner* is not a valid regex fragment.
    """
    date = _date_expression(start, stop)
    owner = (owner or '').strip()
    if not owner:
        parts = [_ONE_PART.format(date or _ANY_YEAR)]
    elif not date:
        parts = [_ONE_PART.format(owner)]
    else:
        parts = [_TWO_PART.format(date, owner), _TWO_PART.format(owner, date)]
    try:
        return tuple(re.compile(p, re.IGNORECASE) for p in parts)
    except re.error as exc:
        raise ConfigurationError(
            f'invalid copyright pattern (owner={owner!r}, start={start!r}, end={stop!r}): {exc}',
            node='copyright',
        ) from exc


def step(state: State, line: str, patterns: tuple[re.Pattern[str], ...]) -> State:
    """Pure transition: feed *line* to a copyright matcher in *state*."""
    if state is not State.UNKNOWN:
        return state
    found = _COPYRIGHT_RE.search(line)
    if found is None:
        return state
    remainder = line[found.end() :]
    return latch(state, any(p.match(remainder) for p in patterns))


class CopyrightMatcher(AbstractMatcher):
    """Matches a copyright line with an optional date and owner.

    Args:
        start: First year (or the only year) of the notice.
        stop: Last year of a range; ignored without *start*.
        owner: Regex fragment for the copyright holder.
        id: Optional stable identifier.
    """

    def __init__(
        self,
        start: str | None = None,
        stop: str | None = None,
        owner: str | None = None,
        id: str | None = None,  # noqa: A002
    ) -> None:
        super().__init__(id)
        self.start = start
        self.stop = stop
        self.owner = owner
        self._patterns = compile_patterns(start, stop, owner)

    def matches(self, line: str) -> State:
        """Feed one line through :func:`step`."""
        self._state = step(self._state, line, self._patterns)
        return self._state
