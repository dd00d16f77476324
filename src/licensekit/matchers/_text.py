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

"""Literal text matchers.

Two flavours:

- :class:`SimpleTextMatcher`: case-sensitive substring of one line.
  Used for single-token text such as a URL.
- :class:`FullTextMatcher`: multi-word phrases.  Both the phrase and
  every line are pruned to lower-case letters and digits, and pruned
  lines are accumulated so a phrase can be wrapped over several lines
  and decorated with comment markers (``*``, ``#``, ``//``).

:func:`create_text_matcher` picks the flavour from the text itself.
"""

from __future__ import annotations

import re

from licensekit.matchers._types import AbstractMatcher

__all__ = [
    'FullTextMatcher',
    'SimpleTextMatcher',
    'create_text_matcher',
    'prune',
]

_NON_ALNUM_RE = re.compile(r'[\W_]+')
_WHITESPACE_RE = re.compile(r'\s')


def prune(text: str) -> str:
    """Reduce *text* to lower-case letters and digits.

    >>> prune('Apache License, Version 2.0')
    'apachelicenseversion20'
    """
    return _NON_ALNUM_RE.sub('', text).lower()


class SimpleTextMatcher(AbstractMatcher):
    """Matches a line containing *text* verbatim (case-sensitive)."""

    def __init__(self, text: str, id: str | None = None) -> None:  # noqa: A002
        super().__init__(id)
        if not text:
            raise ValueError('text matcher requires non-empty text')
        self.text = text

    def _hit(self, line: str) -> bool:
        return self.text in line


class FullTextMatcher(AbstractMatcher):
    """Matches *text* across one or more lines, ignoring formatting.

    Only the tail of the accumulated header that could still start a
    match is kept, so memory stays bounded by the phrase length.
    """

    def __init__(self, text: str, id: str | None = None) -> None:  # noqa: A002
        super().__init__(id)
        self.text = text
        self._pruned = prune(text)
        if not self._pruned:
            raise ValueError(f'full text matcher needs letters or digits, got {text!r}')
        self._buffer = ''

    def _hit(self, line: str) -> bool:
        self._buffer += prune(line)
        if self._pruned in self._buffer:
            return True
        keep = len(self._pruned) - 1
        self._buffer = self._buffer[-keep:] if keep else ''
        return False

    def reset(self) -> None:
        """Return to ``UNKNOWN`` and forget accumulated text."""
        super().reset()
        self._buffer = ''


def create_text_matcher(text: str, id: str | None = None) -> SimpleTextMatcher | FullTextMatcher:  # noqa: A002
    """Create a :class:`FullTextMatcher` if *text* contains whitespace.

    Single-token text gets the cheaper :class:`SimpleTextMatcher`.
    """
    if _WHITESPACE_RE.search(text):
        return FullTextMatcher(text, id=id)
    return SimpleTextMatcher(text, id=id)
