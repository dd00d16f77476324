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

r"""``SPDX-License-Identifier`` tag matcher.

Matches a header line such as::

    # SPDX-License-Identifier: Apache-2.0
    /* SPDX-License-Identifier: MIT OR Apache-2.0 */
    SPDX-License-Identifier:\tW3C

when the tag's license expression mentions the configured identifier.
Operators (``AND``, ``OR``, ``WITH``), parentheses and the ``+``
or-later suffix are ignored; identifiers compare case-insensitively.
"""

from __future__ import annotations

import re

from licensekit.matchers._types import AbstractMatcher

__all__ = [
    'SpdxMatcher',
    'spdx_identifiers',
]

_TAG_RE = re.compile(r'SPDX-License-Identifier:\s*(?P<expr>.*)', re.IGNORECASE)
_ID_RE = re.compile(r'[A-Za-z0-9.\-:]+')
_OPERATORS = frozenset({'and', 'or', 'with'})
# Comment terminators that may trail the tag on the same line.
_TRAILERS = ('*/', '-->', '--%>', '%>', '#}')


def spdx_identifiers(line: str) -> frozenset[str]:
    """Return the lower-cased identifiers named by an SPDX tag in *line*.

    >>> sorted(spdx_identifiers('// SPDX-License-Identifier: MIT OR Apache-2.0+'))
    ['apache-2.0', 'mit']
    """
    found = _TAG_RE.search(line)
    if found is None:
        return frozenset()
    expr = found.group('expr')
    for trailer in _TRAILERS:
        cut = expr.find(trailer)
        if cut >= 0:
            expr = expr[:cut]
    tokens = (t.lower() for t in _ID_RE.findall(expr))
    return frozenset(t for t in tokens if t not in _OPERATORS)


class SpdxMatcher(AbstractMatcher):
    """Matches an SPDX tag line naming *name*."""

    def __init__(self, name: str, id: str | None = None) -> None:  # noqa: A002
        super().__init__(id)
        if not name.strip():
            raise ValueError('spdx matcher requires a license identifier')
        self.name = name.strip()
        self._key = self.name.lower()

    def _hit(self, line: str) -> bool:
        return self._key in spdx_identifiers(line)
