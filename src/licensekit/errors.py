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

"""Error types shared across licensekit.

This module must have **zero** imports from other ``licensekit``
modules so it can be imported from anywhere without cycles.
"""

from __future__ import annotations

__all__ = [
    'ConfigurationError',
]


class ConfigurationError(ValueError):
    """Raised when rule documents or tool settings are malformed.

    Covers every self-inconsistent declarative input: unknown matcher
    tags, unsupported attributes, missing required attributes,
    duplicate or unresolved identifiers, invalid patterns and sources
    that cannot be read or parsed.  Always fatal to the load.

    Attributes:
        detail: Human-readable description of the problem.
        source: The document (path or URL) the problem was found in,
            or ``''`` when unknown.
        node: The offending node tag (e.g. ``"copyright"``), or ``''``.
    """

    def __init__(self, detail: str, *, source: str = '', node: str = '') -> None:
        """Initialize with a detail message and optional location."""
        self.detail = detail
        self.source = source
        self.node = node
        where = []
        if source:
            where.append(source)
        if node:
            where.append(f'<{node}>')
        prefix = f'{" ".join(where)}: ' if where else ''
        super().__init__(f'{prefix}{detail}')
