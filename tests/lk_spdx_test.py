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

"""Tests for the SPDX tag matcher."""

from __future__ import annotations

import pytest
from licensekit.matchers import SpdxMatcher, State, spdx_identifiers


class TestSpdxIdentifiers:
    """Tests for spdx_identifiers()."""

    def test_no_tag(self) -> None:
        """Lines without the tag yield nothing."""
        assert spdx_identifiers('# Licensed under MIT') == frozenset()

    def test_single(self) -> None:
        """A single identifier is lower-cased."""
        assert spdx_identifiers('# SPDX-License-Identifier: Apache-2.0') == frozenset({'apache-2.0'})

    def test_expression(self) -> None:
        """Operators, parentheses and or-later markers are dropped."""
        line = '// SPDX-License-Identifier: (MIT OR GPL-2.0+) AND Classpath-exception-2.0'
        assert spdx_identifiers(line) == frozenset({'mit', 'gpl-2.0', 'classpath-exception-2.0'})

    def test_with_operator(self) -> None:
        """``WITH`` is an operator, not an identifier."""
        line = 'SPDX-License-Identifier: GPL-2.0-only WITH Linux-syscall-note'
        assert spdx_identifiers(line) == frozenset({'gpl-2.0-only', 'linux-syscall-note'})

    def test_comment_trailer(self) -> None:
        """A closing comment marker is not part of the expression."""
        assert spdx_identifiers('/* SPDX-License-Identifier: MIT */') == frozenset({'mit'})
        assert spdx_identifiers('<!-- SPDX-License-Identifier: W3C -->') == frozenset({'w3c'})


class TestSpdxMatcher:
    """Tests for SpdxMatcher."""

    def test_matches(self) -> None:
        """A tag naming the identifier matches."""
        m = SpdxMatcher('Apache-2.0')
        assert m.matches('# SPDX-License-Identifier: Apache-2.0') is State.TRUE

    def test_case_insensitive(self) -> None:
        """Identifiers compare case-insensitively."""
        m = SpdxMatcher('MIT')
        assert m.matches('# spdx-license-identifier: mit') is State.TRUE

    def test_partial_identifier_does_not_match(self) -> None:
        """``GPL-2.0`` does not match ``GPL-2.0-only``."""
        m = SpdxMatcher('GPL-2.0')
        m.matches('# SPDX-License-Identifier: GPL-2.0-only')
        assert m.finalize_state() is State.FALSE

    def test_in_expression(self) -> None:
        """One operand of an expression is enough."""
        m = SpdxMatcher('Apache-2.0')
        assert m.matches('# SPDX-License-Identifier: MIT OR Apache-2.0') is State.TRUE

    def test_blank_name_rejected(self) -> None:
        """A matcher needs an identifier."""
        with pytest.raises(ValueError, match='identifier'):
            SpdxMatcher('  ')
