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

"""Tests for the matcher builders."""

from __future__ import annotations

import pytest
from licensekit.builders import (
    AndBuilder,
    CopyrightBuilder,
    MatcherRefBuilder,
    NotBuilder,
    OrBuilder,
    SpdxBuilder,
    TextBuilder,
)
from licensekit.errors import ConfigurationError
from licensekit.matchers import (
    AndMatcher,
    CopyrightMatcher,
    FullTextMatcher,
    MatcherRef,
    NotMatcher,
    SimpleTextMatcher,
    SpdxMatcher,
    State,
)


class TestConfigure:
    """Tests for MatcherBuilder.configure()."""

    def test_applies_known_attributes(self) -> None:
        """Attributes go through the option table."""
        b = CopyrightBuilder()
        b.configure({'id': 'acme', 'owner': 'Acme', 'start': '2020', 'end': '2022'})
        assert (b.id, b.owner, b.start, b.end) == ('acme', 'Acme', '2020', '2022')

    def test_unsupported_attribute(self) -> None:
        """An attribute with no setter is a configuration error."""
        with pytest.raises(ConfigurationError, match="unsupported attribute 'colour'") as exc_info:
            SpdxBuilder().configure({'colour': 'red'}, source='rules.xml')
        assert exc_info.value.source == 'rules.xml'
        assert exc_info.value.node == 'spdx'

    def test_error_names_alias_tag(self) -> None:
        """Errors name the tag used in the document."""
        with pytest.raises(ConfigurationError) as exc_info:
            TextBuilder().configure({'owner': 'x'}, tag='phrase')
        assert exc_info.value.node == 'phrase'

    def test_blank_id(self) -> None:
        """A blank id leaves the matcher anonymous."""
        b = TextBuilder().set_id('  ')
        assert b.id is None


class TestLeafBuilders:
    """Tests for the text, copyright and spdx builders."""

    def test_text_single_token(self) -> None:
        """Single-token text builds a simple matcher."""
        b = TextBuilder()
        b.set_text('LICENSE-2.0')
        assert isinstance(b.build(), SimpleTextMatcher)

    def test_text_phrase(self) -> None:
        """A phrase builds a full-text matcher carrying the id."""
        b = TextBuilder()
        b.set_id('al')
        b.set_text('Licensed under the Apache License')
        m = b.build()
        assert isinstance(m, FullTextMatcher)
        assert m.id == 'al'

    def test_text_empty(self) -> None:
        """Text nodes need content."""
        with pytest.raises(ConfigurationError, match='requires text'):
            TextBuilder().build()

    def test_copyright(self) -> None:
        """The copyright builder passes its settings through."""
        b = CopyrightBuilder().set_owner('Acme').set_start('2020')
        m = b.build()
        assert isinstance(m, CopyrightMatcher)
        assert m.matches('Copyright 2020 Acme') is State.TRUE

    def test_copyright_bad_owner(self) -> None:
        """An invalid owner fragment surfaces as a configuration error."""
        with pytest.raises(ConfigurationError, match='invalid copyright pattern'):
            CopyrightBuilder().set_owner('[unclosed').build()

    def test_spdx(self) -> None:
        """The spdx builder needs a name."""
        assert isinstance(SpdxBuilder().set_name('MIT').build(), SpdxMatcher)
        with pytest.raises(ConfigurationError, match='name attribute'):
            SpdxBuilder().build()


class TestCompositeBuilders:
    """Tests for and/or/not builders."""

    def _text(self, text: str) -> TextBuilder:
        b = TextBuilder()
        b.set_text(text)
        return b

    def test_and(self) -> None:
        """Children are built in order."""
        b = AndBuilder().add(self._text('alpha')).add(self._text('beta'))
        m = b.build()
        assert isinstance(m, AndMatcher)
        assert len(m.children) == 2

    @pytest.mark.parametrize('builder_cls', [AndBuilder, OrBuilder])
    def test_requires_children(self, builder_cls: type[AndBuilder] | type[OrBuilder]) -> None:
        """And/or without children is an error."""
        with pytest.raises(ConfigurationError, match='at least one child'):
            builder_cls().build()

    def test_not(self) -> None:
        """Not wraps exactly one child."""
        assert isinstance(NotBuilder().add(self._text('GPL')).build(), NotMatcher)

    def test_not_with_two_children(self) -> None:
        """Not rejects a second child."""
        b = NotBuilder().add(self._text('a')).add(self._text('b'))
        with pytest.raises(ConfigurationError, match='exactly one child'):
            b.build()


class TestMatcherRefBuilder:
    """Tests for MatcherRefBuilder."""

    def test_resolves_through_resolver(self) -> None:
        """The resolver supplies the target at build time."""
        target = SimpleTextMatcher('alpha', id='a')
        b = MatcherRefBuilder()
        b.configure({'refid': 'a'})
        b.set_resolver({'a': target}.__getitem__)
        m = b.build()
        assert isinstance(m, MatcherRef)
        assert m.refid == 'a'

    def test_keeps_declared_id(self) -> None:
        """An id attribute on the reference reaches the built matcher."""
        b = MatcherRefBuilder()
        b.configure({'refid': 'a', 'id': 'r'})
        b.set_resolver({'a': SimpleTextMatcher('alpha', id='a')}.__getitem__)
        assert b.build().id == 'r'

    def test_requires_refid(self) -> None:
        """A reference must name something."""
        with pytest.raises(ConfigurationError, match='refid'):
            MatcherRefBuilder().build()

    def test_requires_resolver(self) -> None:
        """A reference built outside a reader has nothing to resolve against."""
        b = MatcherRefBuilder().set_refid('a')
        with pytest.raises(ConfigurationError, match='no matcher registry'):
            b.build()
