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

"""Tests for the matcher registries and plugin catalogue."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import pytest
from licensekit import registry
from licensekit.builders import MatcherRefBuilder, OrBuilder, TextBuilder, TextCaptureBuilder
from licensekit.errors import ConfigurationError
from licensekit.matchers import Matcher, SimpleTextMatcher
from licensekit.registry import (
    BUILTIN_BUILDERS,
    ENTRY_POINT_GROUP,
    IdentifierRegistry,
    MatcherRegistry,
    lookup_matcher_plugin,
    register_matcher_plugin,
)


class _UpperBuilder(TextCaptureBuilder):
    tag = 'upper'

    def _build(self) -> Matcher:
        return SimpleTextMatcher(self.text.upper(), id=self.id)


@dataclass
class _FakeEntryPoint:
    name: str
    value: str
    target: Any

    def load(self) -> Any:
        if isinstance(self.target, Exception):
            raise self.target
        return self.target


@pytest.fixture(autouse=True)
def _isolated_plugins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(registry, '_PLUGINS', {})
    monkeypatch.setattr(registry, 'entry_points', lambda group: [])


class TestPluginCatalogue:
    """Tests for register_matcher_plugin() and lookup_matcher_plugin()."""

    def test_builtins_are_found(self) -> None:
        """Every built-in tag resolves to its builder."""
        for name, factory in BUILTIN_BUILDERS.items():
            assert lookup_matcher_plugin(name) is factory

    def test_register_and_lookup(self) -> None:
        """A registered plugin can be looked up."""
        register_matcher_plugin('upper', _UpperBuilder)
        assert lookup_matcher_plugin('upper') is _UpperBuilder

    def test_register_twice_same_factory(self) -> None:
        """Re-registering the same factory is harmless."""
        register_matcher_plugin('upper', _UpperBuilder)
        register_matcher_plugin('upper', _UpperBuilder)

    def test_name_clash(self) -> None:
        """A name cannot be taken by two factories."""
        with pytest.raises(ConfigurationError, match='already registered'):
            register_matcher_plugin('text', _UpperBuilder)

    def test_unknown(self) -> None:
        """An unknown plugin name is a configuration error."""
        with pytest.raises(ConfigurationError, match="no matcher plugin named 'nope'"):
            lookup_matcher_plugin('nope')

    def test_entry_point(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Plugins are discovered through the entry-point group."""
        seen: list[str] = []

        def fake_entry_points(group: str) -> list[_FakeEntryPoint]:
            seen.append(group)
            return [_FakeEntryPoint('upper', 'acme.builders:UpperBuilder', _UpperBuilder)]

        monkeypatch.setattr(registry, 'entry_points', fake_entry_points)
        assert lookup_matcher_plugin('upper') is _UpperBuilder
        assert seen == [ENTRY_POINT_GROUP]
        # Cached after the first load.
        assert lookup_matcher_plugin('upper') is _UpperBuilder
        assert len(seen) == 1

    def test_entry_point_import_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A plugin that fails to import is a configuration error."""
        ep = _FakeEntryPoint('upper', 'missing.module:Builder', ImportError('No module named missing'))
        monkeypatch.setattr(registry, 'entry_points', lambda group: [ep])
        with pytest.raises(ConfigurationError, match='could not be imported'):
            lookup_matcher_plugin('upper')


class TestMatcherRegistry:
    """Tests for MatcherRegistry."""

    def test_builtin_tags(self) -> None:
        """A fresh registry knows the built-in tags."""
        reg = MatcherRegistry()
        assert set(reg) == set(BUILTIN_BUILDERS)
        assert 'copyright' in reg
        assert len(reg) == len(BUILTIN_BUILDERS)

    def test_builder_for_returns_fresh_instances(self) -> None:
        """Every call creates a new builder."""
        reg = MatcherRegistry()
        first, second = reg.builder_for('text'), reg.builder_for('text')
        assert isinstance(first, TextBuilder)
        assert first is not second

    def test_unknown_tag(self) -> None:
        """Unknown tags are reported with the source."""
        with pytest.raises(ConfigurationError, match='unknown matcher tag') as exc_info:
            MatcherRegistry().builder_for('regex', source='rules.xml')
        assert exc_info.value.node == 'regex'
        assert exc_info.value.source == 'rules.xml'

    def test_register_alias(self) -> None:
        """A tag can be bound to a plugin factory."""
        reg = MatcherRegistry()
        reg.register('upper', _UpperBuilder)
        reg.register('upper', _UpperBuilder)
        assert isinstance(reg.builder_for('upper'), _UpperBuilder)

    def test_rebinding_conflict(self) -> None:
        """A built-in tag cannot be rebound to another factory."""
        with pytest.raises(ConfigurationError, match='already bound'):
            MatcherRegistry().register('text', _UpperBuilder)

    def test_registries_are_independent(self) -> None:
        """Registering on one registry does not affect another."""
        a, b = MatcherRegistry(), MatcherRegistry()
        a.register('upper', _UpperBuilder)
        assert 'upper' not in b


class TestIdentifierRegistry:
    """Tests for IdentifierRegistry."""

    def _text(self, text: str, id: str | None = None) -> TextBuilder:  # noqa: A002
        b = TextBuilder()
        b.set_text(text)
        if id:
            b.set_id(id)
        return b

    def test_anonymous_not_recorded(self) -> None:
        """Builders without an id pass through unchanged."""
        ids = IdentifierRegistry()
        b = self._text('alpha')
        assert ids.declare(b) is b

    def test_built_once(self) -> None:
        """Every build of an identified builder yields the same matcher."""
        ids = IdentifierRegistry()
        declared = ids.declare(self._text('alpha', id='a'))
        first = declared.build()
        assert declared.build() is first
        assert ids.resolve('a') is first
        assert ids.matchers == {'a': first}
        assert 'a' in ids

    def test_duplicate_id(self) -> None:
        """Two builders cannot share an id."""
        ids = IdentifierRegistry()
        ids.declare(self._text('alpha', id='a'))
        with pytest.raises(ConfigurationError, match="duplicate matcher id 'a'"):
            ids.declare(self._text('beta', id='a'), source='second.xml')

    def test_unknown_reference(self) -> None:
        """Resolving an undeclared id fails."""
        with pytest.raises(ConfigurationError, match="unknown matcher id 'x'"):
            IdentifierRegistry().resolve('x')

    def test_forward_reference(self) -> None:
        """A reference may be declared before its target."""
        ids = IdentifierRegistry()
        ref = MatcherRefBuilder().set_refid('later')
        ref.set_resolver(ids.resolve)
        ids.declare(self._text('alpha', id='later'))
        assert ref.build().current_state().value == 'unknown'

    def test_cycle(self) -> None:
        """A matcher that refers to itself is reported."""
        ids = IdentifierRegistry()
        ref_b = MatcherRefBuilder().set_refid('b')
        ref_b.set_resolver(ids.resolve)
        ref_a = MatcherRefBuilder().set_refid('a')
        ref_a.set_resolver(ids.resolve)
        ids.declare(OrBuilder().add(ref_b).set_id('a'))
        ids.declare(OrBuilder().add(ref_a).set_id('b'))
        with pytest.raises(ConfigurationError, match='circular matcher reference: a -> b -> a'):
            ids.resolve('a')
