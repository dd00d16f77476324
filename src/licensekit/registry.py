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

r"""Matcher-kind registry, plugin catalogue and identifier registry.

Three tables, three lifetimes::

    ┌─────────────────────┬─────────────────────────────────────────────┐
    │ Table               │ Contents / lifetime                         │
    ├─────────────────────┼─────────────────────────────────────────────┤
    │ plugin catalogue    │ factory name → builder factory.  Process-   │
    │                     │ wide: built-ins, register_matcher_plugin() │
    │                     │ calls and the ``licensekit.matchers``       │
    │                     │ entry-point group.                          │
    ├─────────────────────┼─────────────────────────────────────────────┤
    │ MatcherRegistry     │ tag → builder factory.  One per rule        │
    │                     │ reader: built-in tags plus the kinds a      │
    │                     │ document's ``<matchers>`` section declares. │
    ├─────────────────────┼─────────────────────────────────────────────┤
    │ IdentifierRegistry  │ matcher id → the one built matcher.  One    │
    │                     │ per rule reader, filled during the build.   │
    └─────────────────────┴─────────────────────────────────────────────┘

Registering a third-party kind from code::

    from licensekit.registry import register_matcher_plugin

    register_matcher_plugin('acme-regex', RegexBuilder)

or from a distribution's metadata::

    [project.entry-points.'licensekit.matchers']
    acme-regex = 'acme_rules.builders:RegexBuilder'

A rule document then enables it, optionally under an alias tag::

    <matchers>
      <matcher factory="acme-regex" name="regex"/>
    </matchers>
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from importlib.metadata import entry_points

from licensekit.builders import (
    AndBuilder,
    CopyrightBuilder,
    MatcherBuilder,
    MatcherRefBuilder,
    NotBuilder,
    OrBuilder,
    SpdxBuilder,
    TextBuilder,
)
from licensekit.errors import ConfigurationError
from licensekit.logging import get_logger
from licensekit.matchers import Matcher

__all__ = [
    'BUILTIN_BUILDERS',
    'ENTRY_POINT_GROUP',
    'IdentifierRegistry',
    'MatcherFactory',
    'MatcherRegistry',
    'lookup_matcher_plugin',
    'register_matcher_plugin',
]

logger = get_logger(__name__)

MatcherFactory = Callable[[], MatcherBuilder]

ENTRY_POINT_GROUP = 'licensekit.matchers'

BUILTIN_BUILDERS: Mapping[str, MatcherFactory] = {
    TextBuilder.tag: TextBuilder,
    CopyrightBuilder.tag: CopyrightBuilder,
    SpdxBuilder.tag: SpdxBuilder,
    AndBuilder.tag: AndBuilder,
    OrBuilder.tag: OrBuilder,
    NotBuilder.tag: NotBuilder,
    MatcherRefBuilder.tag: MatcherRefBuilder,
}

_PLUGINS: dict[str, MatcherFactory] = {}


def register_matcher_plugin(name: str, factory: MatcherFactory) -> None:
    """Make *factory* available to rule documents under *name*.

    Re-registering the same factory is a no-op; a different factory
    under a taken name is an error.

    Raises:
        ConfigurationError: If *name* is already taken.
    """
    existing = _PLUGINS.get(name) or BUILTIN_BUILDERS.get(name)
    if existing is not None and existing is not factory:
        raise ConfigurationError(f'matcher plugin {name!r} is already registered')
    _PLUGINS[name] = factory
    logger.debug('matcher_plugin_registered', name=name)


def _entry_point_factory(name: str) -> MatcherFactory | None:
    for ep in entry_points(group=ENTRY_POINT_GROUP):
        if ep.name != name:
            continue
        try:
            factory = ep.load()
        except ImportError as exc:
            raise ConfigurationError(f'matcher plugin {name!r} could not be imported: {exc}') from exc
        logger.debug('matcher_plugin_loaded', name=name, value=ep.value)
        return factory
    return None


def lookup_matcher_plugin(name: str) -> MatcherFactory:
    """Return the factory registered as *name*.

    Looks at built-ins, explicit registrations, then entry points.

    Raises:
        ConfigurationError: If no factory has that name.
    """
    factory = BUILTIN_BUILDERS.get(name) or _PLUGINS.get(name)
    if factory is None:
        factory = _entry_point_factory(name)
        if factory is not None:
            _PLUGINS[name] = factory
    if factory is None:
        raise ConfigurationError(f'no matcher plugin named {name!r} is registered')
    return factory


class MatcherRegistry:
    """Maps tag names to builder factories.

    Starts with the built-in tags; rule documents extend it.
    """

    def __init__(self, factories: Mapping[str, MatcherFactory] | None = None) -> None:
        self._factories: dict[str, MatcherFactory] = dict(BUILTIN_BUILDERS if factories is None else factories)

    def register(self, tag: str, factory: MatcherFactory) -> None:
        """Bind *tag* to *factory*.

        Binding a tag again to the same factory is allowed.

        Raises:
            ConfigurationError: If *tag* is bound to another factory.
        """
        existing = self._factories.get(tag)
        if existing is not None and existing is not factory:
            raise ConfigurationError(f'matcher tag {tag!r} is already bound to another factory', node=tag)
        self._factories[tag] = factory

    def builder_for(self, tag: str, *, source: str = '') -> MatcherBuilder:
        """Create a fresh builder for *tag*.

        Raises:
            ConfigurationError: If *tag* is not registered.
        """
        factory = self._factories.get(tag)
        if factory is None:
            known = ', '.join(sorted(self._factories))
            raise ConfigurationError(f'unknown matcher tag (known: {known})', source=source, node=tag)
        return factory()

    def __contains__(self, tag: object) -> bool:
        return tag in self._factories

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._factories))

    def __len__(self) -> int:
        return len(self._factories)


class IdentifierRegistry:
    """Holds the one matcher built for each declared id.

    Builders are declared during parsing and built lazily on first
    resolution, so a reference may name a matcher that appears later
    in the merged documents.  Cycles are reported instead of recursing.
    """

    def __init__(self) -> None:
        self._builders: dict[str, MatcherBuilder] = {}
        self._matchers: dict[str, Matcher] = {}
        self._resolving: list[str] = []

    def declare(self, builder: MatcherBuilder, *, source: str = '') -> MatcherBuilder:
        """Record an identified builder and return a builder that builds it once.

        Raises:
            ConfigurationError: If the id is already declared.
        """
        refid = builder.id
        if refid is None:
            return builder
        if refid in self._builders:
            raise ConfigurationError(f'duplicate matcher id {refid!r}', source=source, node=builder.tag)
        self._builders[refid] = builder
        return _RegisteredBuilder(refid, builder, self)

    def resolve(self, refid: str) -> Matcher:
        """Return the matcher for *refid*, building it on first use.

        Raises:
            ConfigurationError: If *refid* is unknown or part of a cycle.
        """
        matcher = self._matchers.get(refid)
        if matcher is not None:
            return matcher
        builder = self._builders.get(refid)
        if builder is None:
            raise ConfigurationError(f'reference to unknown matcher id {refid!r}', node='matcher_ref')
        if refid in self._resolving:
            chain = ' -> '.join([*self._resolving[self._resolving.index(refid) :], refid])
            raise ConfigurationError(f'circular matcher reference: {chain}', node='matcher_ref')
        self._resolving.append(refid)
        try:
            matcher = builder.build()
        finally:
            self._resolving.pop()
        self._matchers[refid] = matcher
        return matcher

    @property
    def matchers(self) -> Mapping[str, Matcher]:
        """Matchers built so far, by id."""
        return dict(self._matchers)

    def __contains__(self, refid: object) -> bool:
        return refid in self._builders


class _RegisteredBuilder(MatcherBuilder):
    """Builds through :meth:`IdentifierRegistry.resolve` so an id is built once."""

    def __init__(self, refid: str, delegate: MatcherBuilder, registry: IdentifierRegistry) -> None:
        super().__init__()
        self._id = refid
        self.delegate = delegate
        self.tag = delegate.tag  # type: ignore[misc]
        self._registry = registry

    def _build(self) -> Matcher:
        return self._registry.resolve(self._id or '')
