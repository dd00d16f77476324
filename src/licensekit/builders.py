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

r"""Typed builders that turn rule-document nodes into matchers.

Each matcher tag in a rule document is backed by one builder class.
Attributes on the node are applied through the builder's explicit
option table (:meth:`MatcherBuilder.option_setters`); anything not in
the table is rejected.  Builders opt in to extra capabilities by
subclassing:

    ┌──────────────────────────┬─────────────────────────────────────────┐
    │ Capability               │ What the rule reader gives the builder │
    ├──────────────────────────┼─────────────────────────────────────────┤
    │ ChildContainerBuilder    │ one child builder per element child,   │
    │                          │ in document order                      │
    ├──────────────────────────┼─────────────────────────────────────────┤
    │ TextCaptureBuilder       │ the node's trimmed text content        │
    ├──────────────────────────┼─────────────────────────────────────────┤
    │ ReferenceBuilder         │ a resolver for matcher ids, called at  │
    │                          │ build time (forward references work)   │
    └──────────────────────────┴─────────────────────────────────────────┘

A third-party matcher kind is a :class:`MatcherBuilder` subclass plus a
registration (see :mod:`licensekit.registry`)::

    class RegexBuilder(TextCaptureBuilder):
        tag = 'regex'

        def _build(self) -> Matcher:
            return RegexMatcher(self.text, id=self.id)
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import ClassVar

from licensekit.errors import ConfigurationError
from licensekit.matchers import (
    AndMatcher,
    CopyrightMatcher,
    Matcher,
    MatcherRef,
    NotMatcher,
    OrMatcher,
    SpdxMatcher,
    create_text_matcher,
)

__all__ = [
    'AndBuilder',
    'ChildContainerBuilder',
    'CopyrightBuilder',
    'MatcherBuilder',
    'MatcherRefBuilder',
    'NotBuilder',
    'OrBuilder',
    'ReferenceBuilder',
    'Resolver',
    'SpdxBuilder',
    'TextBuilder',
    'TextCaptureBuilder',
]

# Looks up the matcher registered under an id.
Resolver = Callable[[str], Matcher]

OptionSetter = Callable[[str], object]


class MatcherBuilder:
    """Base class for all matcher builders.

    Attributes:
        tag: Default tag name used in rule documents and messages.
    """

    tag: ClassVar[str] = 'matcher'

    def __init__(self) -> None:
        self._id: str | None = None

    @property
    def id(self) -> str | None:
        """Identifier declared on the node, or ``None``."""
        return self._id

    def set_id(self, value: str) -> MatcherBuilder:
        """Set the stable identifier."""
        self._id = value.strip() or None
        return self

    def option_setters(self) -> Mapping[str, OptionSetter]:
        """Return the attributes this builder accepts.

        Subclasses extend the mapping; ``id`` is always accepted.
        """
        return {'id': self.set_id}

    def configure(self, attributes: Mapping[str, str], *, tag: str = '', source: str = '') -> None:
        """Apply node *attributes* through :meth:`option_setters`.

        Raises:
            ConfigurationError: On an attribute with no setter.
        """
        setters = self.option_setters()
        for name, value in attributes.items():
            setter = setters.get(name)
            if setter is None:
                supported = ', '.join(sorted(setters))
                raise ConfigurationError(
                    f'unsupported attribute {name!r} (supported: {supported})',
                    source=source,
                    node=tag or self.tag,
                )
            setter(value)

    def build(self) -> Matcher:
        """Build the matcher.

        Raises:
            ConfigurationError: If the builder is incomplete or its
                settings are inconsistent.
        """
        try:
            return self._build()
        except ConfigurationError:
            raise
        except ValueError as exc:
            raise ConfigurationError(str(exc), node=self.tag) from exc

    def _build(self) -> Matcher:
        raise NotImplementedError


class ChildContainerBuilder(MatcherBuilder):
    """Builder whose node children are matchers themselves."""

    def __init__(self) -> None:
        super().__init__()
        self.children: list[MatcherBuilder] = []

    def add(self, child: MatcherBuilder) -> ChildContainerBuilder:
        """Append a child builder."""
        self.children.append(child)
        return self

    def _build_children(self) -> list[Matcher]:
        return [child.build() for child in self.children]


class TextCaptureBuilder(MatcherBuilder):
    """Builder that consumes the node's text content."""

    def __init__(self) -> None:
        super().__init__()
        self.text = ''

    def set_text(self, text: str) -> TextCaptureBuilder:
        """Set the captured text."""
        self.text = text
        return self


class ReferenceBuilder(MatcherBuilder):
    """Builder that needs access to matchers registered by id."""

    def __init__(self) -> None:
        super().__init__()
        self._resolver: Resolver | None = None

    def set_resolver(self, resolver: Resolver) -> ReferenceBuilder:
        """Give the builder read access to the identifier registry."""
        self._resolver = resolver
        return self

    def resolve(self, refid: str) -> Matcher:
        """Look up *refid* through the resolver."""
        if self._resolver is None:
            raise ConfigurationError(f'no matcher registry available to resolve {refid!r}', node=self.tag)
        return self._resolver(refid)


# ── Built-in builders ────────────────────────────────────────────────


class TextBuilder(TextCaptureBuilder):
    """``<text>Licensed under the Apache License</text>``."""

    tag = 'text'

    def _build(self) -> Matcher:
        if not self.text:
            raise ConfigurationError('text matcher requires text content', node=self.tag)
        return create_text_matcher(self.text, id=self.id)


class CopyrightBuilder(MatcherBuilder):
    """``<copyright start="2010" end="2012" owner="FooBar"/>``."""

    tag = 'copyright'

    def __init__(self) -> None:
        super().__init__()
        self.start: str | None = None
        self.end: str | None = None
        self.owner: str | None = None

    def set_start(self, value: str) -> CopyrightBuilder:
        """Set the first year."""
        self.start = value
        return self

    def set_end(self, value: str) -> CopyrightBuilder:
        """Set the last year of a range."""
        self.end = value
        return self

    def set_owner(self, value: str) -> CopyrightBuilder:
        """Set the owner regex fragment."""
        self.owner = value
        return self

    def option_setters(self) -> Mapping[str, OptionSetter]:
        """Accept ``start``, ``end`` and ``owner``."""
        return {
            **super().option_setters(),
            'start': self.set_start,
            'end': self.set_end,
            'owner': self.set_owner,
        }

    def _build(self) -> Matcher:
        return CopyrightMatcher(self.start, self.end, self.owner, id=self.id)


class SpdxBuilder(MatcherBuilder):
    """``<spdx name="Apache-2.0"/>``."""

    tag = 'spdx'

    def __init__(self) -> None:
        super().__init__()
        self.name = ''

    def set_name(self, value: str) -> SpdxBuilder:
        """Set the SPDX identifier to look for."""
        self.name = value
        return self

    def option_setters(self) -> Mapping[str, OptionSetter]:
        """Accept ``name``."""
        return {**super().option_setters(), 'name': self.set_name}

    def _build(self) -> Matcher:
        if not self.name.strip():
            raise ConfigurationError('spdx matcher requires a name attribute', node=self.tag)
        return SpdxMatcher(self.name, id=self.id)


class AndBuilder(ChildContainerBuilder):
    """``<and>...</and>``."""

    tag = 'and'

    def _build(self) -> Matcher:
        if not self.children:
            raise ConfigurationError('and requires at least one child matcher', node=self.tag)
        return AndMatcher(self._build_children(), id=self.id)


class OrBuilder(ChildContainerBuilder):
    """``<or>...</or>``."""

    tag = 'or'

    def _build(self) -> Matcher:
        if not self.children:
            raise ConfigurationError('or requires at least one child matcher', node=self.tag)
        return OrMatcher(self._build_children(), id=self.id)


class NotBuilder(ChildContainerBuilder):
    """``<not><matcher/></not>``."""

    tag = 'not'

    def _build(self) -> Matcher:
        if len(self.children) != 1:
            raise ConfigurationError(
                f'not requires exactly one child matcher, got {len(self.children)}',
                node=self.tag,
            )
        return NotMatcher(self._build_children(), id=self.id)


class MatcherRefBuilder(ReferenceBuilder):
    """``<matcher_ref refid="apache-url"/>``."""

    tag = 'matcher_ref'

    def __init__(self) -> None:
        super().__init__()
        self.refid = ''

    def set_refid(self, value: str) -> MatcherRefBuilder:
        """Set the referenced identifier."""
        self.refid = value.strip()
        return self

    def option_setters(self) -> Mapping[str, OptionSetter]:
        """Accept ``refid``."""
        return {**super().option_setters(), 'refid': self.set_refid}

    def _build(self) -> Matcher:
        if not self.refid:
            raise ConfigurationError('matcher_ref requires a refid attribute', node=self.tag)
        return MatcherRef(self.refid, self.resolve(self.refid), id=self.id)
