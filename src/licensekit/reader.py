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

r"""Rule reader: merged rule documents → licenses and approved families.

The build runs in three passes over the merged document::

    1. matchers   <matcher factory=.. name=..>  → MatcherRegistry
    2. licenses   <license> trees                → builders (recursive
                                                   descent; ids declared)
                                                 → License objects (ids
                                                   built once, refs resolved)
    3. approved   <family license_ref=..>        → approved category codes

All documents must be added before the first :meth:`read_licenses`;
the result is built once and cached.

Usage::

    from licensekit.reader import ConfigurationReader

    reader = ConfigurationReader()
    reader.add_licenses('rules/base.xml')
    reader.add_licenses('rules/extra.toml')
    licenses = reader.read_licenses()          # tuple, sorted by family
    approved = reader.approved_license_ids()   # ('AL', 'MIT', ...)
"""

from __future__ import annotations

from licensekit.builders import (
    ChildContainerBuilder,
    MatcherBuilder,
    ReferenceBuilder,
    TextCaptureBuilder,
)
from licensekit.document import (
    NOTE,
    RuleDocument,
    RuleNode,
    Source,
    load_document,
)
from licensekit.errors import ConfigurationError
from licensekit.license import License, LicenseBuilder
from licensekit.logging import get_logger
from licensekit.registry import IdentifierRegistry, MatcherRegistry, lookup_matcher_plugin

__all__ = [
    'ConfigurationReader',
]

logger = get_logger(__name__)

ATT_ID = 'id'
ATT_NAME = 'name'
ATT_DERIVED_FROM = 'derived_from'
ATT_LICENSE_REF = 'license_ref'
ATT_FACTORY = 'factory'


class ConfigurationReader:
    """Reads rule documents and builds the license graph.

    Args:
        registry: Matcher-kind registry to extend.  Defaults to a fresh
            registry with the built-in tags.
    """

    def __init__(self, registry: MatcherRegistry | None = None) -> None:
        self.registry = registry if registry is not None else MatcherRegistry()
        self.identifiers = IdentifierRegistry()
        self._document: RuleDocument | None = RuleDocument()
        self._licenses: tuple[License, ...] | None = None
        self._approved: tuple[str, ...] | None = None
        self._matcher_nodes_read = 0

    # ── Input ────────────────────────────────────────────────────────

    def add_licenses(self, source: Source) -> None:
        """Merge the rule document at *source*."""
        self.read(source)

    def add_matchers(self, source: Source) -> None:
        """Merge a document that declares matcher kinds."""
        self.read(source)

    def read(self, *sources: Source) -> None:
        """Load and merge each source in order.

        Raises:
            ConfigurationError: If a source cannot be read or parsed.
        """
        for source in sources:
            self.add(load_document(source))

    def add(self, document: RuleDocument) -> None:
        """Merge an already parsed document.

        Documents added after the licenses were read are ignored.
        """
        if self._document is None:
            logger.warning('rule_document_ignored', sources=list(document.sources), reason='licenses already read')
            return
        self._document = self._document.merge(document)

    # ── Matcher kinds ────────────────────────────────────────────────

    def read_matcher_builders(self) -> None:
        """Register the matcher kinds declared so far.

        Raises:
            ConfigurationError: If a declaration lacks ``factory`` or
                names an unknown plugin.
        """
        if self._document is None:
            return
        pending = self._document.matchers[self._matcher_nodes_read :]
        for node in pending:
            self._parse_matcher_kind(node)
        self._matcher_nodes_read += len(pending)

    def _parse_matcher_kind(self, node: RuleNode) -> None:
        unknown = sorted(set(node.attrs) - {ATT_FACTORY, ATT_NAME})
        if unknown:
            raise ConfigurationError(
                f'unsupported attribute(s): {", ".join(unknown)}', source=node.source, node=node.tag
            )
        factory_name = (node.get(ATT_FACTORY) or '').strip()
        if not factory_name:
            raise ConfigurationError(f'matcher requires a {ATT_FACTORY} attribute', source=node.source, node=node.tag)
        try:
            factory = lookup_matcher_plugin(factory_name)
        except ConfigurationError as exc:
            raise ConfigurationError(exc.detail, source=node.source, node=node.tag) from exc
        tags = [factory_name]
        alias = (node.get(ATT_NAME) or '').strip()
        if alias and alias != factory_name:
            tags.append(alias)
        for tag in tags:
            self.registry.register(tag, factory)
            logger.debug('matcher_kind_registered', tag=tag, factory=factory_name, source=node.source)

    # ── Matcher trees ────────────────────────────────────────────────

    def _parse_matcher(self, node: RuleNode) -> MatcherBuilder:
        builder = self.registry.builder_for(node.tag, source=node.source)
        builder.configure(node.attrs, tag=node.tag, source=node.source)
        if isinstance(builder, ChildContainerBuilder):
            for child in node.children:
                builder.add(self._parse_matcher(child))
        elif node.children:
            raise ConfigurationError('does not accept child matchers', source=node.source, node=node.tag)
        if isinstance(builder, TextCaptureBuilder):
            builder.set_text(node.text.strip())
        if isinstance(builder, ReferenceBuilder):
            builder.set_resolver(self.identifiers.resolve)
        return self.identifiers.declare(builder, source=node.source)

    def _parse_license(self, node: RuleNode) -> LicenseBuilder:
        unknown = sorted(set(node.attrs) - {ATT_ID, ATT_NAME, ATT_DERIVED_FROM})
        if unknown:
            raise ConfigurationError(
                f'unsupported attribute(s): {", ".join(unknown)}', source=node.source, node=node.tag
            )
        category = node.get(ATT_ID)
        builder = LicenseBuilder().set_license_family_category(category).set_license_family_name(node.get(ATT_NAME))
        notes: list[str] = []
        roots: list[RuleNode] = []
        for child in node.children:
            if child.tag == NOTE:
                notes.append(child.text)
            else:
                roots.append(child)
        if len(roots) != 1:
            raise ConfigurationError(
                f'license {category!r} must contain exactly one matcher, found {len(roots)}',
                source=node.source,
                node=node.tag,
            )
        builder.set_matcher(self._parse_matcher(roots[0]))
        builder.set_derived_from(node.get(ATT_DERIVED_FROM))
        builder.set_notes('\n'.join(notes))
        return builder

    # ── Output ───────────────────────────────────────────────────────

    def read_licenses(self) -> tuple[License, ...]:
        """Build the licenses, sorted by family.

        Built once; later calls return the same tuple.

        Raises:
            ConfigurationError: On any inconsistency in the merged
                documents.
        """
        if self._licenses is not None:
            return self._licenses
        self.read_matcher_builders()
        document = self._document or RuleDocument()

        builders: list[tuple[RuleNode, LicenseBuilder]] = [(n, self._parse_license(n)) for n in document.licenses]
        licenses: dict[str, License] = {}
        for node, builder in builders:
            try:
                lic = builder.build()
            except ConfigurationError as exc:
                if exc.source:
                    raise
                raise ConfigurationError(exc.detail, source=node.source, node=exc.node) from exc
            if lic.id in licenses:
                raise ConfigurationError(f'duplicate license id {lic.id!r}', source=node.source, node=node.tag)
            licenses[lic.id] = lic

        self._licenses = tuple(sorted(licenses.values()))
        self._approved = self._parse_families(document.families, licenses)
        self._document = None
        logger.info(
            'licenses_built',
            licenses=len(self._licenses),
            approved=len(self._approved),
            sources=list(document.sources),
        )
        return self._licenses

    def _parse_families(self, nodes: tuple[RuleNode, ...], licenses: dict[str, License]) -> tuple[str, ...]:
        if not nodes:
            return tuple(sorted(licenses))
        approved: set[str] = set()
        for node in nodes:
            unknown = sorted(set(node.attrs) - {ATT_LICENSE_REF})
            if unknown:
                raise ConfigurationError(
                    f'unsupported attribute(s): {", ".join(unknown)}', source=node.source, node=node.tag
                )
            ref = (node.get(ATT_LICENSE_REF) or '').strip()
            if not ref:
                raise ConfigurationError(
                    f'family requires a {ATT_LICENSE_REF} attribute', source=node.source, node=node.tag
                )
            if ref not in licenses:
                raise ConfigurationError(f'family refers to unknown license {ref!r}', source=node.source, node=node.tag)
            approved.add(ref)
        return tuple(sorted(approved))

    def approved_license_ids(self) -> tuple[str, ...]:
        """Return the approved family categories, sorted.

        When no ``family`` is declared, every loaded license is approved.
        """
        if self._approved is None:
            self.read_licenses()
        return self._approved or ()
