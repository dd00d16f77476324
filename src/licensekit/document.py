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

r"""Rule documents: parsing XML or TOML into an immutable node tree.

Every source is parsed into a :class:`RuleDocument` holding three
ordered sequences of :class:`RuleNode` values.  Documents are merged
by concatenation before any matcher is built, so no node is shared or
mutated across sources.

XML form::

    <rules>
      <licenses>
        <license id="AL" name="Apache License Version 2.0">
          <note>Note that APACHE requires a NOTICE.</note>
          <or>
            <text>Licensed to the Apache Software Foundation (ASF)</text>
            <spdx name="Apache-2.0"/>
          </or>
        </license>
      </licenses>
      <approved>
        <family license_ref="AL"/>
      </approved>
      <matchers>
        <matcher factory="acme-regex" name="regex"/>
      </matchers>
    </rules>

TOML form (same logical content)::

    approved = ["AL"]

    [[licenses]]
    id = "AL"
    name = "Apache License Version 2.0"
    notes = ["Note that APACHE requires a NOTICE."]

    [licenses.matcher]
    kind = "or"
    children = [
        { kind = "text", text = "Licensed to the Apache Software Foundation (ASF)" },
        { kind = "spdx", name = "Apache-2.0" },
    ]

    [[matchers]]
    factory = "acme-regex"
    name = "regex"

In TOML a matcher is a table whose ``kind`` is the tag, ``text`` the
captured text and ``children`` the nested matchers; every other key is
an attribute.
"""

from __future__ import annotations

import enum
import sys
import urllib.error
import urllib.parse
import urllib.request
import xml.etree.ElementTree as ET  # noqa: N817, S405
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from licensekit.errors import ConfigurationError
from licensekit.logging import get_logger

__all__ = [
    'DocumentFormat',
    'RuleDocument',
    'RuleNode',
    'Source',
    'load_document',
    'merge_documents',
    'parse_toml',
    'parse_xml',
    'read_source',
]

logger = get_logger(__name__)

Source = str | Path

LICENSE = 'license'
APPROVED = 'approved'
FAMILY = 'family'
MATCHERS = 'matchers'
MATCHER = 'matcher'
NOTE = 'note'

_URL_SCHEMES = ('file:', 'http:', 'https:')


@dataclass(frozen=True)
class RuleNode:
    """One element of a rule document.

    Attributes:
        tag: Element name (e.g. ``"license"``, ``"copyright"``).
        attributes: Attribute ``(name, value)`` pairs in document order.
        text: Text content, trimmed.
        children: Child elements in document order.
        source: The document this node came from.
    """

    tag: str
    attributes: tuple[tuple[str, str], ...] = ()
    text: str = ''
    children: tuple[RuleNode, ...] = ()
    source: str = ''

    @property
    def attrs(self) -> dict[str, str]:
        """Attributes as a dict."""
        return dict(self.attributes)

    def get(self, name: str, default: str | None = None) -> str | None:
        """Return attribute *name*, or *default*."""
        for key, value in self.attributes:
            if key == name:
                return value
        return default


@dataclass(frozen=True)
class RuleDocument:
    """The rule-bearing content of one or more merged sources.

    Attributes:
        licenses: ``license`` nodes.
        families: ``family`` nodes from ``approved`` sections.
        matchers: ``matcher`` nodes from ``matchers`` sections.
        sources: The sources merged into this document, in order.
    """

    licenses: tuple[RuleNode, ...] = ()
    families: tuple[RuleNode, ...] = ()
    matchers: tuple[RuleNode, ...] = ()
    sources: tuple[str, ...] = field(default=())

    def merge(self, other: RuleDocument) -> RuleDocument:
        """Return a document with *other*'s nodes appended after this one's."""
        return RuleDocument(
            licenses=self.licenses + other.licenses,
            families=self.families + other.families,
            matchers=self.matchers + other.matchers,
            sources=self.sources + other.sources,
        )

    @property
    def empty(self) -> bool:
        """``True`` if the document declares nothing."""
        return not (self.licenses or self.families or self.matchers)


def merge_documents(*documents: RuleDocument) -> RuleDocument:
    """Merge *documents* in order."""
    result = RuleDocument()
    for doc in documents:
        result = result.merge(doc)
    return result


class DocumentFormat(enum.Enum):
    """Rule document formats, chosen by file suffix."""

    XML = ('xml',)
    TOML = ('toml',)

    @property
    def suffixes(self) -> tuple[str, ...]:
        """File suffixes (without the dot) of this format."""
        return self.value

    @classmethod
    def from_name(cls, name: str) -> DocumentFormat:
        """Pick the format from the suffix of a file name or URL.

        Raises:
            ConfigurationError: If the suffix is not recognised.
        """
        path = urllib.parse.urlsplit(name).path if _is_url(name) else name
        suffix = path.rsplit('/', 1)[-1].rsplit('.', 1)[-1].lower()
        for fmt in cls:
            if suffix in fmt.suffixes:
                return fmt
        raise ConfigurationError(f'unsupported rule document suffix {suffix!r}', source=name)


# ── Reading sources ──────────────────────────────────────────────────


def _is_url(source: str) -> bool:
    return source.lower().startswith(_URL_SCHEMES)


def read_source(source: Source) -> bytes:
    """Read the raw bytes of a path or URL.

    Raises:
        ConfigurationError: If the source cannot be read.
    """
    name = str(source)
    try:
        if isinstance(source, str) and _is_url(source):
            with urllib.request.urlopen(source) as resp:  # noqa: S310
                return resp.read()
        return Path(source).read_bytes()
    except (OSError, urllib.error.URLError, ValueError) as exc:
        raise ConfigurationError(f'unable to read rule document: {exc}', source=name) from exc


# ── XML ──────────────────────────────────────────────────────────────


def _safe_xml_parser() -> ET.XMLParser:
    """Return an XMLParser with external entity resolution disabled."""
    return ET.XMLParser()  # noqa: S314


def _xml_node(elem: ET.Element, source: str) -> RuleNode:
    elements = [child for child in elem if isinstance(child.tag, str)]
    # Own text only; descendants carry theirs.
    text = ''.join([elem.text or '', *(child.tail or '' for child in elem)])
    return RuleNode(
        tag=elem.tag,
        attributes=tuple(elem.attrib.items()),
        text=text.strip(),
        children=tuple(_xml_node(child, source) for child in elements),
        source=source,
    )


def parse_xml(data: bytes | str, source: str = '') -> RuleDocument:
    """Parse an XML rule document.

    ``license`` elements may appear anywhere; ``family`` and
    ``matcher`` elements are taken from ``approved`` and ``matchers``
    sections respectively.

    Raises:
        ConfigurationError: If the XML is malformed.
    """
    try:
        root = ET.fromstring(data, parser=_safe_xml_parser())  # noqa: S314
    except ET.ParseError as exc:
        raise ConfigurationError(f'malformed XML: {exc}', source=source) from exc
    return RuleDocument(
        licenses=tuple(_xml_node(e, source) for e in root.iter(LICENSE)),
        families=tuple(_xml_node(f, source) for a in root.iter(APPROVED) for f in a.iter(FAMILY)),
        matchers=tuple(_xml_node(m, source) for s in root.iter(MATCHERS) for m in s.iter(MATCHER)),
        sources=(source,),
    )


# ── TOML ─────────────────────────────────────────────────────────────


def _toml_value(value: object, *, key: str, source: str, tag: str) -> str:
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (str, int, float)):
        return str(value)
    raise ConfigurationError(f'attribute {key!r} must be a string or number', source=source, node=tag)


def _toml_table(value: object, *, what: str, source: str) -> Mapping[str, Any]:
    if not isinstance(value, dict):
        raise ConfigurationError(f'{what} must be a table', source=source)
    return value


def _toml_matcher(table: Mapping[str, Any], source: str) -> RuleNode:
    kind = table.get('kind')
    if not isinstance(kind, str) or not kind:
        raise ConfigurationError('matcher table requires a "kind" key', source=source)
    text = table.get('text', '')
    if not isinstance(text, str):
        raise ConfigurationError('"text" must be a string', source=source, node=kind)
    raw_children = table.get('children', [])
    if not isinstance(raw_children, list):
        raise ConfigurationError('"children" must be a list of tables', source=source, node=kind)
    children = tuple(
        _toml_matcher(_toml_table(c, what=f'child of {kind!r}', source=source), source) for c in raw_children
    )
    attributes = tuple(
        (key, _toml_value(value, key=key, source=source, tag=kind))
        for key, value in table.items()
        if key not in ('kind', 'text', 'children')
    )
    return RuleNode(tag=kind, attributes=attributes, text=text.strip(), children=children, source=source)


def _toml_license(table: Mapping[str, Any], source: str) -> RuleNode:
    attributes: list[tuple[str, str]] = []
    for key in ('id', 'name', 'derived_from'):
        if key in table:
            attributes.append((key, _toml_value(table[key], key=key, source=source, tag=LICENSE)))
    unknown = sorted(set(table) - {'id', 'name', 'derived_from', 'notes', 'matcher'})
    if unknown:
        raise ConfigurationError(f'unsupported license keys: {", ".join(unknown)}', source=source, node=LICENSE)
    notes = table.get('notes', [])
    if isinstance(notes, str):
        notes = [notes]
    if not isinstance(notes, list) or not all(isinstance(n, str) for n in notes):
        raise ConfigurationError('"notes" must be a string or a list of strings', source=source, node=LICENSE)
    children: list[RuleNode] = [RuleNode(tag=NOTE, text=n.strip(), source=source) for n in notes]
    if 'matcher' in table:
        children.append(_toml_matcher(_toml_table(table['matcher'], what='license matcher', source=source), source))
    return RuleNode(tag=LICENSE, attributes=tuple(attributes), children=tuple(children), source=source)


def parse_toml(data: bytes | str, source: str = '') -> RuleDocument:
    """Parse a TOML rule document.

    Raises:
        ConfigurationError: If the TOML is malformed or mis-shaped.
    """
    try:
        text = data.decode('utf-8') if isinstance(data, bytes) else data
        doc = tomllib.loads(text)
    except UnicodeDecodeError as exc:
        raise ConfigurationError(f'TOML is not valid UTF-8: {exc}', source=source) from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f'malformed TOML: {exc}', source=source) from exc

    licenses = doc.get('licenses', [])
    approved = doc.get('approved', [])
    matchers = doc.get('matchers', [])
    if not isinstance(licenses, list):
        raise ConfigurationError('"licenses" must be an array of tables', source=source)
    if not isinstance(approved, list) or not all(isinstance(a, str) for a in approved):
        raise ConfigurationError('"approved" must be a list of license ids', source=source)
    if not isinstance(matchers, list):
        raise ConfigurationError('"matchers" must be an array of tables', source=source)

    return RuleDocument(
        licenses=tuple(
            _toml_license(_toml_table(t, what='license entry', source=source), source) for t in licenses
        ),
        families=tuple(RuleNode(tag=FAMILY, attributes=(('license_ref', a),), source=source) for a in approved),
        matchers=tuple(
            RuleNode(
                tag=MATCHER,
                attributes=tuple(
                    (k, _toml_value(v, key=k, source=source, tag=MATCHER))
                    for k, v in _toml_table(t, what='matcher entry', source=source).items()
                ),
                source=source,
            )
            for t in matchers
        ),
        sources=(source,),
    )


def load_document(source: Source) -> RuleDocument:
    """Read and parse a rule document, picking the format by suffix.

    Raises:
        ConfigurationError: If the source is unreadable, of an unknown
            format, or malformed.
    """
    name = str(source)
    fmt = DocumentFormat.from_name(name)
    data = read_source(source)
    doc = parse_xml(data, name) if fmt is DocumentFormat.XML else parse_toml(data, name)
    logger.debug(
        'rule_document_loaded',
        source=name,
        format=fmt.name.lower(),
        licenses=len(doc.licenses),
        families=len(doc.families),
        matchers=len(doc.matchers),
    )
    return doc
