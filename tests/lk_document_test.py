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

"""Tests for rule document parsing."""

from __future__ import annotations

from pathlib import Path

import pytest
from licensekit.document import (
    DocumentFormat,
    RuleDocument,
    RuleNode,
    load_document,
    merge_documents,
    parse_toml,
    parse_xml,
    read_source,
)
from licensekit.errors import ConfigurationError

_XML = """\
<rules>
  <licenses>
    <license id="AL" name="Apache License Version 2.0">
      <note>Requires a NOTICE.</note>
      <or id="apache">
        <text>Licensed under the Apache License, Version 2.0</text>
        <spdx name="Apache-2.0"/>
      </or>
    </license>
  </licenses>
  <approved>
    <family license_ref="AL"/>
  </approved>
  <matchers>
    <matcher factory="upper" name="shout"/>
  </matchers>
</rules>
"""

_TOML = """\
approved = ["AL"]

[[licenses]]
id = "AL"
name = "Apache License Version 2.0"
notes = ["Requires a NOTICE."]

[licenses.matcher]
kind = "or"
id = "apache"
children = [
    { kind = "text", text = "Licensed under the Apache License, Version 2.0" },
    { kind = "spdx", name = "Apache-2.0" },
]

[[matchers]]
factory = "upper"
name = "shout"
"""


class TestRuleNode:
    """Tests for RuleNode."""

    def test_get(self) -> None:
        """Attributes are looked up by name."""
        node = RuleNode('spdx', attributes=(('name', 'MIT'),))
        assert node.get('name') == 'MIT'
        assert node.get('id') is None
        assert node.get('id', 'x') == 'x'
        assert node.attrs == {'name': 'MIT'}


class TestParseXml:
    """Tests for parse_xml()."""

    def test_sections(self) -> None:
        """Licenses, families and matcher kinds are collected."""
        doc = parse_xml(_XML, source='rules.xml')
        assert [n.get('id') for n in doc.licenses] == ['AL']
        assert [n.get('license_ref') for n in doc.families] == ['AL']
        assert [n.attrs for n in doc.matchers] == [{'factory': 'upper', 'name': 'shout'}]
        assert doc.sources == ('rules.xml',)

    def test_tree(self) -> None:
        """Child order, text and source are preserved."""
        lic = parse_xml(_XML, source='rules.xml').licenses[0]
        assert [c.tag for c in lic.children] == ['note', 'or']
        assert lic.children[0].text == 'Requires a NOTICE.'
        root = lic.children[1]
        assert [c.tag for c in root.children] == ['text', 'spdx']
        assert root.children[0].text == 'Licensed under the Apache License, Version 2.0'
        assert root.source == 'rules.xml'

    def test_license_outside_licenses_section(self) -> None:
        """A license element anywhere in the tree is picked up."""
        doc = parse_xml('<rules><license id="X" name="X"><text>x</text></license></rules>')
        assert len(doc.licenses) == 1

    def test_family_outside_approved_is_ignored(self) -> None:
        """Only families inside an approved section count."""
        doc = parse_xml('<rules><family license_ref="X"/></rules>')
        assert doc.families == ()

    def test_malformed(self) -> None:
        """Broken XML is a configuration error naming the source."""
        with pytest.raises(ConfigurationError, match='malformed XML') as exc_info:
            parse_xml('<rules>', source='bad.xml')
        assert exc_info.value.source == 'bad.xml'


class TestParseToml:
    """Tests for parse_toml()."""

    def test_same_shape_as_xml(self) -> None:
        """TOML and XML forms produce the same tree."""
        from_toml = parse_toml(_TOML, source='rules.toml')
        from_xml = parse_xml(_XML, source='rules.toml')

        def shape(node: RuleNode) -> tuple[object, ...]:
            return (node.tag, node.attrs, node.text, tuple(shape(c) for c in node.children))

        assert [shape(n) for n in from_toml.licenses] == [shape(n) for n in from_xml.licenses]
        assert [n.attrs for n in from_toml.families] == [{'license_ref': 'AL'}]
        assert [n.attrs for n in from_toml.matchers] == [{'factory': 'upper', 'name': 'shout'}]

    def test_numbers_become_strings(self) -> None:
        """Numeric attribute values are kept as text."""
        doc = parse_toml(
            '[[licenses]]\nid = "X"\nname = "X"\n[licenses.matcher]\nkind = "copyright"\nstart = 2010\n'
        )
        assert doc.licenses[0].children[0].get('start') == '2010'

    def test_single_note_string(self) -> None:
        """A single note may be given as a plain string."""
        doc = parse_toml('[[licenses]]\nid = "X"\nname = "X"\nnotes = "one"\n')
        assert [c.text for c in doc.licenses[0].children] == ['one']

    def test_matcher_needs_kind(self) -> None:
        """Every matcher table names its kind."""
        with pytest.raises(ConfigurationError, match='"kind"'):
            parse_toml('[[licenses]]\nid = "X"\nname = "X"\n[licenses.matcher]\ntext = "x"\n')

    def test_unknown_license_key(self) -> None:
        """Misspelled license keys are rejected."""
        with pytest.raises(ConfigurationError, match='unsupported license keys: nmae'):
            parse_toml('[[licenses]]\nid = "X"\nnmae = "X"\n')

    def test_approved_must_be_strings(self) -> None:
        """``approved`` is a list of license ids."""
        with pytest.raises(ConfigurationError, match='"approved"'):
            parse_toml('approved = [1, 2]\n')

    def test_malformed(self) -> None:
        """Broken TOML is a configuration error."""
        with pytest.raises(ConfigurationError, match='malformed TOML'):
            parse_toml('licenses = [', source='bad.toml')


class TestMerge:
    """Tests for merging documents."""

    def test_concatenates_in_order(self) -> None:
        """Later documents append after earlier ones."""
        a = parse_xml('<rules><license id="A" name="A"><text>a</text></license></rules>', source='a.xml')
        b = parse_xml('<rules><license id="B" name="B"><text>b</text></license></rules>', source='b.xml')
        merged = merge_documents(a, b)
        assert [n.get('id') for n in merged.licenses] == ['A', 'B']
        assert merged.sources == ('a.xml', 'b.xml')
        assert a.licenses[0] in merged.licenses

    def test_empty(self) -> None:
        """A document without declarations is empty."""
        assert RuleDocument().empty
        assert merge_documents().empty


class TestDocumentFormat:
    """Tests for DocumentFormat.from_name()."""

    @pytest.mark.parametrize(
        ('name', 'expected'),
        [
            ('rules.xml', DocumentFormat.XML),
            ('dir/Rules.XML', DocumentFormat.XML),
            ('rules.toml', DocumentFormat.TOML),
            ('https://example.com/rules.toml', DocumentFormat.TOML),
            ('https://example.com/rules.xml?raw=1', DocumentFormat.XML),
            ('https://example.com/rules.toml#main', DocumentFormat.TOML),
        ],
    )
    def test_by_suffix(self, name: str, expected: DocumentFormat) -> None:
        """The suffix picks the format."""
        assert DocumentFormat.from_name(name) is expected

    def test_unknown_suffix(self) -> None:
        """Other suffixes are rejected."""
        with pytest.raises(ConfigurationError, match="unsupported rule document suffix 'json'"):
            DocumentFormat.from_name('rules.json')


class TestLoadDocument:
    """Tests for read_source() and load_document()."""

    def test_path(self, tmp_path: Path) -> None:
        """Files are parsed by suffix."""
        path = tmp_path / 'rules.toml'
        path.write_text(_TOML, encoding='utf-8')
        doc = load_document(path)
        assert doc.sources == (str(path),)
        assert len(doc.licenses) == 1

    def test_file_url(self, tmp_path: Path) -> None:
        """``file:`` URLs are read like remote sources."""
        path = tmp_path / 'rules.xml'
        path.write_text(_XML, encoding='utf-8')
        doc = load_document(path.as_uri())
        assert len(doc.licenses) == 1

    def test_missing(self, tmp_path: Path) -> None:
        """Unreadable sources are configuration errors."""
        missing = tmp_path / 'missing.xml'
        with pytest.raises(ConfigurationError, match='unable to read rule document') as exc_info:
            read_source(missing)
        assert exc_info.value.source == str(missing)

    def test_toml_not_utf8(self, tmp_path: Path) -> None:
        """Undecodable TOML bytes are a configuration error."""
        path = tmp_path / 'rules.toml'
        path.write_bytes(b'approved = ["\xff"]\n')
        with pytest.raises(ConfigurationError, match='not valid UTF-8') as exc_info:
            load_document(path)
        assert exc_info.value.source == str(path)
