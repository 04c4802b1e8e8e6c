"""Unit tests for the revision composer."""

import pytest
from lxml import etree

from xmledit.models.revision_record import RevisionRecord
from xmledit.revisions.models import InsertStrategy
from xmledit.revisions.revision_composer import (
    create_revision_xml,
    escape_xml,
    extract_revisions,
    insert_revision,
    insert_revision_result,
    next_revision_number,
)


def _record(number='1.1', comment='Fixed typo.'):
    return RevisionRecord(number=number, date='2024-05-01', comment=comment)


class TestDomInsertion:
    """Test cases for parse-based insertion."""

    def test_creates_revisions_as_first_child(self):
        result = insert_revision_result(
            '<section><title>T</title></section>', _record()
        )

        root = etree.fromstring(result.xml)
        assert result.strategy == InsertStrategy.DOM
        assert root[0].tag == 'Revisions'
        assert len(root.findall('Revisions')) == 1
        revisions = root[0].findall('Revision')
        assert len(revisions) == 1
        assert [child.tag for child in revisions[0]] == [
            'RevisionNumber', 'RevisionDate', 'RevisionComment',
        ]
        assert revisions[0].findtext('RevisionNumber') == '1.1'
        assert revisions[0].findtext('RevisionDate') == '2024-05-01'

    def test_comment_text_is_escaped(self):
        xml = insert_revision('<section/>', _record(comment='a < b & "c"'))

        assert 'a &lt; b &amp; "c"' in xml
        assert etree.fromstring(xml).findtext('.//RevisionComment') == 'a < b & "c"'

    def test_two_inserts_append_in_order(self):
        xml = insert_revision('<section><para>x</para></section>', _record('1.0'))
        xml = insert_revision(xml, _record('1.1'))

        root = etree.fromstring(xml)
        numbers = [r.findtext('RevisionNumber') for r in root.iter('Revision')]
        assert numbers == ['1.0', '1.1']
        assert len(root.findall('Revisions')) == 1

    def test_existing_nested_revisions_is_reused(self):
        xml = (
            '<topic><frontMatter><Revisions><Revision>'
            '<RevisionNumber>1.0</RevisionNumber></Revision></Revisions>'
            '</frontMatter></topic>'
        )

        root = etree.fromstring(insert_revision(xml, _record()))

        assert root[0].tag == 'frontMatter'
        assert len(list(root.iter('Revisions'))) == 1
        assert len(list(root.iter('Revision'))) == 2

    def test_declaration_is_kept(self):
        xml = insert_revision(
            '<?xml version="1.0" encoding="UTF-8"?>\n<section/>', _record()
        )

        assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>\n<section>')

    def test_adjacent_tags_are_split_onto_lines(self):
        xml = insert_revision('<section/>', _record())

        assert '><' not in xml
        assert '\n\n' not in xml

    def test_control_characters_are_dropped_from_record(self):
        result = insert_revision_result(
            '<doc/>', _record(number='1.1\x00', comment='bad\x0bcomment')
        )

        assert result.strategy == InsertStrategy.DOM
        root = etree.fromstring(result.xml)
        assert root.findtext('Revisions/Revision/RevisionComment') == 'badcomment'
        assert root.findtext('Revisions/Revision/RevisionNumber') == '1.1'

    def test_declared_encoding_does_not_change_text(self):
        xml = insert_revision(
            '<?xml version="1.0" encoding="ISO-8859-1"?>\n<doc><para>café</para></doc>',
            _record(),
        )

        assert '<para>café</para>' in xml
        assert xml.startswith('<?xml version="1.0" encoding="ISO-8859-1"?>')


class TestSpliceInsertion:
    """Test cases for text-based insertion on malformed documents."""

    def test_inserts_block_after_root_tag(self):
        xml = '<section id="s"><para>unclosed</section>'

        result = insert_revision_result(xml, _record())

        assert result.strategy == InsertStrategy.SPLICE
        assert result.xml.startswith('<section id="s">\n  <Revisions>\n  <Revision>')
        assert '<RevisionNumber>1.1</RevisionNumber>' in result.xml
        assert result.xml.endswith('</Revisions><para>unclosed</section>')

    def test_skips_prolog_before_root(self):
        xml = '<?xml version="1.0"?>\n<!-- c -->\n<section><para>x</section>'

        result = insert_revision_result(xml, _record())

        assert result.strategy == InsertStrategy.SPLICE
        assert result.xml.index('<Revisions>') > result.xml.index('<section>')
        assert result.xml.startswith('<?xml version="1.0"?>\n<!-- c -->\n<section>')

    def test_inserts_before_existing_closing_tag(self):
        xml = '<section><Revisions></Revisions><para></section>'

        result = insert_revision_result(xml, _record())

        assert result.xml.count('<Revisions>') == 1
        assert result.xml.index('<Revision>') < result.xml.index('</Revisions>')

    def test_control_characters_are_dropped_from_spliced_text(self):
        xml = '<section><para>unclosed</section>'

        result = insert_revision_result(xml, _record(comment='tab\x0bbed'))

        assert result.strategy == InsertStrategy.SPLICE
        assert '<RevisionComment>tabbed</RevisionComment>' in result.xml


class TestCommentFallback:
    """Test cases for the last-resort comment."""

    def test_appends_comment_when_nothing_else_works(self):
        result = insert_revision_result('not xml at all', _record(comment='Fix'))

        assert result.strategy == InsertStrategy.COMMENT
        assert result.xml == 'not xml at all\n<!-- Revision: Fix -->'

    def test_double_dash_is_neutralised(self):
        xml = insert_revision('plain', _record(comment='a -- b -'))

        comment = xml.split('<!--', 1)[1].rsplit('-->', 1)[0]
        assert '--' not in comment


class TestHelpers:
    """Test cases for numbering and rendering helpers."""

    @pytest.mark.parametrize('current,expected', [
        ('1.0', '1.1'),
        ('2.9', '2.10'),
        ('3', '3'),
        ('', ''),
        ('1.x', '1.x'),
    ])
    def test_next_revision_number(self, current, expected):
        assert next_revision_number(current) == expected

    def test_escape_xml(self):
        assert escape_xml('<a href="x">\'&') == '&lt;a href=&quot;x&quot;&gt;&apos;&amp;'

    def test_create_revision_xml(self):
        xml = create_revision_xml('1.2', '2024-01-01', 'A & B')

        assert xml.startswith('  <Revision>\n')
        assert '<RevisionComment>A &amp; B</RevisionComment>' in xml

    def test_extract_revisions(self):
        xml = insert_revision(insert_revision('<s/>', _record('1.0')), _record('1.1'))

        records = extract_revisions(xml)

        assert [(r.number, r.date) for r in records] == [
            ('1.0', '2024-05-01'), ('1.1', '2024-05-01'),
        ]

    def test_extract_revisions_from_malformed_document(self):
        assert extract_revisions('<a><b></a>') == []
