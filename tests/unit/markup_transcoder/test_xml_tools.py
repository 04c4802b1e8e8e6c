"""Unit tests for XML validation and preview helpers."""

from xmledit.markup_transcoder.xml_tools import (
    create_sample_xml,
    escape_html,
    format_xml,
    highlight_xml,
    parse_xml,
    prettify_xml,
    render_preview,
    validate_xml,
)


class TestValidateXml:
    """Test cases for validate_xml."""

    def test_mismatched_tags_are_invalid(self):
        result = validate_xml('<a><b></a>')

        assert result.valid is False
        assert result.error

    def test_well_formed_document(self):
        result = validate_xml('<a><b/></a>')

        assert result.valid is True
        assert result.message == 'XML is well-formed'
        assert result.error is None

    def test_declaration_with_encoding_is_accepted(self):
        assert validate_xml('<?xml version="1.0" encoding="UTF-8"?><a/>').valid

    def test_declared_utf16_document_is_accepted(self):
        assert validate_xml('<?xml version="1.0" encoding="UTF-16"?><a/>').valid is True

    def test_declared_latin1_text_is_read_as_decoded(self):
        root = parse_xml('<?xml version="1.0" encoding="ISO-8859-1"?><doc><para>café</para></doc>')

        assert root.findtext("para") == "café"

    def test_empty_document_is_invalid(self):
        assert validate_xml('').valid is False

    def test_external_entities_are_not_fetched(self):
        xml = (
            '<!DOCTYPE a [<!ENTITY e SYSTEM "http://example.invalid/x">]>'
            '<a>&e;</a>'
        )

        # Parses without resolving the entity over the network
        assert validate_xml(xml).valid is True


class TestFormatting:
    """Test cases for prettify, highlight and format."""

    def test_prettify_indents_children(self):
        pretty = prettify_xml('<root><child>x</child><leaf/></root>')

        assert pretty == '<root>\n  <child>x</child>\n  <leaf/>\n</root>'

    def test_highlight_wraps_tags_and_comments(self):
        highlighted = highlight_xml('&lt;a&gt;&lt;!-- c --&gt;&lt;/a&gt;')

        assert '<span class="xml-element">&lt;a&gt;</span>' in highlighted
        assert '<span class="xml-comment">&lt;!-- c --&gt;</span>' in highlighted

    def test_format_valid_xml(self):
        formatted = format_xml('<root><child>a &amp; b</child></root>')

        assert '<span class="xml-element">&lt;root&gt;</span>' in formatted
        assert 'a &amp;amp; b' in formatted

    def test_format_invalid_xml_is_escaped(self):
        assert format_xml('<a><b></a>') == '&lt;a&gt;&lt;b&gt;&lt;/a&gt;'

    def test_escape_html(self):
        assert escape_html('<a & b>') == '&lt;a &amp; b&gt;'


class TestPreview:
    """Test cases for render_preview and the sample document."""

    def test_valid_preview_drops_declaration(self):
        html = render_preview('<?xml version="1.0"?><root><child/></root>')

        assert html.startswith('<pre>')
        assert 'xml version' not in html

    def test_invalid_preview_shows_error(self):
        html = render_preview('<a><b></a>')

        assert 'validation-error' in html
        assert '&lt;a&gt;&lt;b&gt;&lt;/a&gt;' in html

    def test_sample_is_valid(self):
        sample = create_sample_xml()

        assert sample.startswith('<?xml')
        assert validate_xml(sample).valid
