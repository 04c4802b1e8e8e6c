"""Validation, formatting and preview helpers for XML text."""

import html
import logging
import re
from dataclasses import dataclass
from typing import Optional

from lxml import etree

logger = logging.getLogger(__name__)

INDENT = "  "

_DECLARATION = re.compile(r"<\?xml[^?]*\?>")
_CLOSING_LINE = re.compile(r"^\s*</\w")
_OPENING_LINE = re.compile(r"^\s*<\w[^>]*(?<!/)>$")
_ESCAPED_TAG = re.compile(r"(&lt;)((?:(?!&lt;|&gt;).)*?)(&gt;)", re.DOTALL)
_ESCAPED_COMMENT = re.compile(
    r'<span class="xml-element">(&lt;!--.*?--&gt;)</span>', re.DOTALL
)

SAMPLE_XML = """<?xml version="1.0" encoding="UTF-8"?>
<section>
    <title>Sample XML Document</title>
    <paragraph>This is a sample paragraph with <bold>bold text</bold> and <italic>italic text</italic>.</paragraph>
    <list type="unordered">
        <item>First item</item>
        <item>Second item</item>
        <item>Third item</item>
    </list>
    <paragraph>You can edit this content using the WYSIWYG editor above.</paragraph>
</section>"""


@dataclass
class ValidationResult:
    """Outcome of a well-formedness check.

    Attributes:
        valid: True when the text parsed as XML
        message: Success message (valid documents only)
        error: Parser error description (invalid documents only)
    """

    valid: bool
    message: str = ""
    error: Optional[str] = None


def _parser() -> etree.XMLParser:
    # Text is already decoded; the encoding declaration must not re-decode it
    return etree.XMLParser(resolve_entities=False, no_network=True, encoding="utf-8")


def parse_xml(text: str) -> etree._Element:
    """Parse XML text strictly and return the root element.

    Raises:
        etree.XMLSyntaxError: If the text is not well-formed
    """
    # lxml refuses str input that carries an encoding declaration
    return etree.fromstring(text.encode("utf-8"), parser=_parser())


def validate_xml(text: str) -> ValidationResult:
    """Check whether text is well-formed XML.

    Example:
        >>> validate_xml("<a><b/></a>").message
        'XML is well-formed'
    """
    if not text or not text.strip():
        return ValidationResult(valid=False, error="Document is empty")
    try:
        parse_xml(text)
    except etree.XMLSyntaxError as e:
        return ValidationResult(valid=False, error=str(e) or "XML syntax error")
    return ValidationResult(valid=True, message="XML is well-formed")


def escape_html(text: str) -> str:
    return html.escape(text, quote=False)


def prettify_xml(xml: str) -> str:
    """Indent XML by splitting between adjacent tags.

    Each line that closes an element dedents, each line ending in an
    opening tag indents the following lines.
    """
    lines = xml.replace("><", ">\n<").split("\n")
    indent = 0
    pretty = []
    for line in lines:
        if _CLOSING_LINE.search(line):
            indent -= 1
        pretty.append(INDENT * max(0, indent) + line)
        if _OPENING_LINE.search(line):
            indent += 1
    return "\n".join(pretty)


def highlight_xml(escaped_xml: str) -> str:
    """Wrap escaped tags and comments in highlighting spans."""
    highlighted = _ESCAPED_TAG.sub(
        r'<span class="xml-element">\1\2\3</span>', escaped_xml
    )
    return _ESCAPED_COMMENT.sub(r'<span class="xml-comment">\1</span>', highlighted)


def format_xml(xml: str) -> str:
    """Serialize, prettify and highlight XML for display.

    Text that does not parse is returned escaped without highlighting.
    """
    try:
        root = parse_xml(xml)
    except etree.XMLSyntaxError:
        logger.debug("format_xml: not well-formed, returning escaped text")
        return escape_html(xml)

    serialized = etree.tostring(root, encoding="unicode")
    return highlight_xml(escape_html(prettify_xml(serialized)))


def render_preview(xml: str) -> str:
    """Render the preview panel HTML for a document."""
    validation = validate_xml(xml)
    body = _DECLARATION.sub("", xml)

    if validation.valid:
        return f"<pre>{format_xml(body)}</pre>"

    return (
        '<div class="validation-error">'
        "<strong>XML Validation Error:</strong><br>"
        f"{escape_html(validation.error or '')}"
        "</div>"
        f"<pre>{escape_html(body)}</pre>"
    )


def create_sample_xml() -> str:
    return SAMPLE_XML
