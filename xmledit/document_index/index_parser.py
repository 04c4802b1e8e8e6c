"""Classify a document by its root element for the table of contents.

Root elements map onto document types:

    product  -> index    title from <title>, references from topicRef/@ref
    topic    -> topic    title from <title>, references from sectionRef/@ref
    section  -> section  title from the first <para>/<paragraph>
    other    -> unknown  title "{root} Document"

Documents that do not parse become ERROR summaries carrying the parser
message.
"""

import logging
from typing import List, Optional

from lxml import etree

from xmledit.markup_transcoder.xml_tools import parse_xml
from xmledit.models.document_summary import DocumentSummary, DocumentType

logger = logging.getLogger(__name__)


def _text_of(element: Optional[etree._Element]) -> str:
    if element is None:
        return ""
    return "".join(element.itertext()).strip()


def _first(root: etree._Element, *tags: str) -> Optional[etree._Element]:
    for element in root.iter(*tags):
        return element
    return None


def _references(root: etree._Element, tag: str) -> List[str]:
    return [ref.get("ref") for ref in root.iter(tag) if ref.get("ref")]


def parse_document(xml_text: str, filename: str) -> DocumentSummary:
    """Build the table-of-contents summary for one document.

    Args:
        xml_text: Raw document text
        filename: Name the document was loaded from

    Returns:
        DocumentSummary; never raises for malformed input
    """
    try:
        root = parse_xml(xml_text)
    except etree.XMLSyntaxError as e:
        logger.warning(f"Error parsing {filename}: {e}")
        return DocumentSummary(
            filename=filename,
            type=DocumentType.ERROR,
            title=f"Error: {filename}",
            content=xml_text,
            error=f"XML parsing error: {e}",
        )

    attributes = dict(root.attrib)
    tag = etree.QName(root).localname

    if tag == "product":
        return DocumentSummary(
            filename=filename,
            type=DocumentType.INDEX,
            title=_text_of(_first(root, "title")) or "Product Index",
            attributes=attributes,
            references=_references(root, "topicRef"),
            content=xml_text,
            extra={"manualCode": attributes.get("manualCode", "")},
        )

    if tag == "topic":
        return DocumentSummary(
            filename=filename,
            type=DocumentType.TOPIC,
            title=_text_of(_first(root, "title")) or "Untitled Topic",
            attributes=attributes,
            references=_references(root, "sectionRef"),
            content=xml_text,
            extra={"chapterType": attributes.get("type") or "chapter"},
        )

    if tag == "section":
        return DocumentSummary(
            filename=filename,
            type=DocumentType.SECTION,
            title=_text_of(_first(root, "para", "paragraph")) or "Untitled Section",
            attributes=attributes,
            content=xml_text,
            extra={"sectionType": attributes.get("type") or "definition"},
        )

    return DocumentSummary(
        filename=filename,
        type=DocumentType.UNKNOWN,
        title=f"{tag} Document",
        attributes=attributes,
        content=xml_text,
    )
