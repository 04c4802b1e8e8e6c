"""Revision composer for appending revision entries to documents.

This module provides insert_revision, which records a RevisionRecord in
the document's <Revisions> block. Insertion is strictly append-only and
runs as a cascade:

1. DOM: parse the document, append a <Revision> element, re-serialize.
2. SPLICE: for documents that do not parse, insert literal text right
   after the root opening tag or before the first </Revisions>.
3. COMMENT: append an XML comment carrying the revision comment.
"""

import logging
import re
from typing import List

from lxml import etree

from xmledit.markup_transcoder.xml_tools import parse_xml
from xmledit.models.revision_record import RevisionRecord
from xmledit.revisions.models import InsertStrategy, RevisionInsertResult

logger = logging.getLogger(__name__)

REVISIONS_TAG = "Revisions"
REVISION_TAG = "Revision"

_DECLARATION = re.compile(r"^\s*(<\?xml\b[^>]*?\?>)")
# Declaration, comments, processing instructions and doctype before the root
_PROLOG = re.compile(
    r"(?:\s*(?:<\?.*?\?>|<!--.*?-->|<!DOCTYPE(?:[^>\[]|\[.*?\])*>))*\s*",
    re.DOTALL,
)
_ROOT_OPEN = re.compile(r"<[A-Za-z_][^>]*>")
_BLANK_LINES = re.compile(r"^\s*\n", re.MULTILINE)
# Characters XML 1.0 cannot represent, even as character references
_XML_ILLEGAL = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def escape_xml(text: str) -> str:
    """Escape the five XML special characters."""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def create_revision_xml(number: str, date: str, comment: str) -> str:
    """Render one <Revision> entry as indented text."""
    return (
        "  <Revision>\n"
        f"    <RevisionNumber>{number}</RevisionNumber>\n"
        f"    <RevisionDate>{date}</RevisionDate>\n"
        f"    <RevisionComment>{escape_xml(comment)}</RevisionComment>\n"
        "  </Revision>"
    )


def next_revision_number(current: str) -> str:
    """Increment the minor part of a "major.minor" revision number.

    Examples:
        "1.0" -> "1.1", "2.9" -> "2.10". Numbers with fewer than two parts
        or a non-numeric minor part are returned unchanged.
    """
    parts = current.split(".") if current else []
    if len(parts) < 2:
        return current
    try:
        minor = int(parts[1])
    except ValueError:
        return current
    return f"{parts[0]}.{minor + 1}"


def strip_illegal_characters(text: str) -> str:
    return _XML_ILLEGAL.sub("", text)


def _clean_record(record: RevisionRecord) -> RevisionRecord:
    return RevisionRecord(
        number=strip_illegal_characters(record.number),
        date=strip_illegal_characters(record.date),
        comment=strip_illegal_characters(record.comment),
        timestamp=record.timestamp,
    )


def _format(xml: str) -> str:
    return _BLANK_LINES.sub("", xml.replace("><", ">\n<"))


def _insert_with_dom(xml: str, record: RevisionRecord) -> str:
    root = parse_xml(xml)

    revisions = next(root.iter(REVISIONS_TAG), None)
    if revisions is None:
        revisions = etree.Element(REVISIONS_TAG)
        root.insert(0, revisions)

    revision = etree.SubElement(revisions, REVISION_TAG)
    etree.SubElement(revision, "RevisionNumber").text = record.number
    etree.SubElement(revision, "RevisionDate").text = record.date
    etree.SubElement(revision, "RevisionComment").text = record.comment

    body = etree.tostring(root.getroottree(), encoding="unicode")
    declaration = _DECLARATION.match(xml)
    if declaration:
        body = f"{declaration.group(1)}\n{body}"
    return _format(body)


def _insert_with_splice(xml: str, record: RevisionRecord) -> str:
    """Insert revision text without parsing.

    Raises:
        ValueError: If no root opening tag can be located
    """
    revision_xml = create_revision_xml(record.number, record.date, record.comment)

    if "</Revisions>" in xml:
        return xml.replace("</Revisions>", f"{revision_xml}\n  </Revisions>", 1)
    if "<Revisions" in xml:
        raise ValueError("Revisions element has no closing tag")

    prolog = _PROLOG.match(xml)
    root_open = _ROOT_OPEN.match(xml, prolog.end())
    if root_open is None or root_open.group(0).endswith("/>"):
        raise ValueError("No root opening tag found")

    position = root_open.end()
    block = f"\n  <Revisions>\n{revision_xml}\n  </Revisions>"
    return xml[:position] + block + xml[position:]


def _comment_text(comment: str) -> str:
    text = comment
    while "--" in text:
        text = text.replace("--", "- -")
    if text.endswith("-"):
        text += " "
    return text


def insert_revision_result(xml: str, record: RevisionRecord) -> RevisionInsertResult:
    """Append a revision entry to a document.

    Args:
        xml: Document text
        record: Revision to record

    Returns:
        RevisionInsertResult with the updated document and the strategy
        that produced it
    """
    record = _clean_record(record)

    try:
        return RevisionInsertResult(
            xml=_insert_with_dom(xml, record), strategy=InsertStrategy.DOM
        )
    except (etree.XMLSyntaxError, ValueError) as e:
        logger.warning(f"Error inserting revision XML, using fallback method: {e}")

    try:
        return RevisionInsertResult(
            xml=_insert_with_splice(xml, record), strategy=InsertStrategy.SPLICE
        )
    except ValueError as e:
        logger.warning(f"Splice insertion failed, appending comment: {e}")

    return RevisionInsertResult(
        xml=f"{xml}\n<!-- Revision: {_comment_text(record.comment)} -->",
        strategy=InsertStrategy.COMMENT,
    )


def insert_revision(xml: str, record: RevisionRecord) -> str:
    return insert_revision_result(xml, record).xml


def extract_revisions(xml: str) -> List[RevisionRecord]:
    """List the revision entries already present in a document.

    Documents that do not parse have no readable history and yield an
    empty list.
    """
    try:
        root = parse_xml(xml)
    except etree.XMLSyntaxError as e:
        logger.debug(f"Cannot read revisions from malformed document: {e}")
        return []

    records = []
    for revision in root.iter(REVISION_TAG):
        records.append(
            RevisionRecord(
                number=(revision.findtext("RevisionNumber") or "").strip(),
                date=(revision.findtext("RevisionDate") or "").strip(),
                comment=(revision.findtext("RevisionComment") or "").strip(),
            )
        )
    return records
