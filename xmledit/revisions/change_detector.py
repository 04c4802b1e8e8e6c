"""Change detector comparing two XML document snapshots.

This module flattens both documents into (tag, id, text) triples and
reports which elements were added, removed or changed. The document root
is not part of the comparison.
"""

import logging
from typing import List

from lxml import etree

from xmledit.markup_transcoder.xml_tools import parse_xml
from xmledit.revisions.models import ChangeSet, ElementSnapshot

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 50


def _text_content(element: etree._Element) -> str:
    # method="text" leaves out comments and processing instructions
    text = etree.tostring(element, method="text", encoding="unicode", with_tail=False)
    return text.strip()


def flatten(xml: str) -> List[ElementSnapshot]:
    """Flatten the descendants of the root element in document order.

    Raises:
        etree.XMLSyntaxError: If the document is not well-formed
    """
    root = parse_xml(xml)
    return [
        ElementSnapshot(
            tag=element.tag,
            id=element.get("id", ""),
            text=_text_content(element),
        )
        for element in root.iterdescendants()
        if isinstance(element.tag, str)
    ]


def _describe(verb: str, element: ElementSnapshot) -> str:
    if element.text:
        return f"{verb}: {element.tag} - {element.text[:PREVIEW_LENGTH]}..."
    return f"{verb}: {element.tag}"


def detect_changes(original: str, current: str) -> ChangeSet:
    """Compare two documents element by element.

    Args:
        original: XML text of the original snapshot
        current: XML text of the current document

    Returns:
        ChangeSet with one message per differing element. When either
        document does not parse, the set holds a single generic
        modification instead.
    """
    try:
        original_elements = flatten(original)
        current_elements = flatten(current)
    except etree.XMLSyntaxError as e:
        logger.warning(f"Change detection fell back to generic result: {e}")
        return ChangeSet(modifications=["Content has been modified"])

    changes = ChangeSet()
    original_set = set(original_elements)
    current_set = set(current_elements)

    for element in current_elements:
        if element not in original_set:
            changes.additions.append(_describe("Added", element))

    for element in original_elements:
        if element not in current_set:
            changes.deletions.append(_describe("Removed", element))

    first_by_key = {}
    for element in original_elements:
        first_by_key.setdefault(element.key, element)

    for element in current_elements:
        match = first_by_key.get(element.key)
        if match is not None and match.text != element.text:
            changes.modifications.append(f"Modified: {element.tag} content changed")

    logger.debug(
        f"Detected {len(changes.additions)} additions, "
        f"{len(changes.modifications)} modifications, "
        f"{len(changes.deletions)} deletions"
    )
    return changes


def describe_changes(changes: ChangeSet) -> str:
    """Render a ChangeSet as the basic change detection report."""
    text = "Basic Change Detection:\n\n"

    if changes.additions:
        text += f"➕ Additions ({len(changes.additions)}):\n"
        text += "".join(f"  • {entry}\n" for entry in changes.additions)
        text += "\n"

    if changes.modifications:
        text += f"✏️ Modifications ({len(changes.modifications)}):\n"
        text += "".join(f"  • {entry}\n" for entry in changes.modifications)
        text += "\n"

    if changes.deletions:
        text += f"➖ Deletions ({len(changes.deletions)}):\n"
        text += "".join(f"  • {entry}\n" for entry in changes.deletions)

    if changes.is_empty:
        text += "No significant changes detected."

    return text
