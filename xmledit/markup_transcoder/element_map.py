"""Mapping table between the XML dialect and the markup surface.

Each ElementMapping describes how one XML element is shown on the markup
surface and how it is recognised again on the way back. The table is the
contract both conversion directions share.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class ElementMapping:
    """How one XML element maps onto the markup surface.

    Attributes:
        xml_tag: XML element name
        markup_tag: Markup element name it is rendered as
        css_class: Class attribute identifying the element on the surface
        label: Synthesized label text emitted after the opening tag
        always_preserve: Attach the side channel even without attributes
        extra_attributes: Additional fixed markup attributes
        copy_attributes: Copy the XML attributes onto the markup element
    """

    xml_tag: str
    markup_tag: str
    css_class: str = ""
    label: str = ""
    always_preserve: bool = False
    extra_attributes: str = ""
    copy_attributes: bool = False


CONTAINER_CLASSES: Dict[str, str] = {
    "product": "product",
    "topic": "topic",
    "section": "section",
    "revisionMetadata": "revision-metadata",
    "Revisions": "revisions-section",
    "Revision": "revision",
}

REVISION_COMMENT_BLOCK = ElementMapping(
    xml_tag="revisionComment",
    markup_tag="div",
    css_class="revision-comment",
    label="Comment: ",
    always_preserve=True,
    extra_attributes='data-xml-element="revisionComment"',
)

REFERENCE_LABELS: Dict[str, str] = {
    "topicRef": "📄 Topic Reference: ",
    "sectionRef": "📋 Section Reference: ",
}

# Older surfaces labelled references differently
LEGACY_REFERENCE_LABELS: List[Tuple[str, str]] = [
    ("📄 References: ", "topicRef"),
    ("📋 Section: ", "sectionRef"),
]


def _build_table() -> Dict[str, ElementMapping]:
    table: Dict[str, ElementMapping] = {}

    for xml_tag, css_class in CONTAINER_CLASSES.items():
        table[xml_tag] = ElementMapping(
            xml_tag, "div", css_class=css_class, always_preserve=True
        )

    table["frontMatter"] = ElementMapping("frontMatter", "header", always_preserve=True)
    table["title"] = ElementMapping(
        "title", "h1", always_preserve=True, copy_attributes=True
    )
    table["para"] = ElementMapping(
        "para", "p", always_preserve=True, copy_attributes=True
    )
    table["paragraph"] = ElementMapping(
        "paragraph", "p", always_preserve=True, copy_attributes=True
    )
    table["bold"] = ElementMapping("bold", "strong")
    table["italic"] = ElementMapping("italic", "em")
    table["item"] = ElementMapping("item", "li")
    table["br"] = ElementMapping("br", "br")
    table["revisionComment"] = REVISION_COMMENT_BLOCK

    table["RevisionNumber"] = ElementMapping(
        "RevisionNumber", "span", css_class="revision-number", label="Rev: "
    )
    table["RevisionDate"] = ElementMapping(
        "RevisionDate", "span", css_class="revision-date", label="Date: "
    )
    table["RevisionComment"] = ElementMapping(
        "RevisionComment", "span", css_class="revision-comment", label="Comment: "
    )
    # Lower-case metadata variants share classes with the capitalised ones
    table["revisionNumber"] = ElementMapping(
        "revisionNumber", "span", css_class="revision-number", label="Rev: ",
        always_preserve=True,
    )
    table["revisionDate"] = ElementMapping(
        "revisionDate", "span", css_class="revision-date", label="Date: ",
        always_preserve=True,
    )
    return table


XML_TO_MARKUP: Dict[str, ElementMapping] = _build_table()

# Markup (tag, class) -> XML tag used when the side channel is missing
MARKUP_TO_XML: Dict[Tuple[str, str], str] = {
    ("div", "product"): "product",
    ("div", "topic"): "topic",
    ("div", "section"): "section",
    ("div", "revision-metadata"): "revisionMetadata",
    ("div", "revisions-section"): "Revisions",
    ("div", "revision"): "Revision",
    ("div", "revision-comment"): "revisionComment",
    ("header", ""): "frontMatter",
    ("h1", ""): "title",
    ("p", ""): "para",
    ("strong", ""): "bold",
    ("em", ""): "italic",
    ("li", ""): "item",
    ("span", "revision-number"): "RevisionNumber",
    ("span", "revision-date"): "RevisionDate",
    ("span", "revision-comment"): "RevisionComment",
}

# Markup closing tag -> XML elements it may close, resolved by backward scan
CLOSING_CANDIDATES: Dict[str, List[str]] = {
    "div": list(CONTAINER_CLASSES) + ["revisionComment"],
    "p": ["para", "paragraph"],
    "h1": ["title"],
    "header": ["frontMatter"],
    "span": [
        "RevisionNumber", "RevisionDate", "RevisionComment",
        "revisionNumber", "revisionDate",
    ],
    "strong": ["bold"],
    "em": ["italic"],
    "li": ["item"],
    "ul": ["list"],
    "ol": ["list"],
}

LIST_TYPES: Dict[str, str] = {"unordered": "ul", "ordered": "ol"}


def mapping_for(xml_tag: str) -> Optional[ElementMapping]:
    """Return the mapping for an XML element, if it is in the vocabulary."""
    return XML_TO_MARKUP.get(xml_tag)


def label_for(xml_tag: str) -> str:
    mapping = XML_TO_MARKUP.get(xml_tag)
    return mapping.label if mapping else ""


def xml_tag_for(markup_tag: str, classes: List[str]) -> Optional[str]:
    """Return the XML element a markup element reconstructs to.

    Class-specific entries take precedence over the bare tag entry.
    """
    for css_class in classes:
        xml_tag = MARKUP_TO_XML.get((markup_tag, css_class))
        if xml_tag:
            return xml_tag
    return MARKUP_TO_XML.get((markup_tag, ""))
