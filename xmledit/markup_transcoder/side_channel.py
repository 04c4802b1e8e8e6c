"""Round-trip side channel for markup conversion.

This module provides the SideChannel class which attaches a percent-encoded
copy of the original XML tag to the markup element it was converted to
(the ``data-original`` attribute), and reads it back when the markup is
converted to XML again.

The encoding matches JavaScript's encodeURIComponent so markup produced by
browser-based editors and by this package is interchangeable.
"""

import logging
import re
from dataclasses import dataclass
from typing import List
from urllib.parse import quote, unquote

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

ATTRIBUTE = "data-original"
SELF_CLOSING_ATTRIBUTE = "data-self-closing"

# encodeURIComponent leaves these unescaped
_SAFE_CHARACTERS = "-_.!~*'()"

_MALFORMED_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_ORIGINAL_TAG = re.compile(r"^<[A-Za-z_][\w.:-]*(\s[^<>]*)?/?>$", re.DOTALL)
_DECLARATION_COMMENT = re.compile(r"^\s*<!--xml-declaration:([^>]*?)-->")


class SideChannelDecodeError(ValueError):
    """Raised when a side-channel value cannot be turned back into a tag."""

    def __init__(self, value: str, reason: str):
        super().__init__(f"Undecodable side channel '{value[:40]}': {reason}")
        self.value = value
        self.reason = reason


@dataclass
class PreservedElement:
    """Information about one markup element carrying the side channel.

    Attributes:
        markup_tag: Name of the markup element (e.g., 'div', 'p')
        original: Decoded original XML tag text
        xml_tag: Name of the original XML element
        self_closing: Whether the original element was self-closing
    """

    markup_tag: str
    original: str
    xml_tag: str
    self_closing: bool = False


class SideChannel:
    """Encodes, decodes and inspects the data-original side channel.

    Encoding happens while converting XML to markup; decoding happens while
    converting markup back to XML, where a decodable side channel always
    wins over table-based reconstruction.
    """

    def __init__(self):
        """Initialize SideChannel with html.parser for inspection."""
        self.parser = "html.parser"

    @staticmethod
    def encode(original_tag: str) -> str:
        """Percent-encode an original XML tag for use as an attribute value."""
        return quote(original_tag, safe=_SAFE_CHARACTERS)

    @staticmethod
    def decode(value: str) -> str:
        """Decode a side-channel value back to the original XML tag.

        Args:
            value: Attribute value as found in the markup

        Returns:
            The original XML tag text

        Raises:
            SideChannelDecodeError: If the value is not a valid encoding of a tag
        """
        if _MALFORMED_ESCAPE.search(value):
            raise SideChannelDecodeError(value, "malformed percent escape")
        try:
            original = unquote(value, errors="strict")
        except UnicodeDecodeError as e:
            raise SideChannelDecodeError(value, str(e)) from e
        if not _ORIGINAL_TAG.match(original):
            raise SideChannelDecodeError(value, "decoded value is not a tag")
        return original

    @classmethod
    def attribute(cls, original_tag: str) -> str:
        """Render the side-channel attribute for an original tag."""
        return f'{ATTRIBUTE}="{cls.encode(original_tag)}"'

    @classmethod
    def encode_declaration(cls, declaration: str) -> str:
        """Carry an XML declaration as a leading markup comment."""
        return f"<!--xml-declaration:{cls.encode(declaration)}-->"

    @staticmethod
    def split_declaration(markup: str):
        """Split a leading declaration comment from markup.

        Returns:
            Tuple of (declaration or '', remaining markup)
        """
        match = _DECLARATION_COMMENT.match(markup)
        if not match:
            return "", markup
        try:
            declaration = unquote(match.group(1), errors="strict")
        except UnicodeDecodeError:
            logger.warning("Dropping undecodable XML declaration comment")
            return "", markup[match.end():]
        return declaration, markup[match.end():]

    def inspect(self, markup: str) -> List[PreservedElement]:
        """List every markup element carrying a decodable side channel.

        Args:
            markup: Markup surface content

        Returns:
            PreservedElement entries in document order
        """
        soup = BeautifulSoup(markup, self.parser)
        preserved: List[PreservedElement] = []

        for tag in soup.find_all(attrs={ATTRIBUTE: True}):
            value = tag.get(ATTRIBUTE, "")
            try:
                original = self.decode(value)
            except SideChannelDecodeError as e:
                logger.debug(f"Skipping element <{tag.name}>: {e}")
                continue

            xml_tag = re.match(r"<([A-Za-z_][\w.:-]*)", original).group(1)
            preserved.append(
                PreservedElement(
                    markup_tag=tag.name,
                    original=original,
                    xml_tag=xml_tag,
                    self_closing=tag.get(SELF_CLOSING_ATTRIBUTE) == "true",
                )
            )

        logger.debug(f"Found {len(preserved)} side-channel elements")
        return preserved

    def strip(self, markup: str) -> str:
        """Remove the side channel from markup.

        The result converts back to XML through table-based reconstruction
        only, which is what a markup surface that drops unknown attributes
        would hand back.
        """
        soup = BeautifulSoup(markup, self.parser)
        for tag in soup.find_all(attrs={ATTRIBUTE: True}):
            del tag[ATTRIBUTE]
            if SELF_CLOSING_ATTRIBUTE in tag.attrs:
                del tag[SELF_CLOSING_ATTRIBUTE]
        return str(soup)
