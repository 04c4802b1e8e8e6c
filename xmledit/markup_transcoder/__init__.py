"""Markup transcoder module for XML ↔ editor markup conversion.

This module provides the MarkupTranscoder for bidirectional conversion
between the XML document dialect and the rich-text editor's markup, along
with the side channel that carries original tags and helpers for
validating and previewing XML.
"""

from .side_channel import PreservedElement, SideChannel, SideChannelDecodeError
from .transcoder import MarkupTranscoder, markup_to_xml, xml_to_markup
from .xml_tools import (
    ValidationResult,
    create_sample_xml,
    escape_html,
    format_xml,
    highlight_xml,
    parse_xml,
    prettify_xml,
    render_preview,
    validate_xml,
)

__all__ = [
    'MarkupTranscoder',
    'PreservedElement',
    'SideChannel',
    'SideChannelDecodeError',
    'ValidationResult',
    'create_sample_xml',
    'escape_html',
    'format_xml',
    'highlight_xml',
    'markup_to_xml',
    'parse_xml',
    'prettify_xml',
    'render_preview',
    'validate_xml',
    'xml_to_markup',
]
