"""Bidirectional conversion between the XML dialect and the markup surface.

Both directions run a single pass over the tag stream. Comments, CDATA
sections, processing instructions and doctype declarations are copied
through unchanged; every element tag is rewritten according to the
element table in element_map.

Markup -> XML prefers the side channel (``data-original``) over the table.
Closing ``</div>``-style tags carry no identity of their own, so the XML
element they close is resolved by scanning back over what has been emitted
so far for the most recent candidate that is still open. A container nested
directly in another of the same kind hides the outer one once the inner
one has closed; the scan then keeps the markup tag and reports HEURISTIC.
"""

import logging
import re
from typing import Dict, Iterable, List, Optional, Tuple

from xmledit.markup_transcoder.element_map import (
    CLOSING_CANDIDATES,
    LEGACY_REFERENCE_LABELS,
    LIST_TYPES,
    REFERENCE_LABELS,
    label_for,
    mapping_for,
    xml_tag_for,
)
from xmledit.markup_transcoder.side_channel import (
    ATTRIBUTE,
    SELF_CLOSING_ATTRIBUTE,
    SideChannel,
    SideChannelDecodeError,
)
from xmledit.models.conversion_result import ConversionResult, Fidelity

logger = logging.getLogger(__name__)

_TOKEN = re.compile(
    r"(?P<comment><!--.*?-->)"
    r"|(?P<cdata><!\[CDATA\[.*?\]\]>)"
    r"|(?P<pi><\?.*?\?>)"
    r"|(?P<doctype><!DOCTYPE[^>]*>)"
    r"|<(?P<close>/)?(?P<name>[A-Za-z_][\w:.-]*)"
    r"(?P<attrs>(?:\s[^<>]*?)?)\s*(?P<selfclose>/)?>",
    re.DOTALL | re.IGNORECASE,
)

_DECLARATION = re.compile(r"^\s*(<\?xml\b[^>]*?\?>)")
_ATTRIBUTE_PAIR = re.compile(
    r"""([A-Za-z_:][\w:.-]*)\s*=\s*(?:"([^"]*)"|'([^']*)')"""
)
_LIST_TYPE = re.compile(r"""\btype\s*=\s*(["'])(\w+)\1""")
_STRIP_ATTRIBUTES = re.compile(
    r"""\s+(?:class|contenteditable|data-[\w-]+)\s*=\s*(?:"[^"]*"|'[^']*')"""
)
_ORIGINAL_NAME = re.compile(r"<([A-Za-z_][\w.:-]*)")
_HTML_TAG = re.compile(r"<[^>]+>")


def _attributes(attrs: str) -> Dict[str, str]:
    """Parse an attribute string into a name -> value dict."""
    return {
        name: double if double is not None else single
        for name, double, single in _ATTRIBUTE_PAIR.findall(attrs)
    }


def _clean_attributes(attrs: str) -> str:
    """Drop markup-only attributes before rebuilding an XML tag."""
    return _STRIP_ATTRIBUTES.sub("", attrs).rstrip()


class _EmittedTags:
    """Last open and close position of every tag in the emitted output.

    Looking up the highest open position among a set of candidates whose
    last close came earlier is the same as scanning the output backward
    for the first candidate opening tag that has no later closing tag.
    """

    def __init__(self):
        self._position = 0
        self._opened: Dict[str, int] = {}
        self._closed: Dict[str, int] = {}

    def opened(self, tag: str) -> None:
        self._position += 1
        self._opened[tag] = self._position

    def closed(self, tag: str) -> None:
        self._position += 1
        self._closed[tag] = self._position

    def most_recent_unclosed(self, candidates: Iterable[str]) -> Optional[str]:
        best, best_position = None, 0
        for tag in candidates:
            position = self._opened.get(tag, 0)
            if position > self._closed.get(tag, 0) and position > best_position:
                best, best_position = tag, position
        return best


class _MarkupState:
    """Mutable state of one markup -> XML pass."""

    def __init__(self):
        self.emitted = _EmittedTags()
        self.pending_label = ""
        self.result = ConversionResult(content="")


class MarkupTranscoder:
    """Converts documents between the XML dialect and the markup surface.

    Conversions never raise. Unexpected failures return the input unchanged
    with FALLBACK fidelity so the editor keeps the last good content.
    """

    def __init__(self, side_channel: Optional[SideChannel] = None):
        self.side_channel = side_channel or SideChannel()

    # ------------------------------------------------------------------
    # XML -> markup
    # ------------------------------------------------------------------

    def xml_to_markup_result(self, xml: str) -> ConversionResult:
        """Convert XML text to markup.

        Args:
            xml: XML document text

        Returns:
            ConversionResult with the markup and its fidelity
        """
        if not xml or not xml.strip():
            return ConversionResult(content="")

        try:
            return self._xml_to_markup(xml)
        except Exception as e:
            logger.exception("XML to markup conversion failed")
            return ConversionResult(
                content=xml,
                fidelity=Fidelity.FALLBACK,
                warnings=[f"Conversion failed: {e}"],
            )

    def xml_to_markup(self, xml: str) -> str:
        return self.xml_to_markup_result(xml).content

    def _xml_to_markup(self, xml: str) -> ConversionResult:
        result = ConversionResult(content="")
        prefix = ""
        match = _DECLARATION.match(xml)
        if match:
            prefix = xml[:match.start(1)] + self.side_channel.encode_declaration(
                match.group(1)
            )
            xml = xml[match.end():]

        emitted = _EmittedTags()
        parts: List[str] = [prefix]
        position = 0
        for token in _TOKEN.finditer(xml):
            parts.append(xml[position:token.start()])
            position = token.end()
            if token.group("name") is None:
                parts.append(token.group(0))
            else:
                parts.append(self._xml_tag_to_markup(token, emitted, result))
        parts.append(xml[position:])

        result.content = "".join(parts)
        logger.debug(
            f"Converted XML to markup ({len(xml)} -> {len(result.content)} chars)"
        )
        return result

    def _xml_tag_to_markup(
        self, token: "re.Match", emitted: _EmittedTags, result: ConversionResult
    ) -> str:
        name = token.group("name")
        attrs = token.group("attrs") or ""
        original = token.group(0)

        if token.group("close"):
            if name == "list":
                markup_tag = emitted.most_recent_unclosed(["ul", "ol"]) or "ul"
                emitted.closed(markup_tag)
                return f"</{markup_tag}>"
            mapping = mapping_for(name)
            return f"</{mapping.markup_tag}>" if mapping else original

        self_closing = bool(token.group("selfclose"))

        if name in REFERENCE_LABELS and self_closing:
            return self._reference_marker(name, attrs, original)

        if name == "list":
            list_type = _LIST_TYPE.search(attrs)
            markup_tag = LIST_TYPES.get(list_type.group(2) if list_type else "", "ul")
            remaining = _LIST_TYPE.sub("", attrs).strip()
            parts = [markup_tag]
            if remaining or not list_type or list_type.group(2) not in LIST_TYPES:
                parts.append(self.side_channel.attribute(original))
            if self_closing:
                parts.append(f'{SELF_CLOSING_ATTRIBUTE}="true"')
                return f"<{' '.join(parts)}></{markup_tag}>"
            emitted.opened(markup_tag)
            return f"<{' '.join(parts)}>"

        mapping = mapping_for(name)
        if mapping is None:
            result.warnings.append(f"Unknown element <{name}> passed through")
            return original

        if mapping.markup_tag == "br":
            return "<br>"

        parts = [mapping.markup_tag]
        if mapping.copy_attributes and attrs.strip():
            parts.append(attrs.strip())
        if mapping.css_class:
            parts.append(f'class="{mapping.css_class}"')
        if mapping.extra_attributes:
            parts.append(mapping.extra_attributes)
        if mapping.always_preserve or attrs.strip() or self_closing:
            parts.append(self.side_channel.attribute(original))
        if self_closing:
            parts.append(f'{SELF_CLOSING_ATTRIBUTE}="true"')
            return f"<{' '.join(parts)}>{mapping.label}</{mapping.markup_tag}>"
        return f"<{' '.join(parts)}>{mapping.label}"

    def _reference_marker(self, name: str, attrs: str, original: str) -> str:
        ref = _attributes(attrs).get("ref", "")
        return (
            f'<p class="reference" contenteditable="false" data-ref="{ref}" '
            f"{self.side_channel.attribute(original)}>"
            f"{REFERENCE_LABELS[name]}{ref}</p>"
        )

    # ------------------------------------------------------------------
    # markup -> XML
    # ------------------------------------------------------------------

    def markup_to_xml_result(self, markup: str) -> ConversionResult:
        """Convert markup back to XML text.

        Args:
            markup: Markup surface content

        Returns:
            ConversionResult with the XML and its fidelity
        """
        if not markup or not markup.strip():
            return ConversionResult(content="")

        try:
            return self._markup_to_xml(markup)
        except Exception as e:
            logger.exception("Markup to XML conversion failed")
            return ConversionResult(
                content=markup,
                fidelity=Fidelity.FALLBACK,
                warnings=[f"Conversion failed: {e}"],
            )

    def markup_to_xml(self, markup: str) -> str:
        return self.markup_to_xml_result(markup).content

    def _markup_to_xml(self, markup: str) -> ConversionResult:
        declaration, markup = self.side_channel.split_declaration(markup)
        state = _MarkupState()
        parts: List[str] = [declaration]
        position = 0

        while True:
            token = _TOKEN.search(markup, position)
            if token is None:
                parts.append(self._text(markup[position:], state))
                break
            parts.append(self._text(markup[position:token.start()], state))
            if token.group("name") is None:
                parts.append(token.group(0))
                position = token.end()
                continue
            emitted, position = self._markup_tag_to_xml(token, markup, state)
            parts.append(emitted)

        state.result.content = "".join(parts)
        return state.result

    @staticmethod
    def _text(text: str, state: _MarkupState) -> str:
        label, state.pending_label = state.pending_label, ""
        if label and text.startswith(label):
            return text[len(label):]
        return text

    def _markup_tag_to_xml(
        self, token: "re.Match", markup: str, state: _MarkupState
    ) -> Tuple[str, int]:
        name = token.group("name").lower()
        attrs = token.group("attrs") or ""
        end = token.end()

        if token.group("close"):
            return self._closing_tag(name, token.group(0), state), end

        values = _attributes(attrs)
        classes = values.get("class", "").split()

        if name == "p" and "reference" in classes:
            rebuilt = self._reference_to_xml(values, markup, end, state)
            if rebuilt is not None:
                return rebuilt

        if values.get(SELF_CLOSING_ATTRIBUTE) == "true":
            close = markup.find(f"</{name}>", end)
            if close != -1:
                original = self._decode(values, state)
                if original is None:
                    xml_tag = xml_tag_for(name, classes) or name
                    original = f"<{xml_tag}{_clean_attributes(attrs)}/>"
                return original, close + len(f"</{name}>")

        original = self._decode(values, state)
        if original is not None:
            xml_tag = _ORIGINAL_NAME.match(original).group(1)
            if not original.endswith("/>"):
                state.emitted.opened(xml_tag)
            state.pending_label = label_for(xml_tag)
            return original, end

        clean = _clean_attributes(attrs)
        if name in ("ul", "ol"):
            list_type = "ordered" if name == "ol" else "unordered"
            state.emitted.opened("list")
            return f'<list type="{list_type}"{clean}>', end
        if name == "br":
            return "<br/>", end

        xml_tag = xml_tag_for(name, classes)
        if xml_tag is None:
            if name in CLOSING_CANDIDATES:
                state.emitted.opened(name)
            state.result.warnings.append(f"Unknown markup element <{name}> passed through")
            return token.group(0), end

        mapping = mapping_for(xml_tag)
        if mapping.always_preserve:
            state.result.downgrade(
                f"Rebuilt <{xml_tag}> from <{name}> without its original tag"
            )
        state.emitted.opened(xml_tag)
        state.pending_label = mapping.label
        return f"<{xml_tag}{clean}>", end

    def _decode(self, values: Dict[str, str], state: _MarkupState) -> Optional[str]:
        value = values.get(ATTRIBUTE)
        if value is None:
            return None
        try:
            return self.side_channel.decode(value)
        except SideChannelDecodeError as e:
            state.result.downgrade(str(e))
            return None

    def _closing_tag(self, name: str, original: str, state: _MarkupState) -> str:
        if name == "br":
            return ""
        candidates = CLOSING_CANDIDATES.get(name)
        if candidates is None:
            return original

        xml_tag = state.emitted.most_recent_unclosed(candidates + [name])
        if xml_tag is None:
            state.result.downgrade(
                f"No open element found for </{name}>, kept as markup"
            )
            return original
        state.emitted.closed(xml_tag)
        return f"</{xml_tag}>"

    def _reference_to_xml(
        self, values: Dict[str, str], markup: str, start: int, state: _MarkupState
    ) -> Optional[Tuple[str, int]]:
        close = markup.find("</p>", start)
        if close == -1:
            return None
        end = close + len("</p>")

        original = self._decode(values, state)
        if original is not None:
            return original, end

        text = _HTML_TAG.sub("", markup[start:close]).strip()
        ref = values.get("data-ref", "")
        labels = [(label, tag) for tag, label in REFERENCE_LABELS.items()]
        for label, tag in labels + LEGACY_REFERENCE_LABELS:
            if text.startswith(label.strip()):
                ref = ref or text[len(label.strip()):].strip()
                state.result.downgrade(f"Rebuilt <{tag}> reference from its label")
                return f'<{tag} ref="{ref}"/>', end

        if ref:
            state.result.downgrade("Rebuilt reference without its original tag")
            return f'<topicRef ref="{ref}"/>', end
        return None


_default = MarkupTranscoder()


def xml_to_markup(xml: str) -> str:
    """Convert XML text to markup using the default transcoder."""
    return _default.xml_to_markup(xml)


def markup_to_xml(markup: str) -> str:
    """Convert markup back to XML text using the default transcoder."""
    return _default.markup_to_xml(markup)
