"""Editor session holding one document and its revision context.

This module provides EditorSession, the document context behind every
editing surface. A session owns the current XML text, its markup image,
the view mode (XML or markup), the revision manager with the original
snapshot and history, and the last AI response waiting to be applied.

Edits made on either surface keep the other in sync: markup edits are
transcoded to XML immediately, XML edits re-render the markup when the
markup view is active.
"""

import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import List, Optional

from xmledit.ai_gateway.ai_client import AICallResult, extract_xml_from_response
from xmledit.editor.errors import EmptyPromptError, NoAIResponseError
from xmledit.editor.retry_logic import when_ready
from xmledit.markup_transcoder.transcoder import MarkupTranscoder
from xmledit.markup_transcoder.xml_tools import (
    ValidationResult,
    create_sample_xml,
    render_preview,
    validate_xml,
)
from xmledit.models.conversion_result import ConversionResult, Fidelity
from xmledit.models.document_summary import DocumentSummary
from xmledit.models.revision_record import RevisionRecord
from xmledit.revisions.models import RevisionDraft, RevisionInsertResult
from xmledit.revisions.revision_composer import extract_revisions
from xmledit.revisions.revision_manager import RevisionManager

logger = logging.getLogger(__name__)

EDIT_TASK = "xml_editor"


@dataclass
class SessionStatus:
    """Last status message shown to the user.

    Attributes:
        message: Human-readable message
        level: One of 'info', 'success', 'warning', 'error'
    """
    message: str = "Ready"
    level: str = "info"


def export_filename(on: Optional[date] = None) -> str:
    """Name of an exported document, e.g. document_2024-05-01.xml."""
    return f"document_{(on or date.today()).isoformat()}.xml"


def _has_content(session: "EditorSession") -> bool:
    return bool(session.xml and session.xml.strip())


class EditorSession:
    """One editing session over one document.

    Example:
        >>> session = EditorSession()
        >>> session.load_sample()
        >>> session.toggle_view()
        >>> session.edit_markup(session.markup.replace("Sample", "My"))
        >>> session.export_xml(Path("out"))
    """

    def __init__(
        self,
        transcoder: Optional[MarkupTranscoder] = None,
        ai_client=None,
        revision_manager: Optional[RevisionManager] = None,
    ):
        self.transcoder = transcoder or MarkupTranscoder()
        self.ai_client = ai_client
        self.revision_manager = revision_manager or RevisionManager(ai_client)
        self.is_xml_view = True
        self.xml = ""
        self.markup = ""
        self.title = ""
        self.last_fidelity = Fidelity.EXACT
        self.last_ai_response: Optional[str] = None
        self.revisions: List[RevisionRecord] = []
        self.status = SessionStatus()

    def set_status(self, message: str, level: str = "info") -> None:
        self.status = SessionStatus(message, level)
        logger.debug(f"Status [{level}]: {message}")

    def _render_markup(self) -> None:
        result = self.transcoder.xml_to_markup_result(self.xml)
        self.markup = result.content
        self.last_fidelity = result.fidelity

    # Loading

    def load_xml_content(self, xml: str, title: str = "") -> bool:
        """Load a document and make it the original snapshot.

        Returns:
            False when there is nothing to load
        """
        if not xml:
            self.set_status("No XML content to load", "error")
            return False

        self.xml = xml
        self.title = title
        self._render_markup()
        self.revision_manager.set_original_content(xml)
        self._refresh_when_ready()

        self.set_status(f"Loaded: {title}" if title else "XML content loaded", "success")
        return True

    def load_sample(self) -> None:
        self.load_xml_content(create_sample_xml())
        self.set_status("Sample content loaded")

    def open_document(self, summary: DocumentSummary) -> bool:
        """Load a table-of-contents entry into the session."""
        return self.load_xml_content(summary.content, summary.title)

    def import_xml(self, path: Path) -> bool:
        """Replace the current document with a file's text.

        The text is taken as-is; the original snapshot is not changed.
        """
        try:
            with open(path, encoding="utf-8", newline="") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            self.set_status(f"Import error: {e}", "error")
            return False

        self.xml = text
        self._render_markup()
        self.set_status("XML imported successfully", "success")
        return True

    def export_xml(self, directory: Path, on: Optional[date] = None) -> Path:
        """Write the current document to directory byte-for-byte.

        Returns:
            Path of the written file
        """
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / export_filename(on)
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(self.xml)

        self.set_status("XML exported successfully", "success")
        logger.info(f"Exported document to {path}")
        return path

    # Editing

    def toggle_view(self) -> bool:
        """Switch between XML and markup view.

        Returns:
            True when the XML view is now active
        """
        self.is_xml_view = not self.is_xml_view
        if not self.is_xml_view:
            self._render_markup()
        return self.is_xml_view

    def edit_markup(self, markup: str) -> ConversionResult:
        """Replace the markup surface and transcode it into the document."""
        self.markup = markup
        result = self.transcoder.markup_to_xml_result(markup)
        self.xml = result.content
        self.last_fidelity = result.fidelity
        for warning in result.warnings:
            logger.info(f"Markup conversion: {warning}")
        return result

    def edit_xml(self, xml: str) -> None:
        self.xml = xml
        if not self.is_xml_view:
            self._render_markup()

    def clear(self) -> None:
        self.xml = ""
        self.markup = ""
        self.set_status("Editor cleared")

    def validate(self) -> ValidationResult:
        validation = validate_xml(self.xml)
        if validation.valid:
            self.set_status(validation.message, "success")
        else:
            self.set_status(f"Validation Error: {validation.error}", "error")
        return validation

    def preview(self) -> str:
        return render_preview(self.xml)

    # AI

    def ask_ai(self, instruction: str, max_tokens: int = 1000) -> AICallResult:
        """Ask the AI to edit the current document.

        A successful reply is kept as the pending response for
        apply_ai_response.

        Raises:
            EmptyPromptError: If instruction is blank
        """
        instruction = (instruction or "").strip()
        if not instruction:
            raise EmptyPromptError()
        if self.ai_client is None:
            return AICallResult(success=False, error="No AI client configured")

        result = self.ai_client.call(
            EDIT_TASK, f"{instruction}\n{self.xml}", max_tokens=max_tokens
        )
        if result.success:
            self.last_ai_response = result.response
        else:
            self.set_status(f"AI request failed: {result.error}", "error")
        return result

    def apply_ai_response(self, response: Optional[str] = None) -> str:
        """Replace the document with an AI reply.

        When the reply wraps a document in prose, only the XML is applied.
        The original snapshot is kept so the change still shows up in the
        next revision.

        Raises:
            NoAIResponseError: If there is no pending response
        """
        response = response if response is not None else self.last_ai_response
        if not response:
            raise NoAIResponseError()

        xml = extract_xml_from_response(response) or response
        self.edit_xml(xml)
        self._render_markup()
        self.last_ai_response = None

        self.set_status("AI response applied successfully - XML content updated", "success")
        return xml

    # Revisions

    def refresh_revisions(self) -> List[RevisionRecord]:
        self.revisions = extract_revisions(self.xml)
        return self.revisions

    @when_ready(_has_content)
    def _refresh_when_ready(self) -> List[RevisionRecord]:
        return self.refresh_revisions()

    def begin_revision(self) -> RevisionDraft:
        """Draft a revision of the current document.

        Raises:
            NoOriginalContentError: If nothing has been loaded
        """
        return self.revision_manager.prepare_revision(self.xml)

    def finalize_revision(self, number: str, revision_date: str, comment: str) -> RevisionInsertResult:
        """Record a revision in the document and in the session history."""
        result = self.revision_manager.finalize_revision(
            self.xml, number, revision_date, comment
        )
        self.edit_xml(result.xml)
        self.refresh_revisions()
        self.set_status(f"Revision {number.strip()} saved successfully!", "success")
        return result

    @property
    def history(self) -> List[RevisionRecord]:
        return self.revision_manager.history
