"""Revision manager coordinating change analysis and revision saving.

This module provides the RevisionManager class which owns the original
snapshot and the revision history of one document. It asks the AI
collaborator for a change analysis and a revision comment, falls back to
the structural change detector and keyword rules when the collaborator
fails, and appends finalized revisions to the document.
"""

import logging
from datetime import date
from typing import List

from xmledit.models.revision_record import RevisionRecord
from xmledit.revisions.change_detector import describe_changes, detect_changes
from xmledit.revisions.comment_generator import (
    build_analysis_prompt,
    build_comment_prompt,
    clean_ai_comment,
    fallback_comment,
)
from xmledit.revisions.errors import MissingRevisionFieldsError, NoOriginalContentError
from xmledit.revisions.models import ChangeAnalysis, RevisionDraft, RevisionInsertResult
from xmledit.revisions.revision_composer import (
    insert_revision_result,
    next_revision_number,
)

logger = logging.getLogger(__name__)

ANALYSIS_TASK = "xml_change_analysis"
COMMENT_TASK = "xml_revision_comment"


class RevisionManager:
    """Tracks revisions of a single document.

    The AI client is optional. Any object with a ``call(task, context,
    max_tokens=..., temperature=...)`` method returning a result with
    ``success``, ``response`` and ``error`` attributes works; AIClient is
    the production implementation.

    Attributes:
        ai_client: AI collaborator, or None to always use the fallbacks
        original_content: Snapshot changes are measured against
        revision_number: Number shown in the revision dialog
    """

    def __init__(self, ai_client=None, revision_number: str = "1.0"):
        self.ai_client = ai_client
        self.original_content = ""
        self.revision_number = revision_number
        self._history: List[RevisionRecord] = []

    @property
    def history(self) -> List[RevisionRecord]:
        return list(self._history)

    def set_original_content(self, content: str) -> None:
        self.original_content = content

    def analyze_changes(self, current: str) -> ChangeAnalysis:
        """Describe what changed between the original snapshot and current.

        The AI analysis is used when the collaborator succeeds, otherwise
        the basic change report.
        """
        changes = detect_changes(self.original_content, current)

        if self.ai_client is not None:
            result = self.ai_client.call(
                ANALYSIS_TASK,
                build_analysis_prompt(self.original_content, current),
                max_tokens=500,
                temperature=0.3,
            )
            if result.success and result.response:
                return ChangeAnalysis(
                    text=result.response.strip(), source="ai", changes=changes
                )
            logger.info(f"AI change analysis unavailable: {result.error}")

        return ChangeAnalysis(
            text=describe_changes(changes), source="basic", changes=changes
        )

    def generate_comment(self, analysis_text: str) -> str:
        """Generate a revision comment from a change analysis."""
        if self.ai_client is not None:
            result = self.ai_client.call(
                COMMENT_TASK,
                build_comment_prompt(analysis_text),
                max_tokens=100,
                temperature=0.2,
            )
            if result.success:
                return clean_ai_comment(result.response)
            logger.info("Using fallback revision comment generation")

        return fallback_comment(analysis_text)

    def prepare_revision(self, current: str) -> RevisionDraft:
        """Pre-fill a revision for the current document.

        Advances the proposed revision number, analyzes changes and drafts
        a comment. Nothing is recorded until finalize_revision is called.

        Raises:
            NoOriginalContentError: If no original snapshot is set
        """
        if not self.original_content:
            raise NoOriginalContentError()

        self.revision_number = next_revision_number(self.revision_number)
        analysis = self.analyze_changes(current)
        comment = self.generate_comment(analysis.text)

        return RevisionDraft(
            number=self.revision_number,
            date=date.today().isoformat(),
            analysis=analysis,
            comment=comment,
        )

    def finalize_revision(
        self,
        current: str,
        number: str,
        revision_date: str,
        comment: str,
    ) -> RevisionInsertResult:
        """Append a revision entry to the document and record it.

        The updated document becomes the new original snapshot.

        Raises:
            MissingRevisionFieldsError: If number, date or comment is blank
        """
        fields = {
            "number": (number or "").strip(),
            "date": (revision_date or "").strip(),
            "comment": (comment or "").strip(),
        }
        missing = [name for name, value in fields.items() if not value]
        if missing:
            raise MissingRevisionFieldsError(missing)

        record = RevisionRecord(
            number=fields["number"], date=fields["date"], comment=fields["comment"]
        )
        result = insert_revision_result(current, record)

        self._history.append(record)
        self.revision_number = record.number
        self.set_original_content(result.xml)

        logger.info(
            f"Revision {record.number} added successfully ({result.strategy.value})"
        )
        return result
