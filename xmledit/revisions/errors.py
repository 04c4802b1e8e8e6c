"""Typed exception hierarchy for revision tracking errors."""

from typing import List

from xmledit.ai_gateway.errors import XmlEditError


class RevisionError(XmlEditError):
    """Base exception for all revision-related errors."""
    pass


class MissingRevisionFieldsError(RevisionError):
    """Raised when a revision is finalized without number, date or comment."""

    def __init__(self, missing: List[str]):
        super().__init__(
            f"Please fill in all revision fields (missing: {', '.join(missing)})"
        )
        self.missing = missing


class NoOriginalContentError(RevisionError):
    """Raised when changes are analyzed before an original snapshot exists."""

    def __init__(self):
        super().__init__("No original content to compare changes against")
