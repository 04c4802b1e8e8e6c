"""Typed exception hierarchy for document index errors."""

from typing import Optional

from xmledit.ai_gateway.errors import XmlEditError


class DocumentIndexError(XmlEditError):
    """Base exception for all document index errors."""
    pass


class DocumentLoadError(DocumentIndexError):
    """Raised when a document cannot be read from disk."""

    def __init__(self, file_path: str, reason: Optional[str] = None):
        message = f"Could not load document {file_path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.file_path = file_path
        self.reason = reason
