"""Typed exception hierarchy for editor session errors."""

from xmledit.ai_gateway.errors import XmlEditError


class EditorError(XmlEditError):
    """Base exception for all editor session errors."""
    pass


class EmptyPromptError(EditorError):
    """Raised when the AI is asked without an instruction."""

    def __init__(self):
        super().__init__("Please enter a prompt for the AI")


class NoAIResponseError(EditorError):
    """Raised when applying an AI response before one was received."""

    def __init__(self):
        super().__init__("No AI response available to apply")
