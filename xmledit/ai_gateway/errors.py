"""Typed exception hierarchy for AI gateway errors.

This module defines the custom exceptions used by the AI gateway and its
HTTP client. All exceptions inherit from the XmlEditError base class so any
application-level failure can be caught in one place, and include
descriptive messages with context to help with debugging.
"""

from typing import Optional


class XmlEditError(Exception):
    """Base exception for all xmledit errors.

    Use this to catch any application-level error from the editor.
    """
    pass


class GatewayError(XmlEditError):
    """Base exception for all AI gateway errors."""
    pass


class GatewayNotConfiguredError(GatewayError):
    """Raised when model credentials are missing from the environment."""

    def __init__(self, missing: Optional[list] = None):
        missing = missing or []
        if missing:
            message = (
                "AI service is not configured (missing: "
                f"{', '.join(missing)})"
            )
        else:
            message = "AI service is not configured"
        super().__init__(message)
        self.missing = missing


class ModelInvocationError(GatewayError):
    """Raised when the upstream model call fails or returns an unusable body."""

    def __init__(self, model_id: str, reason: str):
        super().__init__(f"Bedrock API call failed for {model_id}: {reason}")
        self.model_id = model_id
        self.reason = reason


class UnknownPromptError(GatewayError):
    """Raised when a task keyword does not name a prompt template."""

    def __init__(self, keyword: str):
        super().__init__(f"Unknown prompt template '{keyword}'")
        self.keyword = keyword
