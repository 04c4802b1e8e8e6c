"""Editor session module.

This module provides EditorSession, the document context that ties the
transcoder, the revision manager and the AI client together.
"""

from .errors import EditorError, EmptyPromptError, NoAIResponseError
from .retry_logic import retry_until_ready, when_ready
from .session import EditorSession, SessionStatus, export_filename

__all__ = [
    'EditorError',
    'EditorSession',
    'EmptyPromptError',
    'NoAIResponseError',
    'SessionStatus',
    'export_filename',
    'retry_until_ready',
    'when_ready',
]
