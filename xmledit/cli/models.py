"""Data models for CLI operations.

This module defines the exit codes and the configuration model used by the
CLI module. Models use dataclasses, following the patterns established in
xmledit/models.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


class ExitCode(IntEnum):
    """Exit codes for CLI operations.

    These exit codes provide meaningful feedback about the operation result:
    - SUCCESS (0): Operation completed successfully
    - GENERAL_ERROR (1): General error (config issues, unreadable files)
    - VALIDATION_ERROR (2): Document is not well-formed XML
    - AI_ERROR (3): AI service unavailable or returned an error

    Example:
        >>> exit_code = ExitCode.SUCCESS
        >>> sys.exit(exit_code)
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    VALIDATION_ERROR = 2
    AI_ERROR = 3


@dataclass
class EditorConfig:
    """Project configuration read from .xmledit/config.yaml.

    Attributes:
        ai_endpoint: Base URL of the AI gateway (None uses XMLEDIT_AI_ENDPOINT
            or the local default)
        samples_dir: Directory the table of contents is built from (None uses
            the bundled samples)
        export_dir: Directory exported documents are written to
        request_timeout: Timeout in seconds for AI requests (None waits
            indefinitely)

    Example:
        >>> config = EditorConfig(ai_endpoint="http://localhost:3001")
    """
    ai_endpoint: Optional[str] = None
    samples_dir: Optional[str] = None
    export_dir: str = "."
    request_timeout: Optional[float] = None
