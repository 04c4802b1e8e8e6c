"""Errors raised by xmledit commands.

Configuration problems and failed document reads or writes surface as
CLIError subclasses; main() reports them and exits with GENERAL_ERROR.
"""

from typing import Optional

from xmledit.ai_gateway.errors import XmlEditError


class CLIError(XmlEditError):
    """Base exception for all CLI-related errors."""
    pass


class ConfigError(CLIError):
    """Raised when the configuration file is unreadable or invalid."""

    def __init__(self, message: str, config_field: Optional[str] = None):
        if config_field:
            full_message = f"Configuration error in field '{config_field}': {message}"
        else:
            full_message = f"Configuration error: {message}"
        super().__init__(full_message)
        self.config_field = config_field
        self.original_message = message


class SessionError(CLIError):
    """Raised when a command cannot load or write a document."""

    def __init__(self, file_path: str, operation: str, reason: Optional[str] = None):
        message = f"Document operation '{operation}' failed for {file_path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.file_path = file_path
        self.operation = operation
        self.reason = reason
