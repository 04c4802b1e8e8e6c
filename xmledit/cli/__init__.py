"""Command-line interface for the XML document editor.

This package provides the `xmledit` CLI tool that exposes markup/XML
conversion, validation, revision tracking, the table of contents and the
AI gateway from the command line, with Rich output and YAML configuration.
"""

from .config import ConfigLoader
from .errors import CLIError, ConfigError, SessionError
from .models import EditorConfig, ExitCode
from .output import OutputHandler

__all__ = [
    'CLIError',
    'ConfigError',
    'ConfigLoader',
    'EditorConfig',
    'ExitCode',
    'OutputHandler',
    'SessionError',
]
