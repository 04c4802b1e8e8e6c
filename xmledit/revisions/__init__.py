"""Revision tracking module.

This module provides change detection between document snapshots, the
revision composer that appends <Revision> entries, and the RevisionManager
that drives the AI-assisted revision workflow.
"""

from .change_detector import describe_changes, detect_changes
from .comment_generator import clean_ai_comment, fallback_comment
from .errors import MissingRevisionFieldsError, NoOriginalContentError, RevisionError
from .models import (
    ChangeAnalysis,
    ChangeSet,
    InsertStrategy,
    RevisionDraft,
    RevisionInsertResult,
)
from .revision_composer import (
    create_revision_xml,
    escape_xml,
    extract_revisions,
    insert_revision,
    insert_revision_result,
    next_revision_number,
)
from .revision_manager import RevisionManager

__all__ = [
    'ChangeAnalysis',
    'ChangeSet',
    'InsertStrategy',
    'MissingRevisionFieldsError',
    'NoOriginalContentError',
    'RevisionDraft',
    'RevisionError',
    'RevisionInsertResult',
    'RevisionManager',
    'clean_ai_comment',
    'create_revision_xml',
    'describe_changes',
    'detect_changes',
    'escape_xml',
    'extract_revisions',
    'fallback_comment',
    'insert_revision',
    'insert_revision_result',
    'next_revision_number',
]
