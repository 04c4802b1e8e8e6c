"""Data models for the revisions module.

This module defines the data structures shared by the change detector,
the revision composer and the revision manager.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


@dataclass(frozen=True)
class ElementSnapshot:
    """One element of a flattened XML document.

    Attributes:
        tag: Element name
        id: Value of the id attribute, or '' when absent
        text: Stripped text content of the element and its descendants
    """

    tag: str
    id: str
    text: str

    @property
    def key(self) -> tuple:
        return (self.tag, self.id)


@dataclass
class ChangeSet:
    """Human-readable differences between two document snapshots.

    Attributes:
        additions: Elements present only in the current document
        modifications: Elements whose text changed under the same (tag, id)
        deletions: Elements present only in the original document
    """

    additions: List[str] = field(default_factory=list)
    modifications: List[str] = field(default_factory=list)
    deletions: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.additions or self.modifications or self.deletions)


class InsertStrategy(Enum):
    """Which step of the insertion cascade produced the document."""

    DOM = "dom"
    SPLICE = "splice"
    COMMENT = "comment"


@dataclass
class RevisionInsertResult:
    """Result of inserting a revision entry into a document.

    Attributes:
        xml: Updated document text
        strategy: Insertion strategy that succeeded
    """

    xml: str
    strategy: InsertStrategy


@dataclass
class ChangeAnalysis:
    """Change analysis shown to the user before a revision is saved.

    Attributes:
        text: Analysis prose (AI output or the basic change report)
        source: 'ai' when the model produced it, 'basic' otherwise
        changes: Structural change set (always computed)
    """

    text: str
    source: str
    changes: ChangeSet


@dataclass
class RevisionDraft:
    """Pre-filled revision fields awaiting user confirmation.

    Attributes:
        number: Proposed revision number
        date: Proposed revision date (YYYY-MM-DD)
        analysis: Change analysis the comment was generated from
        comment: Proposed revision comment
    """

    number: str
    date: str
    analysis: ChangeAnalysis
    comment: str
