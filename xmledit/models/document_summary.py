"""Document summary data model for the table of contents."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class DocumentType(Enum):
    """Kinds of documents shown in the table of contents.

    The declaration order is the display order.
    """

    INDEX = "index"
    TOPIC = "topic"
    SECTION = "section"
    ERROR = "error"
    UNKNOWN = "unknown"

    @property
    def sort_rank(self) -> int:
        return list(DocumentType).index(self)


@dataclass(frozen=True)
class DocumentSummary:
    """Table-of-contents entry derived from one sample document.

    Attributes:
        filename: Name of the source file
        type: Document classification by root element
        title: Display title
        attributes: Attributes of the root element
        references: Referenced filenames (topicRef/sectionRef @ref)
        content: Raw XML text of the document
        error: Parse error message (only for ERROR documents)
        extra: Type-specific details (manualCode, chapterType, sectionType)
    """
    filename: str
    type: DocumentType
    title: str
    attributes: Dict[str, str] = field(default_factory=dict)
    references: List[str] = field(default_factory=list)
    content: str = ""
    error: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def sort_key(self) -> tuple:
        return (self.type.sort_rank, self.title)
