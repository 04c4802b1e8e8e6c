"""Revision record data model."""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class RevisionRecord:
    """A finalized revision of the tracked document.

    Records are appended to the session's revision history and serialized
    into the document's <Revisions> block. They are never mutated after
    creation.

    Attributes:
        number: Revision number in "major.minor" form (e.g., "1.3")
        date: Revision date in ISO format (YYYY-MM-DD)
        comment: Free-text revision comment
        timestamp: ISO 8601 datetime when the record was created
    """
    number: str
    date: str
    comment: str
    timestamp: str = field(default_factory=_utc_timestamp)

    @classmethod
    def today(cls, number: str, comment: str) -> "RevisionRecord":
        """Create a record dated today."""
        return cls(number=number, date=date.today().isoformat(), comment=comment)
