"""In-memory table of contents over a directory of documents.

This module provides DocumentIndex, which reads a set of XML files,
classifies each one with parse_document and serves the summaries in
display order (index, topic, section, error, unknown; then by title).
"""

import logging
import os
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from xmledit.document_index.errors import DocumentLoadError
from xmledit.document_index.index_parser import parse_document
from xmledit.models.document_summary import DocumentSummary, DocumentType

logger = logging.getLogger(__name__)

SAMPLES_DIR = Path(__file__).parent / "samples"


def sample_filenames(directory: Path = SAMPLES_DIR) -> List[str]:
    """List the .xml files shipped in a samples directory, sorted by name."""
    return sorted(p.name for p in Path(directory).glob("*.xml"))


class DocumentIndex:
    """Table of contents for a fixed set of documents.

    Example:
        >>> index = DocumentIndex()
        >>> index.load()
        >>> for summary in index.entries():
        ...     print(summary.type.value, summary.title)
    """

    def __init__(self):
        self._documents: Dict[str, DocumentSummary] = {}
        self._directory: Optional[Path] = None
        self._filenames: List[str] = []

    def __len__(self) -> int:
        return len(self._documents)

    def __contains__(self, filename: str) -> bool:
        return filename in self._documents

    def read_document(self, path: Path) -> str:
        """Read one document as text.

        Raises:
            DocumentLoadError: If the file cannot be read or decoded
        """
        try:
            return Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentLoadError(str(path), str(e)) from e

    def load(
        self,
        directory: Optional[os.PathLike] = None,
        filenames: Optional[Iterable[str]] = None,
    ) -> List[str]:
        """Load documents into the index.

        Files that cannot be read are skipped with a warning; files that
        do not parse are kept as ERROR entries.

        Args:
            directory: Directory holding the documents (defaults to the
                bundled samples)
            filenames: Files to load (defaults to every .xml file in the
                directory)

        Returns:
            Filenames that were loaded
        """
        directory = Path(directory) if directory is not None else SAMPLES_DIR
        filenames = list(filenames) if filenames is not None else sample_filenames(directory)

        self._directory = directory
        self._filenames = filenames

        loaded = []
        for filename in filenames:
            try:
                content = self.read_document(directory / filename)
            except DocumentLoadError as e:
                logger.warning(f"Could not load {filename}: {e}")
                continue
            self._documents[filename] = parse_document(content, filename)
            loaded.append(filename)

        logger.info(f"Loaded {len(loaded)} of {len(filenames)} documents from {directory}")
        return loaded

    def clear(self) -> None:
        self._documents.clear()

    def refresh(self) -> List[str]:
        """Clear the index and re-read the last loaded file set."""
        self.clear()
        if self._directory is None:
            return []
        return self.load(self._directory, self._filenames)

    def entries(self) -> List[DocumentSummary]:
        return sorted(self._documents.values(), key=DocumentSummary.sort_key)

    def get(self, filename: str) -> Optional[DocumentSummary]:
        return self._documents.get(filename)

    def by_type(self, doc_type: DocumentType) -> List[DocumentSummary]:
        return [doc for doc in self.entries() if doc.type == doc_type]

    def referenced_documents(self, filename: str) -> List[DocumentSummary]:
        """Documents named by a document's references that are loaded."""
        doc = self.get(filename)
        if doc is None:
            return []
        return [self._documents[ref] for ref in doc.references if ref in self._documents]

    def referencing_documents(self, filename: str) -> List[DocumentSummary]:
        """Documents whose references include filename."""
        return [doc for doc in self.entries() if filename in doc.references]
