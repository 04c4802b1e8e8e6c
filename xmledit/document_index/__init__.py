"""Document index module.

This module classifies XML documents by root element and serves them as a
sorted table of contents.
"""

from .document_index import SAMPLES_DIR, DocumentIndex, sample_filenames
from .errors import DocumentIndexError, DocumentLoadError
from .index_parser import parse_document

__all__ = [
    'SAMPLES_DIR',
    'DocumentIndex',
    'DocumentIndexError',
    'DocumentLoadError',
    'parse_document',
    'sample_filenames',
]
