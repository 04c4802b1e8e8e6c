"""Data models for documents, revisions and conversion results."""

from xmledit.models.conversion_result import ConversionResult, Fidelity
from xmledit.models.document_summary import DocumentSummary, DocumentType
from xmledit.models.revision_record import RevisionRecord

__all__ = [
    'ConversionResult',
    'Fidelity',
    'DocumentSummary',
    'DocumentType',
    'RevisionRecord',
]
