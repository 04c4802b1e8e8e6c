"""Unit tests for DocumentIndex."""

from unittest.mock import patch

import pytest

from xmledit.document_index.document_index import DocumentIndex, sample_filenames
from xmledit.document_index.errors import DocumentLoadError
from xmledit.models.document_summary import DocumentType


@pytest.fixture
def doc_dir(tmp_path):
    (tmp_path / 'index.xml').write_text(
        '<product><title>Zeta Manual</title><topicRef ref="t.xml"/></product>'
    )
    (tmp_path / 't.xml').write_text(
        '<topic><title>Alpha</title><sectionRef ref="s.xml"/></topic>'
    )
    (tmp_path / 's.xml').write_text('<section><para>Body</para></section>')
    (tmp_path / 'broken.xml').write_text('<topic>')
    (tmp_path / 'other.xml').write_text('<glossary/>')
    return tmp_path


class TestLoad:
    """Test cases for loading documents."""

    def test_entries_are_in_display_order(self, doc_dir):
        index = DocumentIndex()
        index.load(doc_dir)

        types = [entry.type for entry in index.entries()]

        assert types == [
            DocumentType.INDEX, DocumentType.TOPIC, DocumentType.SECTION,
            DocumentType.ERROR, DocumentType.UNKNOWN,
        ]

    def test_same_type_sorted_by_title(self, tmp_path):
        (tmp_path / '1.xml').write_text('<topic><title>Beta</title></topic>')
        (tmp_path / '2.xml').write_text('<topic><title>Alpha</title></topic>')
        index = DocumentIndex()
        index.load(tmp_path)

        assert [e.title for e in index.entries()] == ['Alpha', 'Beta']

    def test_missing_file_is_skipped(self, doc_dir):
        index = DocumentIndex()

        loaded = index.load(doc_dir, ['t.xml', 'missing.xml'])

        assert loaded == ['t.xml']
        assert 'missing.xml' not in index
        assert len(index) == 1

    def test_read_document_raises_load_error(self, tmp_path):
        with pytest.raises(DocumentLoadError) as exc_info:
            DocumentIndex().read_document(tmp_path / 'nope.xml')

        assert 'nope.xml' in str(exc_info.value)

    def test_refresh_rereads_files(self, doc_dir):
        index = DocumentIndex()
        index.load(doc_dir, ['t.xml'])
        (doc_dir / 't.xml').write_text('<topic><title>Renamed</title></topic>')

        index.refresh()

        assert index.get('t.xml').title == 'Renamed'

    def test_refresh_before_load_is_empty(self):
        index = DocumentIndex()

        assert index.refresh() == []
        assert index.entries() == []

    def test_unreadable_file_is_skipped(self, doc_dir):
        index = DocumentIndex()
        original = DocumentIndex.read_document

        def flaky(self, path):
            if path.name == 's.xml':
                raise DocumentLoadError(str(path), 'permission denied')
            return original(self, path)

        with patch.object(DocumentIndex, 'read_document', flaky):
            index.load(doc_dir, ['t.xml', 's.xml'])

        assert index.get('s.xml') is None
        assert index.get('t.xml') is not None


class TestRelations:
    """Test cases for reference navigation."""

    def test_referenced_and_referencing(self, doc_dir):
        index = DocumentIndex()
        index.load(doc_dir)

        assert [d.filename for d in index.referenced_documents('index.xml')] == ['t.xml']
        assert [d.filename for d in index.referencing_documents('s.xml')] == ['t.xml']
        assert index.referenced_documents('unknown.xml') == []

    def test_by_type(self, doc_dir):
        index = DocumentIndex()
        index.load(doc_dir)

        assert [d.filename for d in index.by_type(DocumentType.SECTION)] == ['s.xml']


class TestBundledSamples:
    """Test cases for the shipped sample set."""

    def test_samples_load_without_errors(self):
        index = DocumentIndex()
        index.load()

        assert len(index) == len(sample_filenames()) == 4
        assert index.entries()[0].type == DocumentType.INDEX
        assert index.entries()[0].extra['manualCode'] == 'OM-2040'
        assert not index.by_type(DocumentType.ERROR)

    def test_sample_references_resolve(self):
        index = DocumentIndex()
        index.load()
        product = index.entries()[0]

        assert len(index.referenced_documents(product.filename)) == 2
