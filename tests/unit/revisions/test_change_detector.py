"""Unit tests for the change detector."""

from xmledit.revisions.change_detector import (
    describe_changes,
    detect_changes,
    flatten,
)
from xmledit.revisions.models import ChangeSet, ElementSnapshot


class TestFlatten:
    """Test cases for document flattening."""

    def test_root_is_excluded(self):
        elements = flatten('<section id="root"><para id="1">A</para></section>')

        assert elements == [ElementSnapshot(tag='para', id='1', text='A')]

    def test_text_includes_descendants_and_skips_comments(self):
        elements = flatten(
            '<section><para> a <bold>b</bold><!-- hidden --></para></section>'
        )

        assert elements[0].text == 'a b'
        assert elements[1] == ElementSnapshot(tag='bold', id='', text='b')


class TestDetectChanges:
    """Test cases for detect_changes."""

    DOC = '<section><title>T</title><para id="1">A</para></section>'

    def test_identical_documents_have_no_changes(self):
        changes = detect_changes(self.DOC, self.DOC)

        assert changes.is_empty
        assert changes == ChangeSet()

    def test_changed_text_is_one_modification(self):
        changes = detect_changes(
            '<section><para id="1">A</para></section>',
            '<section><para id="1">B</para></section>',
        )

        assert changes.modifications == ['Modified: para content changed']
        assert changes.additions == ['Added: para - B...']
        assert changes.deletions == ['Removed: para - A...']

    def test_added_element_without_text(self):
        changes = detect_changes(
            '<section><para>A</para></section>',
            '<section><para>A</para><br/></section>',
        )

        assert changes.additions == ['Added: br']
        assert changes.deletions == []

    def test_long_text_is_truncated(self):
        text = 'x' * 80
        changes = detect_changes('<s></s>', f'<s><para>{text}</para></s>')

        assert changes.additions == [f'Added: para - {"x" * 50}...']

    def test_moved_element_is_not_a_change(self):
        changes = detect_changes(
            '<s><a>1</a><b>2</b></s>',
            '<s><b>2</b><a>1</a></s>',
        )

        assert changes.is_empty

    def test_parse_failure_degrades_to_generic_modification(self):
        changes = detect_changes('<a><b></a>', '<a/>')

        assert changes.additions == []
        assert changes.deletions == []
        assert changes.modifications == ['Content has been modified']


class TestDescribeChanges:
    """Test cases for the basic change report."""

    def test_empty_report(self):
        report = describe_changes(ChangeSet())

        assert report == 'Basic Change Detection:\n\nNo significant changes detected.'

    def test_report_lists_each_category(self):
        report = describe_changes(ChangeSet(
            additions=['Added: para - x...'],
            modifications=['Modified: para content changed'],
            deletions=['Removed: title - y...'],
        ))

        assert '➕ Additions (1):\n  • Added: para - x...\n' in report
        assert '✏️ Modifications (1):\n  • Modified: para content changed\n' in report
        assert '➖ Deletions (1):\n  • Removed: title - y...\n' in report
        assert 'No significant changes' not in report
