"""Unit tests for main CLI entry point (main.py).

Tests the Typer CLI application using CliRunner.
"""

import logging
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from xmledit.ai_gateway.ai_client import AICallResult
from xmledit.cli.main import _configure_logging, app
from xmledit.cli.models import ExitCode

runner = CliRunner()

DOC = '<section><title>Pump</title><para>Check seals.</para></section>'


@pytest.fixture
def invoke(tmp_path):
    config = tmp_path / 'config.yaml'

    def _invoke(*args):
        return runner.invoke(
            app, ['--no-color', '--config', str(config), *args], env={'COLUMNS': '200'}
        )

    return _invoke


@pytest.fixture
def doc(tmp_path):
    path = tmp_path / 'doc.xml'
    path.write_text(DOC)
    return path


class TestConfigureLogging:
    """Test cases for _configure_logging function."""

    @pytest.mark.parametrize('verbosity, level', [
        (0, logging.WARNING), (1, logging.INFO), (2, logging.DEBUG), (5, logging.DEBUG),
    ])
    def test_verbosity_sets_level(self, verbosity, level):
        with patch('logging.getLogger') as mock_get_logger:
            mock_logger = MagicMock()
            mock_get_logger.return_value = mock_logger

            _configure_logging(verbosity)

            mock_get_logger.assert_called_with('xmledit')
            mock_logger.setLevel.assert_called_with(level)

    def test_logdir_creates_log_file(self, tmp_path):
        _configure_logging(1, str(tmp_path / 'logs'))

        assert list((tmp_path / 'logs').glob('xmledit_*.log'))
        logging.getLogger('xmledit').handlers.clear()


class TestGlobalOptions:
    """Test cases for callback options."""

    def test_version(self):
        result = runner.invoke(app, ['--version'])

        assert result.exit_code == 0
        assert 'xmledit version' in result.output

    def test_invalid_config_fails(self, tmp_path, doc):
        config = tmp_path / 'bad.yaml'
        config.write_text('- not\n- a dict\n')

        result = runner.invoke(app, ['--config', str(config), 'validate', str(doc)])

        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert 'Configuration error' in result.output

    def test_init_writes_config(self, invoke, tmp_path):
        result = invoke('init', '--ai-endpoint', 'http://gw:9000', '--timeout', '5')

        assert result.exit_code == 0
        content = (tmp_path / 'config.yaml').read_text()
        assert 'ai_endpoint: http://gw:9000' in content
        assert 'request_timeout: 5.0' in content


class TestValidate:
    """Test cases for validate command."""

    def test_valid_document(self, invoke, doc):
        result = invoke('validate', str(doc))

        assert result.exit_code == ExitCode.SUCCESS
        assert 'XML is well-formed' in result.output

    def test_invalid_document(self, invoke, tmp_path):
        bad = tmp_path / 'bad.xml'
        bad.write_text('<a><b></a>')

        result = invoke('validate', str(bad))

        assert result.exit_code == ExitCode.VALIDATION_ERROR
        assert 'Validation Error' in result.output

    def test_missing_file(self, invoke, tmp_path):
        result = invoke('validate', str(tmp_path / 'missing.xml'))

        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert "'read' failed" in result.output


class TestConversion:
    """Test cases for to-markup and to-xml commands."""

    def test_round_trip_through_files(self, invoke, doc, tmp_path):
        markup = tmp_path / 'doc.html'
        back = tmp_path / 'back.xml'

        assert invoke('to-markup', str(doc), '-o', str(markup)).exit_code == 0
        assert invoke('to-xml', str(markup), '-o', str(back)).exit_code == 0

        assert back.read_text() == DOC
        assert 'data-original' in markup.read_text()

    def test_to_markup_prints_to_stdout(self, invoke, doc):
        result = invoke('to-markup', str(doc))

        assert '<h1 data-original=' in result.output

    def test_to_markup_reports_preserved_elements(self, invoke, doc):
        result = invoke('-v', '1', 'to-markup', str(doc))

        assert result.exit_code == 0
        assert 'Preserved 3 element(s) exactly: para, section, title' in result.output

    def test_plain_markup_drops_side_channel(self, invoke, doc, tmp_path):
        markup = tmp_path / 'plain.html'

        result = invoke('to-markup', str(doc), '--plain', '-o', str(markup))

        assert result.exit_code == 0
        assert 'data-original' not in markup.read_text()
        assert 'Side channel removed' in result.output

    def test_stripped_markup_warns(self, invoke, tmp_path):
        markup = tmp_path / 'plain.html'
        markup.write_text('<div class="section"><p>x</p></div>')

        result = invoke('to-xml', str(markup))

        assert result.exit_code == 0
        assert '<section><para>x</para></section>' in result.output
        assert 'heuristically' in result.output

    def test_preview(self, invoke, doc):
        result = invoke('preview', str(doc))

        assert '<pre>' in result.output


class TestRevisions:
    """Test cases for diff, revise and history commands."""

    def test_diff(self, invoke, doc, tmp_path):
        edited = tmp_path / 'edited.xml'
        edited.write_text(DOC.replace('</section>', '<para>New step</para></section>'))

        result = invoke('diff', str(doc), str(edited))

        assert result.exit_code == 0
        assert 'Added: para - New step...' in result.output

    def test_diff_identical(self, invoke, doc):
        result = invoke('diff', str(doc), str(doc))

        assert 'No significant changes detected.' in result.output

    def test_revise_without_ai(self, invoke, doc, tmp_path):
        edited = tmp_path / 'edited.xml'
        edited.write_text(DOC.replace('Check', 'Inspect'))

        result = invoke(
            'revise', str(doc), str(edited), '--no-ai',
            '--date', '2024-05-01', '-m', 'Reworded step.',
        )

        assert result.exit_code == ExitCode.SUCCESS
        revised = edited.read_text()
        assert '<RevisionNumber>1.1</RevisionNumber>' in revised
        assert '<RevisionComment>Reworded step.</RevisionComment>' in revised
        assert 'Revision 1.1 saved successfully!' in result.output

    def test_revise_continues_numbering(self, invoke, tmp_path):
        original = tmp_path / 'orig.xml'
        original.write_text(
            '<section><Revisions><Revision><RevisionNumber>2.3</RevisionNumber>'
            '<RevisionDate>2024-01-01</RevisionDate><RevisionComment>Old</RevisionComment>'
            '</Revision></Revisions><para>a</para></section>'
        )
        out = tmp_path / 'out.xml'

        result = invoke('revise', str(original), str(original), '--no-ai', '-o', str(out))

        assert result.exit_code == 0
        assert '<RevisionNumber>2.4</RevisionNumber>' in out.read_text()

    def test_history(self, invoke, tmp_path):
        doc = tmp_path / 'rev.xml'
        doc.write_text(
            '<section><Revisions><Revision><RevisionNumber>1.1</RevisionNumber>'
            '<RevisionDate>2024-01-01</RevisionDate><RevisionComment>Fixed</RevisionComment>'
            '</Revision></Revisions></section>'
        )

        result = invoke('history', str(doc))

        assert result.exit_code == 0
        assert '1.1' in result.output
        assert 'Fixed' in result.output

    def test_history_empty(self, invoke, doc):
        assert 'No revisions found' in invoke('history', str(doc)).output


class TestToc:
    """Test cases for toc command."""

    def test_lists_bundled_samples(self, invoke):
        result = invoke('toc')

        assert result.exit_code == 0
        assert 'Safety Instructions' in result.output

    def test_show_document(self, invoke, tmp_path):
        (tmp_path / 'docs').mkdir()
        (tmp_path / 'docs' / 'a.xml').write_text(DOC)

        result = invoke('toc', '--dir', str(tmp_path / 'docs'), '--show', 'a.xml')

        assert result.exit_code == 0
        assert DOC in result.output

    def test_show_unknown_document(self, invoke):
        result = invoke('toc', '--show', 'nope.xml')

        assert result.exit_code == ExitCode.GENERAL_ERROR


class TestExport:
    """Test cases for export command."""

    def test_export_copies_bytes(self, invoke, doc, tmp_path):
        result = invoke('export', str(doc), '--dir', str(tmp_path / 'out'))

        assert result.exit_code == 0
        exported = list((tmp_path / 'out').glob('document_*.xml'))
        assert len(exported) == 1
        assert exported[0].read_bytes() == doc.read_bytes()


class TestAI:
    """Test cases for ai command."""

    @patch('xmledit.cli.main.AIClient')
    def test_prints_response(self, mock_client_cls, invoke, doc):
        mock_client_cls.return_value.call.return_value = AICallResult(
            success=True, response='Looks fine.'
        )

        result = invoke('ai', 'Review this', str(doc))

        assert result.exit_code == 0
        assert 'Looks fine.' in result.output

    @patch('xmledit.cli.main.AIClient')
    def test_apply_writes_document(self, mock_client_cls, invoke, doc):
        mock_client_cls.return_value.call.return_value = AICallResult(
            success=True, response='```xml\n<section><para>New</para></section>\n```'
        )

        result = invoke('ai', 'Rewrite', str(doc), '--apply')

        assert result.exit_code == 0
        assert doc.read_text() == '<section><para>New</para></section>'

    @patch('xmledit.cli.main.AIClient')
    def test_failure_exits_with_ai_error(self, mock_client_cls, invoke, doc):
        mock_client_cls.return_value.call.return_value = AICallResult(
            success=False, error='AI service is currently unavailable.'
        )

        result = invoke('ai', 'Review', str(doc))

        assert result.exit_code == ExitCode.AI_ERROR
        assert doc.read_text() == DOC

    def test_blank_instruction(self, invoke, doc):
        result = invoke('ai', '   ', str(doc))

        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert 'Please enter a prompt' in result.output


class TestServe:
    """Test cases for serve command."""

    @patch('xmledit.ai_gateway.server.run_server')
    def test_serve_runs_gateway(self, mock_run, invoke):
        result = invoke('serve', '--port', '8123')

        assert result.exit_code == 0
        mock_run.assert_called_once_with(host='127.0.0.1', port=8123)
