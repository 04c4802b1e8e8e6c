"""Main CLI entry point for the xmledit command.

This module provides the Typer application behind the xmledit command-line
tool. Global options (verbosity, log directory, colors, config file) are
taken by the callback; each editor operation is a subcommand.
"""

import logging
import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from xmledit.ai_gateway.ai_client import AIClient
from xmledit.cli.config import DEFAULT_CONFIG_PATH, ConfigLoader
from xmledit.cli.errors import CLIError, ConfigError, SessionError
from xmledit.cli.models import EditorConfig, ExitCode
from xmledit.cli.output import OutputHandler
from xmledit.document_index.document_index import DocumentIndex
from xmledit.editor.errors import EditorError
from xmledit.editor.session import EditorSession
from xmledit.markup_transcoder.side_channel import SideChannel
from xmledit.markup_transcoder.transcoder import MarkupTranscoder
from xmledit.markup_transcoder.xml_tools import render_preview, validate_xml
from xmledit.revisions.change_detector import detect_changes
from xmledit.revisions.errors import RevisionError
from xmledit.revisions.revision_composer import extract_revisions
from xmledit.revisions.revision_manager import RevisionManager

VERSION = "0.1.0"

app = typer.Typer(
    name="xmledit",
    help="""XML document editor: markup/XML conversion, revisions and AI assistance.

QUICK START:
  xmledit validate doc.xml                      # Check well-formedness
  xmledit to-markup doc.xml -o doc.html         # XML -> editable markup
  xmledit to-xml doc.html -o doc.xml            # Markup -> XML
  xmledit revise old.xml new.xml                # Append a revision entry
  xmledit toc                                   # Table of contents of samples
  xmledit serve                                 # Run the AI gateway""",
    add_completion=False,
    rich_markup_mode=None,
    no_args_is_help=True,
)

logger = logging.getLogger(__name__)


@dataclass
class CLIContext:
    """State shared by all subcommands of one invocation."""
    output: OutputHandler
    config: EditorConfig
    config_path: str


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Configure logging based on verbosity level.

    Configures only the 'xmledit' namespace logger to avoid affecting
    third-party libraries. The root logger is left unchanged.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG)
        logdir: Optional directory for log files (creates timestamped log file)
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    app_logger = logging.getLogger("xmledit")
    app_logger.setLevel(level)
    app_logger.handlers.clear()

    date_format = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter("%(asctime)s [%(levelname)8s] %(message)s", datefmt=date_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    if logdir:
        log_path = Path(logdir)
        log_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"xmledit_{timestamp}.log"

        file_formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt=date_format
        )
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        app_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")


def _read_text(path: Path) -> str:
    try:
        with open(path, encoding="utf-8", newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise SessionError(str(path), "read", str(e)) from e


def _write_text(path: Path, text: str) -> None:
    try:
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(text)
    except OSError as e:
        raise SessionError(str(path), "write", str(e)) from e


def _emit(cli: CLIContext, text: str, output_file: Optional[Path]) -> None:
    if output_file is None:
        cli.output.print(text)
    else:
        _write_text(output_file, text)
        cli.output.success(f"Wrote {output_file}")


def _ai_client(config: EditorConfig) -> AIClient:
    return AIClient(config.ai_endpoint, timeout=config.request_timeout)


def _fail(cli: CLIContext, error: Exception, code: ExitCode = ExitCode.GENERAL_ERROR) -> None:
    logger.error(str(error))
    cli.output.error(str(error))
    raise typer.Exit(code)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbosity: int = typer.Option(
        0, "--verbosity", "-v", help="Verbosity level: 0=summary, 1=info, 2=debug",
    ),
    logdir: Optional[str] = typer.Option(
        None, "--logdir", help="Directory for log files (creates timestamped log file)",
    ),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),
    config_path: str = typer.Option(
        DEFAULT_CONFIG_PATH, "--config", help="Path to the configuration file",
    ),
    version: bool = typer.Option(False, "--version", "-V", help="Show version and exit"),
) -> None:
    """XML document editor: markup/XML conversion, revisions and AI assistance."""
    if version:
        typer.echo(f"xmledit version {VERSION}")
        raise typer.Exit()

    _configure_logging(verbosity, logdir)
    output = OutputHandler(verbosity=verbosity, no_color=no_color)

    try:
        config = ConfigLoader.load(config_path)
    except ConfigError as e:
        output.error(str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    ctx.obj = CLIContext(output=output, config=config, config_path=config_path)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command()
def init(
    ctx: typer.Context,
    ai_endpoint: Optional[str] = typer.Option(None, "--ai-endpoint", help="AI gateway URL"),
    samples_dir: Optional[str] = typer.Option(None, "--samples-dir", help="Documents for the table of contents"),
    export_dir: str = typer.Option(".", "--export-dir", help="Directory for exported documents"),
    request_timeout: Optional[float] = typer.Option(None, "--timeout", help="AI request timeout in seconds"),
) -> None:
    """Write a configuration file."""
    cli: CLIContext = ctx.obj
    config = EditorConfig(
        ai_endpoint=ai_endpoint,
        samples_dir=samples_dir,
        export_dir=export_dir,
        request_timeout=request_timeout,
    )
    try:
        ConfigLoader.save(cli.config_path, config)
    except ConfigError as e:
        _fail(cli, e)
    cli.output.success(f"Configuration written to {cli.config_path}")


@app.command("to-markup")
def to_markup(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="XML document"),
    output_file: Optional[Path] = typer.Option(None, "--output", "-o", help="Write markup to this file"),
    plain: bool = typer.Option(False, "--plain", help="Drop the data-original side channel from the markup"),
) -> None:
    """Convert an XML document to editable markup."""
    cli: CLIContext = ctx.obj
    side_channel = SideChannel()
    try:
        result = MarkupTranscoder(side_channel).xml_to_markup_result(_read_text(file))
        preserved = side_channel.inspect(result.content)
        markup = side_channel.strip(result.content) if plain else result.content
        _emit(cli, markup, output_file)
    except SessionError as e:
        _fail(cli, e)
    cli.output.print_conversion(result, preserved)
    if plain:
        cli.output.warning("Side channel removed; converting back will be heuristic")


@app.command("to-xml")
def to_xml(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="Markup document"),
    output_file: Optional[Path] = typer.Option(None, "--output", "-o", help="Write XML to this file"),
) -> None:
    """Convert edited markup back to XML."""
    cli: CLIContext = ctx.obj
    try:
        result = MarkupTranscoder().markup_to_xml_result(_read_text(file))
        _emit(cli, result.content, output_file)
    except SessionError as e:
        _fail(cli, e)
    cli.output.print_conversion(result)


@app.command()
def validate(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="XML document"),
) -> None:
    """Check that a document is well-formed XML."""
    cli: CLIContext = ctx.obj
    try:
        validation = validate_xml(_read_text(file))
    except SessionError as e:
        _fail(cli, e)

    if not validation.valid:
        cli.output.error(f"Validation Error: {validation.error}")
        raise typer.Exit(ExitCode.VALIDATION_ERROR)
    cli.output.success(validation.message)


@app.command()
def preview(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="XML document"),
    output_file: Optional[Path] = typer.Option(None, "--output", "-o", help="Write HTML to this file"),
) -> None:
    """Render the highlighted HTML preview of a document."""
    cli: CLIContext = ctx.obj
    try:
        _emit(cli, render_preview(_read_text(file)), output_file)
    except SessionError as e:
        _fail(cli, e)


@app.command()
def diff(
    ctx: typer.Context,
    original: Path = typer.Argument(..., help="Original document"),
    current: Path = typer.Argument(..., help="Edited document"),
    use_ai: bool = typer.Option(False, "--ai", help="Ask the AI gateway for a change analysis"),
) -> None:
    """Show the structural changes between two documents."""
    cli: CLIContext = ctx.obj
    try:
        original_xml = _read_text(original)
        current_xml = _read_text(current)
    except SessionError as e:
        _fail(cli, e)

    if use_ai:
        manager = RevisionManager(_ai_client(cli.config))
        manager.set_original_content(original_xml)
        with cli.output.spinner("Analyzing changes..."):
            analysis = manager.analyze_changes(current_xml)
        if analysis.source == "basic":
            cli.output.warning("AI analysis unavailable, showing basic change detection")
        cli.output.print(analysis.text)
        return

    cli.output.print_changes(detect_changes(original_xml, current_xml))


@app.command()
def revise(
    ctx: typer.Context,
    original: Path = typer.Argument(..., help="Document before editing"),
    current: Path = typer.Argument(..., help="Edited document; updated in place unless -o is given"),
    number: Optional[str] = typer.Option(None, "--number", help="Revision number (default: next minor)"),
    revision_date: Optional[str] = typer.Option(None, "--date", help="Revision date (default: today)"),
    comment: Optional[str] = typer.Option(None, "--comment", "-m", help="Revision comment (default: generated)"),
    use_ai: bool = typer.Option(True, "--ai/--no-ai", help="Use the AI gateway for analysis and comment"),
    output_file: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the revised document here"),
) -> None:
    """Append a revision entry describing the edits to a document."""
    cli: CLIContext = ctx.obj
    ai_client = _ai_client(cli.config) if use_ai else None
    session = EditorSession(ai_client=ai_client)

    try:
        original_xml = _read_text(original)
        session.load_xml_content(original_xml, original.name)
        existing = extract_revisions(original_xml)
        if existing:
            session.revision_manager.revision_number = existing[-1].number
        if not session.import_xml(current):
            raise SessionError(str(current), "read", session.status.message)

        with cli.output.spinner("Analyzing changes..."):
            draft = session.begin_revision()
        cli.output.info(draft.analysis.text)

        result = session.finalize_revision(
            number or draft.number,
            revision_date or draft.date,
            comment or draft.comment,
        )
        _write_text(output_file or current, result.xml)
    except (SessionError, RevisionError) as e:
        _fail(cli, e)

    cli.output.success(session.status.message)
    cli.output.info(f"  Comment: {session.history[-1].comment}")
    cli.output.debug(f"  Insertion strategy: {result.strategy.value}")


@app.command()
def history(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="XML document"),
) -> None:
    """List the revision entries recorded in a document."""
    cli: CLIContext = ctx.obj
    try:
        cli.output.print_history(extract_revisions(_read_text(file)))
    except SessionError as e:
        _fail(cli, e)


@app.command()
def toc(
    ctx: typer.Context,
    directory: Optional[Path] = typer.Option(None, "--dir", help="Documents directory (default: config samples_dir)"),
    show: Optional[str] = typer.Option(None, "--show", help="Print the XML of one document"),
) -> None:
    """Show the table of contents of the sample documents."""
    cli: CLIContext = ctx.obj
    index = DocumentIndex()
    index.load(directory or cli.config.samples_dir)

    if show is None:
        cli.output.print_toc(index.entries())
        return

    summary = index.get(show)
    if summary is None:
        _fail(cli, SessionError(show, "open", "document not in table of contents"))
    cli.output.info(f"{summary.title} ({summary.filename})")
    cli.output.print(summary.content)


@app.command()
def export(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="XML document"),
    directory: Optional[Path] = typer.Option(None, "--dir", help="Export directory (default: config export_dir)"),
) -> None:
    """Export a document as document_<date>.xml."""
    cli: CLIContext = ctx.obj
    session = EditorSession()
    if not session.import_xml(file):
        _fail(cli, SessionError(str(file), "read", session.status.message))

    try:
        path = session.export_xml(directory or Path(cli.config.export_dir))
    except OSError as e:
        _fail(cli, SessionError(str(directory), "write", str(e)))
    cli.output.success(f"{session.status.message}: {path}")


@app.command()
def ai(
    ctx: typer.Context,
    instruction: str = typer.Argument(..., help="What the AI should do with the document"),
    file: Path = typer.Argument(..., help="XML document"),
    apply: bool = typer.Option(False, "--apply", help="Write the returned XML back to the file"),
    max_tokens: int = typer.Option(1000, "--max-tokens", help="Maximum tokens to generate"),
) -> None:
    """Ask the AI to edit a document."""
    cli: CLIContext = ctx.obj
    session = EditorSession(ai_client=_ai_client(cli.config))
    try:
        session.load_xml_content(_read_text(file), file.name)
        with cli.output.spinner("Calling AI gateway..."):
            result = session.ask_ai(instruction, max_tokens=max_tokens)
    except (SessionError, EditorError) as e:
        _fail(cli, e)

    if not result.success:
        cli.output.error(f"AI request failed: {result.error}")
        if result.suggestion:
            cli.output.info(result.suggestion)
        raise typer.Exit(ExitCode.AI_ERROR)

    if not apply:
        cli.output.print(result.response)
        return

    try:
        _write_text(file, session.apply_ai_response())
    except (SessionError, EditorError) as e:
        _fail(cli, e)
    if not session.validate().valid:
        cli.output.warning(session.status.message)
    cli.output.success(f"AI response applied to {file}")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind"),
    port: Optional[int] = typer.Option(None, "--port", help="Port (default: PORT or 3001)"),
) -> None:
    """Run the AI gateway server."""
    from xmledit.ai_gateway.server import run_server

    run_server(host=host, port=port)


def main() -> None:
    """Console script entry point; reports CLIError and exits non-zero."""
    try:
        app()
    except CLIError as e:
        typer.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.GENERAL_ERROR)


if __name__ == "__main__":
    main()
