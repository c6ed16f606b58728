"""Main CLI entry point for the microtext command.

This module provides the Typer application for editing microtext from the
command line: reading and writing fields, managing array items, staging
drafts, syncing them, publishing, and driving the agent tool surface.
"""

import json
import logging
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional, Tuple

import typer

from src.content_tree.errors import MicrotextError, ValidationError
from src.content_tree.models import to_data
from src.document_store.document_store import UNSET
from src.document_store.errors import ConflictError, PageNotFoundError, StaleValueError
from src.tool_surface.server import serve

from .config import ConfigLoader
from .editor import Editor
from .models import ExitCode
from .output import OutputHandler

app = typer.Typer(
    name="microtext",
    help="""Edit microtext in content file frontmatter without touching layout.

QUICK START:
  microtext pages                                   # List editable pages
  microtext read home                               # Show a page's microtext
  microtext set home hero.headline "Ship faster"    # Write one field
  microtext draft save home hero.headline "Draft"   # Stage a draft
  microtext sync home                               # Write drafts to files
  microtext publish -m "Refresh copy"               # Commit content changes""",
    add_completion=False,
    rich_markup_mode=None,
    no_args_is_help=True,
)
array_app = typer.Typer(help="Add, remove or show array items", no_args_is_help=True)
draft_app = typer.Typer(help="Manage locally cached drafts", no_args_is_help=True)
app.add_typer(array_app, name="array")
app.add_typer(draft_app, name="draft")

# Module logger
logger = logging.getLogger(__name__)


@dataclass
class CLIState:
    """Global options shared by every command."""
    config_path: str = ConfigLoader.DEFAULT_CONFIG_FILE
    verbosity: int = 0
    no_color: bool = False
    json_output: bool = False


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Configure logging based on verbosity level.

    Configures only the 'src' namespace logger to avoid affecting third-party
    libraries. The root logger is left unchanged.

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

    app_logger = logging.getLogger("src")
    app_logger.setLevel(level)

    log_format = "%(asctime)s [%(levelname)8s] %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(log_format, datefmt=date_format))
    app_logger.addHandler(console_handler)

    if logdir:
        log_path = Path(logdir)
        log_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"microtext_{timestamp}.log"

        file_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(file_format, datefmt=date_format))
        app_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")


def _exit_code_for(error: MicrotextError) -> ExitCode:
    if isinstance(error, PageNotFoundError):
        return ExitCode.NOT_FOUND
    if isinstance(error, (StaleValueError, ConflictError)):
        return ExitCode.PARTIAL_FAILURE
    return ExitCode.GENERAL_ERROR


@contextmanager
def _editor(ctx: typer.Context) -> Iterator[Tuple[Editor, OutputHandler]]:
    """Build the editor for a command and turn domain errors into exit codes."""
    state: CLIState = ctx.obj or CLIState()
    output = OutputHandler(
        verbosity=state.verbosity, no_color=state.no_color, json_output=state.json_output
    )
    try:
        editor = Editor(ConfigLoader.load(state.config_path))
        yield editor, output
    except MicrotextError as e:
        logger.error(f"{ctx.command_path} failed: {e}")
        if state.json_output:
            output.print_json({"isError": True, "errorType": e.error_type, "error": str(e)})
        else:
            output.error(str(e))
        raise typer.Exit(_exit_code_for(e))


def _parse_json_option(raw: Optional[str], name: str):
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValidationError(f"not valid JSON: {e}", name)


@app.callback()
def main_callback(
    ctx: typer.Context,
    config_path: str = typer.Option(
        ConfigLoader.DEFAULT_CONFIG_FILE,
        "--config",
        help="Path to the configuration file",
    ),
    verbosity: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase verbosity (-v info, -vv debug)",
    ),
    logdir: Optional[str] = typer.Option(
        None,
        "--logdir",
        help="Directory for log files (creates timestamped log file)",
    ),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),
    json_output: bool = typer.Option(False, "--json", help="Print results as JSON"),
) -> None:
    """Edit microtext in content file frontmatter without touching layout."""
    _configure_logging(verbosity, logdir)
    ctx.obj = CLIState(
        config_path=config_path,
        verbosity=verbosity,
        no_color=no_color,
        json_output=json_output,
    )


@app.command("pages")
def pages_command(ctx: typer.Context) -> None:
    """List editable pages."""
    with _editor(ctx) as (editor, output):
        output.print_pages(editor.tools.enumerate_pages())


@app.command("read")
def read_command(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="Page id (e.g., index, about)"),
    flat: bool = typer.Option(
        True, "--flat/--tree", help="Show flat path -> text pairs or the nested tree as JSON"
    ),
) -> None:
    """Show a page's microtext."""
    with _editor(ctx) as (editor, output):
        if flat:
            output.print_content(page_id, editor.tools.read_content(page_id))
        else:
            output.print_json({"pageId": page_id, "content": to_data(editor.store.get(page_id))})


@app.command("set")
def set_command(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="Page id"),
    path: str = typer.Argument(..., help="Field path (e.g., hero.headline, features.0.title)"),
    value: str = typer.Argument(..., help="New text"),
    expect: Optional[str] = typer.Option(
        None, "--expect", help="Only write if the field currently holds this value"
    ),
) -> None:
    """Write one field directly to the content file."""
    with _editor(ctx) as (editor, output):
        update = editor.store.set_field(
            page_id, path, value, expected_value=UNSET if expect is None else expect
        )
        if output.json_output:
            output.print_json(update.to_dict())
        elif update.changed:
            output.success(f"Updated {page_id}#{path}: {update.previous_value!r} → {value!r}")
        else:
            output.success(f"{page_id}#{path} already set")


@array_app.command("add")
def array_add_command(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="Page id"),
    array_path: str = typer.Argument(..., help="Array path (e.g., features)"),
    template: Optional[str] = typer.Option(
        None, "--template", help='Item to append as JSON (e.g., \'{"title": "New"}\')'
    ),
) -> None:
    """Append an item to an array."""
    with _editor(ctx) as (editor, output):
        result = editor.store.array_op(
            page_id, array_path, "add", template=_parse_json_option(template, "template")
        )
        if output.json_output:
            output.print_json(result.to_dict())
        else:
            output.success(
                f"Added {array_path}.{result.index} (length {result.new_length})"
            )


@array_app.command("remove")
def array_remove_command(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="Page id"),
    array_path: str = typer.Argument(..., help="Array path (e.g., features)"),
    index: int = typer.Argument(..., help="Index of the item to remove"),
) -> None:
    """Remove an item from an array; later items shift down."""
    with _editor(ctx) as (editor, output):
        result = editor.store.array_op(page_id, array_path, "remove", index=index)
        if output.json_output:
            output.print_json(result.to_dict())
        else:
            output.success(
                f"Removed {array_path}.{result.index} (length {result.new_length})"
            )


@array_app.command("show")
def array_show_command(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="Page id"),
    array_path: str = typer.Argument(..., help="Array path (e.g., features)"),
) -> None:
    """Show the items of an array."""
    with _editor(ctx) as (editor, output):
        output.print_json(editor.store.get_array(page_id, array_path).to_dict())


@draft_app.command("save")
def draft_save_command(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="Page id"),
    path: str = typer.Argument(..., help="Field path"),
    value: str = typer.Argument(..., help="Draft text"),
) -> None:
    """Stage a draft locally without touching the content file."""
    with _editor(ctx) as (editor, output):
        entry = editor.drafts.save(page_id, path, value)
        if output.json_output:
            output.print_json(entry.to_dict())
        else:
            output.success(
                f"Saved draft {page_id}#{path} ({editor.drafts.count(page_id)} pending)"
            )


@draft_app.command("list")
def draft_list_command(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="Page id"),
) -> None:
    """List a page's pending drafts."""
    with _editor(ctx) as (editor, output):
        output.print_drafts(page_id, editor.drafts.enumerate(page_id))


@draft_app.command("clear")
def draft_clear_command(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="Page id"),
    path: Optional[str] = typer.Argument(None, help="Field path (all drafts of the page if omitted)"),
) -> None:
    """Discard drafts without syncing them."""
    with _editor(ctx) as (editor, output):
        removed = editor.drafts.clear(page_id, path)
        if output.json_output:
            output.print_json({"pageId": page_id, "cleared": removed})
        else:
            output.success(f"Cleared {removed} draft(s) for page {page_id}")


@app.command("sync")
def sync_command(
    ctx: typer.Context,
    page_id: Optional[str] = typer.Argument(None, help="Page id"),
    sync_all: bool = typer.Option(False, "--all", help="Sync every page with pending drafts"),
) -> None:
    """Write pending drafts to the content files."""
    with _editor(ctx) as (editor, output):
        if sync_all:
            reports = editor.sync_engine.sync_all()
        elif page_id is not None:
            reports = [editor.sync_engine.sync(page_id)]
        else:
            raise ValidationError("give a page id or --all", "pageId")

        if output.json_output:
            output.print_json({"reports": [report.to_dict() for report in reports]})
        elif not reports:
            output.print("No drafts to sync")
        else:
            for report in reports:
                output.print_sync_report(report)

        if any(report.failures for report in reports):
            raise typer.Exit(ExitCode.PARTIAL_FAILURE)


@app.command("publish")
def publish_command(
    ctx: typer.Context,
    message: Optional[str] = typer.Option(None, "--message", "-m", help="Commit message"),
) -> None:
    """Commit every changed content file as one version."""
    with _editor(ctx) as (editor, output):
        output.print_publish_result(editor.publish_gate.publish(message))


@app.command("status")
def status_command(ctx: typer.Context) -> None:
    """Show how many content files are unpublished."""
    with _editor(ctx) as (editor, output):
        output.print_publish_status(editor.publish_gate.status())


@app.command("interpret")
def interpret_command(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="Page id"),
    instruction: str = typer.Argument(..., help='Instruction (e.g., "Make the headline more urgent")'),
    preview: bool = typer.Option(False, "--preview", help="Show proposed changes without applying"),
) -> None:
    """Edit a page with a natural-language instruction."""
    with _editor(ctx) as (editor, output):
        report = editor.tools.interpret_instruction(page_id, instruction, apply=not preview)
        output.print_instruction_report(report)
        if report.skipped:
            raise typer.Exit(ExitCode.PARTIAL_FAILURE)


@app.command("tool")
def tool_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Tool name (e.g., read-content)"),
    arguments: Optional[str] = typer.Option(None, "--args", help="Tool arguments as a JSON object"),
) -> None:
    """Run one tool-surface operation and print its JSON response."""
    with _editor(ctx) as (editor, output):
        response = editor.tools.call(name, _parse_json_option(arguments, "args"))
        output.print_json(response)
        if response.get("isError"):
            raise typer.Exit(ExitCode.GENERAL_ERROR)


@app.command("serve-tools")
def serve_tools_command(ctx: typer.Context) -> None:
    """Serve the agent tools over MCP on stdin/stdout."""
    with _editor(ctx) as (editor, _):
        serve(editor.tools)


def main() -> None:
    """Main entry point for the CLI application."""
    app()


# Allow running as: python -m src.cli.main
if __name__ == "__main__":
    main()
