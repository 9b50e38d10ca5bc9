"""
Generate command for repolog.

Host-tool glue around ChangelogGenerator: turns configuration and command
line options into renderers and filters, runs generation, and maps the
outcome to an exit code.
"""

import click
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from rich import box
from rich.console import Console
from rich.table import Table

from ..config import load_config, configure_logging
from ..dates import parse_include_commits_after
from ..exceptions import NoRepositoryFound, RepositoryIOError
from ..filters import PathCommitFilter, default_filters
from ..renderers import (
    ChangeLogRenderer,
    JsonRenderer,
    LoggerRenderer,
    MarkdownRenderer,
    PlainTextRenderer,
    RenderOptions,
    SimpleHtmlRenderer,
)
from ..services import ChangelogGenerator, GenerationResult
from ..cli_utils import handle_command_errors
from ..exit_codes import GENERAL_ERROR, USAGE_ERROR, CommandError, PartialSuccessError, RepositoryError

logger = logging.getLogger(__name__)

FORMAT_NAMES = ('plain_text', 'markdown', 'simple_html', 'html_table', 'json')


def create_renderers(
    config: Dict[str, Any],
    output_dir: Path,
    options: RenderOptions,
) -> List[ChangeLogRenderer]:
    """
    Build the enabled renderers, in a fixed order.

    File renderers create their files here. If one fails, the ones
    already created are closed before the error propagates.
    """
    formats = config.get('formats', {})
    renderers: List[ChangeLogRenderer] = []

    def enabled(name: str) -> bool:
        return bool(formats.get(name, {}).get('enabled'))

    def filename(name: str) -> str:
        return formats[name]['filename']

    try:
        if enabled('plain_text'):
            renderers.append(PlainTextRenderer(output_dir, filename('plain_text'), options))
        if enabled('simple_html'):
            renderers.append(SimpleHtmlRenderer(output_dir, filename('simple_html'), options))
        if enabled('html_table'):
            renderers.append(SimpleHtmlRenderer(output_dir, filename('html_table'), options, table_only=True))
        if enabled('markdown'):
            renderers.append(MarkdownRenderer(output_dir, filename('markdown'), options))
        if enabled('json'):
            renderers.append(JsonRenderer(output_dir, filename('json'), options))
    except (OSError, KeyError):
        for renderer in renderers:
            renderer.close()
        raise

    if config['general'].get('verbose'):
        renderers.append(LoggerRenderer(options))

    return renderers


def create_filters(config: Dict[str, Any], include_merges: bool = False) -> list:
    """The default filter chain plus an optional path-scoped filter."""
    filters = [] if include_merges else default_filters()
    subdirectory = config['general'].get('filter_on_path')
    if subdirectory:
        logger.info(f"Filtering commits to those touching {subdirectory}")
        filters.append(PathCommitFilter(subdirectory))
    return filters


def _apply_options(config: Dict[str, Any], **overrides) -> Dict[str, Any]:
    general = config['general']
    for key, value in overrides.items():
        if value is not None:
            general[key] = value
    return config


def _apply_formats(config: Dict[str, Any], formats: Tuple[str, ...]) -> None:
    if not formats:
        return
    for name in FORMAT_NAMES:
        config['formats'].setdefault(name, {})['enabled'] = name in formats


def _render_summary(result: GenerationResult, renderers: List[ChangeLogRenderer]) -> None:
    console = Console(stderr=True)
    table = Table(
        title="Changelog",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Commits walked", str(result.commits_seen))
    table.add_row("Before cutoff", str(result.commits_before_cutoff))
    table.add_row("Filtered out", str(result.commits_filtered))
    table.add_row("Commits rendered", str(result.commits_rendered))
    table.add_row("Tags rendered", str(result.tags_rendered))
    console.print(table)

    for renderer in renderers:
        path = getattr(renderer, 'path', None)
        if path is not None:
            console.print(f"  [green]✓[/green] {path}")
    for error in result.errors:
        console.print(f"  [red]✗[/red] {error}")


@click.command('generate')
@click.argument('start_path', type=click.Path(), default='.')
@click.option('--output-dir', '-o', type=click.Path(), help='Directory to write changelogs to')
@click.option('--title', '-t', 'report_title', help='Report title (default: "<directory> changelog")')
@click.option('--since', '-s', 'include_commits_after',
              help='Only include commits after this date (in --date-format, ISO, or e.g. 30d)')
@click.option('--date-format', help='strftime pattern for dates and for --since')
@click.option('--path', 'path_filter', help='Only walk history that touches this path')
@click.option('--filter-on-path', help='Only render commits changing files under this directory')
@click.option('--include-merges', is_flag=True, help='Render merge commits too')
@click.option('--full-message', 'full_git_message', is_flag=True,
              help='Render full commit messages instead of the first line')
@click.option('--format', '-f', 'formats', multiple=True, type=click.Choice(FORMAT_NAMES),
              help='Formats to write (repeatable; default from config)')
@click.option('--verbose', '-v', is_flag=True, help='Echo the changelog to the log')
@click.option('--pretty', is_flag=True, help='Show a summary table instead of JSON')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@handle_command_errors
def generate_handler(
    start_path: str,
    output_dir: Optional[str],
    report_title: Optional[str],
    include_commits_after: Optional[str],
    date_format: Optional[str],
    path_filter: Optional[str],
    filter_on_path: Optional[str],
    include_merges: bool,
    full_git_message: bool,
    formats: Tuple[str, ...],
    verbose: bool,
    pretty: bool,
    debug: bool,
):
    """
    Generate changelogs from the git history of START_PATH.

    The repository is found by searching upward from START_PATH
    (default: the current directory). Merge commits are left out unless
    --include-merges is given.

    \b
    Examples:
        # Plain text, HTML and JSON changelogs in ./build
        repolog generate
        # Markdown only, commits from the last 30 days
        repolog generate -f markdown --since 30d
        # Only commits that change files under services/api
        repolog generate --filter-on-path services/api
        # Print the changelog to the log as well
        repolog generate --verbose --pretty
    """
    config = load_config()
    config = _apply_options(
        config,
        output_directory=output_dir,
        report_title=report_title,
        include_commits_after=include_commits_after,
        date_format=date_format,
        path_filter=path_filter,
        filter_on_path=filter_on_path,
        full_git_message=True if full_git_message else None,
        verbose=True if verbose else None,
    )
    _apply_formats(config, formats)
    configure_logging(config, debug=debug)
    general = config['general']

    start = Path(start_path).expanduser()
    title = general.get('report_title') or f"{start.resolve().name} changelog"
    out_dir = Path(general['output_directory']).expanduser()
    logger.info(f"Generating changelog in {out_dir} with title {title}")

    generator = ChangelogGenerator([], create_filters(config, include_merges))
    try:
        generator.open_repository(start, general.get('path_filter') or None)
    except NoRepositoryFound:
        logger.warning(
            "This project does not appear to be in a git repository, "
            "therefore no git changelog will be generated."
        )
        return
    except RepositoryIOError as e:
        raise RepositoryError(f"Error opening git repository. No changelog will be generated. {e}") from e
    except ValueError as e:
        raise CommandError(f"Invalid --path or --filter-on-path: {e}", USAGE_ERROR) from e

    options = RenderOptions(
        date_format=general['date_format'],
        full_message=bool(general.get('full_git_message')),
    )
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
        renderers = create_renderers(config, out_dir, options)
    except (OSError, KeyError) as e:
        generator.close()
        raise CommandError(f"Error while setting up renderers. No changelog will be generated. {e}", GENERAL_ERROR) from e

    generator.renderers = renderers
    cutoff = parse_include_commits_after(general.get('include_commits_after'), general['date_format'])
    result = generator.generate(title, cutoff)

    if pretty:
        _render_summary(result, renderers)
    else:
        click.echo(json.dumps(result.to_dict(), ensure_ascii=False))

    if not result.complete:
        raise PartialSuccessError(
            "Error while generating changelog. Some changelogs may be incomplete or corrupt.",
            errors=len(result.errors),
        )
