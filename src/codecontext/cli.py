"""Command-line interface for codecontext."""

import asyncio
import logging
import sys
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple

import typer
from rich import print
from rich.console import Console
from rich.markup import escape

from . import __version__
from .analyzer import DirectoryAnalyzer
from .config import ConfigManager, ConfigNotFoundError, ProjectConfig
from .context import synthesize
from .enrichment import ClaudeEnricher
from .git import GitClient, find_repository_root, install_post_commit_hook
from .monitor import ProjectMonitor
from .refresh import resolve_scope

app = typer.Typer(
    name="codecontext",
    help="Generate and maintain AI-optimized documentation for every directory of your codebase.",
    rich_markup_mode="rich",
)
console = Console(stderr=True)
logger = logging.getLogger(__name__)


class AnalysisMode(str, Enum):
    quick = "quick"
    smart = "smart"
    deep = "deep"


def version_callback(value: bool):
    """Show version and exit."""
    if value:
        print(f"[cyan]codecontext[/cyan] version [green]{__version__}[/green]")
        raise typer.Exit()


def _configure_logging(config_manager: ConfigManager, verbose: bool):
    stream = logging.StreamHandler(sys.stderr)
    stream.setLevel(logging.DEBUG if verbose else logging.WARNING)
    handlers = [stream]
    try:
        config_manager.ensure_state_dir()
        file_handler = logging.FileHandler(config_manager.log_file)
        file_handler.setLevel(logging.DEBUG)
        handlers.append(file_handler)
    except OSError as e:
        console.print(f"[yellow]Could not open log file[/yellow] ({escape(str(e))})")
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Log debug output to stderr.",
    ),
):
    """
    CodeContext - per-directory documentation for AI coding sessions.
    """
    _configure_logging(ConfigManager(), verbose)


@contextmanager
def _fatal_errors(action: str):
    """Report unexpected failures and exit non-zero."""
    try:
        yield
    except typer.Exit:
        raise
    except Exception as e:
        logger.debug(f"Failed to {action}", exc_info=True)
        print(f"[red]Failed to {action}:[/red] {e}")
        raise typer.Exit(1)


def _load_project(config_manager: ConfigManager) -> Tuple[Path, ProjectConfig]:
    try:
        root = config_manager.find_project_root(Path.cwd())
    except ConfigNotFoundError:
        print('[red]CodeContext not initialized.[/red] Run "codecontext init" first.')
        raise typer.Exit(1)
    with _fatal_errors("read configuration"):
        return root, config_manager.load(root)


def build_analyzer(root: Path, config: ProjectConfig, config_manager: ConfigManager) -> DirectoryAnalyzer:
    """Wire the analyzer with the collaborators the configuration enables."""
    settings = config_manager.settings
    git = GitClient(timeout=settings.git_timeout) if config.integrations.git else None
    enricher = None
    if config.integrations.claude and config.mode != "quick" and settings.anthropic_api_key:
        enricher = ClaudeEnricher(
            settings.anthropic_api_key,
            smart_model=settings.smart_model,
            deep_model=settings.deep_model,
            timeout=settings.ai_timeout,
        )
    return DirectoryAnalyzer(config, root=root, git=git, enricher=enricher, workers=settings.workers)


@app.command(name="init", help="Initialize CodeContext in the current directory")
def init_project(
    mode: AnalysisMode = typer.Option(
        AnalysisMode.smart,
        "--mode",
        "-m",
        help="Analysis mode: quick, smart, or deep",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Force re-initialization even if already initialized",
    ),
):
    """Write the configuration and document every directory."""
    root = Path.cwd().resolve()
    config_manager = ConfigManager()

    if config_manager.exists(root) and not force:
        print("[yellow]CodeContext already initialized[/yellow]")
        print("Use --force to reinitialize")
        raise typer.Exit(1)

    with _fatal_errors("initialize CodeContext"):
        config = config_manager.default_config(mode.value)
        config_manager.save(root, config)
        print(f"[green]Created configuration:[/green] {config_manager.config_path(root)}")

        if config.integrations.git:
            if find_repository_root(root) == root and install_post_commit_hook(root):
                print("[cyan]Installed post-commit hook[/cyan]")
            else:
                print("[yellow]Skipped git hook installation[/yellow]")

        analyzer = build_analyzer(root, config, config_manager)
        with console.status("Analyzing project structure..."):
            records = analyzer.analyze_project(root)

    print(f"[green]✓ CodeContext initialized[/green] ({len(records)} directories documented)")
    print("[cyan]Next steps:[/cyan]")
    print("  - Run [bold]codecontext refresh[/bold] to update documentation")
    print("  - Run [bold]codecontext context[/bold] to generate AI context")


@app.command(name="refresh", help="Refresh documentation for changed files")
def refresh_docs(
    path: Optional[Path] = typer.Option(
        None,
        "--path",
        "-p",
        help="Specific directory to refresh",
    ),
    all_: bool = typer.Option(
        False,
        "--all",
        "-a",
        help="Refresh documentation for every directory",
    ),
    mode: Optional[AnalysisMode] = typer.Option(
        None,
        "--mode",
        "-m",
        help="Override the configured analysis mode",
    ),
):
    """Re-analyze an explicit path, the whole tree, or directories with changes."""
    config_manager = ConfigManager()
    root, config = _load_project(config_manager)
    if mode is not None:
        config = config.model_copy(update={"mode": mode.value})

    target = None
    if path is not None:
        target = path.resolve()
        if not target.is_dir():
            print(f"[red]Error:[/red] {path} is not a valid directory")
            raise typer.Exit(1)

    with _fatal_errors("refresh documentation"):
        analyzer = build_analyzer(root, config, config_manager)
        directories = resolve_scope(
            root, analyzer.ignore_filter, git=analyzer.git, path=target, all_=all_
        )
        if not directories:
            print("[green]No changes detected. Documentation is up to date.[/green]")
            return

        refreshed = 0
        with console.status(f"Updating documentation for {len(directories)} directories..."):
            for directory in directories:
                try:
                    analyzer.analyze(directory)
                    refreshed += 1
                except OSError as e:
                    logger.warning(f"Skipping {directory}: {e}")

    print(f"[green]✓ Documentation refreshed[/green] ({refreshed} directories)")


@app.command(name="context", help="Generate optimized context for AI coding sessions")
def generate_context(
    current_dir: bool = typer.Option(
        False,
        "--current-dir",
        "-d",
        help="Context for the current directory only",
    ),
    project_summary: bool = typer.Option(
        False,
        "--project-summary",
        "-s",
        help="Project-wide summary",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write to a file instead of stdout",
    ),
):
    """Print or save one of the three context views."""
    config_manager = ConfigManager()
    root, _ = _load_project(config_manager)

    with _fatal_errors("generate context"):
        if current_dir:
            text = synthesize(Path.cwd(), "directory")
        elif project_summary:
            text = synthesize(root, "project")
        else:
            text = synthesize(Path.cwd(), "standard")

        if output is not None:
            output.write_text(text, encoding="utf-8")
            print(f"[green]Context saved to {output}[/green]")
        else:
            typer.echo(text)


@app.command(name="watch", help="Watch the project and refresh documentation on changes")
def watch_project():
    """Keep documents current until interrupted."""
    config_manager = ConfigManager()
    root, config = _load_project(config_manager)
    analyzer = build_analyzer(root, config, config_manager)
    monitor = ProjectMonitor(root, analyzer, update_delay=config_manager.settings.update_delay)

    print(f"[green]Watching {root}[/green]")
    print("[yellow]Press Ctrl+C to stop[/yellow]")
    try:
        asyncio.run(monitor.run())
    except KeyboardInterrupt:
        print("\n[yellow]Stopped watching[/yellow]")


if __name__ == "__main__":
    app()
