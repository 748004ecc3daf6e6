"""Click CLI with show, languages, and watch subcommands."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from code_clarity.errors import CodeClarityError
from code_clarity.formatter import SUPPORTED_FORMATS, get_formatter
from code_clarity.languages import default_registry
from code_clarity.models import GraphConfig, WatchConfig
from code_clarity.pipeline import normalize_extensions, run_show, split_list

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


@click.group()
@click.version_option(version="0.1.0")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """code-clarity: Visualize file dependencies and circular imports."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
    )


def _parse_extensions(option: str, raw: str | None) -> list[str]:
    if not raw:
        return []
    try:
        return normalize_extensions(option, raw)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint=option)


@cli.command()
@click.option("--format", "-f", "output_format", type=click.Choice(SUPPORTED_FORMATS, case_sensitive=False),
              default="dot", show_default=True, help="Output format")
@click.option("--repo", "-r", "repo_path", type=click.Path(exists=True, file_okay=False, path_type=Path),
              default=".", help="Repository path (default: current directory)")
@click.option("--commit", "-c", help="Commit or range to analyze (e.g. HEAD~3, f0459ec...be3d11a)")
@click.option("--url", "-u", "generate_url", is_flag=True, help="Print a visualization URL instead (dot, mermaid)")
@click.option("--input", "-i", "includes", multiple=True, help="Files and/or directories to graph (comma-separated)")
@click.option("--exclude", "excludes", multiple=True, help="Files and/or directories to leave out (comma-separated)")
@click.option("--include-ext", help="Only files with these extensions (e.g. .py,.js)")
@click.option("--exclude-ext", help="Skip files with these extensions (e.g. .md,.json)")
@click.option("--between", "-w", "between", multiple=True, help="Show only files on paths between these files (comma-separated)")
@click.option("--file", "-p", "target_file", help="Show the neighborhood of one file")
@click.option("--level", "-l", type=click.IntRange(min=1), default=1, show_default=True,
              help="Neighborhood depth for --file")
@click.option("--workers", type=click.IntRange(min=1), default=1, show_default=True,
              help="Threads used to parse files")
def show(
    output_format: str,
    repo_path: Path,
    commit: str | None,
    generate_url: bool,
    includes: tuple[str, ...],
    excludes: tuple[str, ...],
    include_ext: str | None,
    exclude_ext: str | None,
    between: tuple[str, ...],
    target_file: str | None,
    level: int,
    workers: int,
):
    """Show a scoped file-based dependency graph.

    Without options, graphs the uncommitted changes of the repository.
    """
    include_list = split_list(includes)
    between_list = split_list(between)

    if between_list and include_list:
        raise click.UsageError("--between cannot be used with --input")
    if target_file and between_list:
        raise click.UsageError("--file cannot be used with --between")
    if target_file and include_list:
        raise click.UsageError("--file cannot be used with --input")

    config = GraphConfig(
        repo_path=repo_path,
        commit=commit,
        includes=include_list,
        excludes=split_list(excludes),
        include_exts=_parse_extensions("--include-ext", include_ext),
        exclude_exts=_parse_extensions("--exclude-ext", exclude_ext),
        between=between_list,
        target_file=target_file,
        level=level,
        output_format=output_format.lower(),
        workers=workers,
    )

    try:
        result = run_show(config)
    except (ValueError, CodeClarityError) as e:
        raise click.ClickException(str(e))

    if result.empty or not generate_url:
        click.echo(result.output)
        return

    url = get_formatter(config.output_format).visualization_url(result.output)
    if url is None:
        click.echo(f"Warning: URL generation is not supported for {config.output_format} format\n", err=True)
        click.echo(result.output)
    else:
        click.echo(url)


@cli.command()
def languages():
    """List supported languages and their extensions."""
    resolvers = default_registry().languages()
    width = max(len(r.name) for r in resolvers)

    click.echo(f"\nSupported languages ({len(resolvers)}):\n")
    for resolver in resolvers:
        extensions = ", ".join(resolver.extensions)
        click.echo(
            f"  {resolver.maturity.symbol} {click.style(resolver.name.ljust(width), fg='cyan')}  "
            f"{extensions}  {click.style(resolver.maturity.display_name, dim=True)}"
        )
    click.echo()


@cli.command()
@click.option("--repo", "-r", "repo_path", type=click.Path(exists=True, file_okay=False, path_type=Path),
              default=".", help="Repository to watch")
@click.option("--port", "-p", default=4900, show_default=True, help="Port number")
@click.option("--host", default="127.0.0.1", show_default=True, help="Host address")
@click.option("--open/--no-open", "open_browser", default=True, help="Open browser automatically")
@click.option("--debounce", "debounce_ms", type=click.IntRange(min=0), default=500, show_default=True,
              help="Milliseconds to wait for changes to settle before rebuilding")
@click.option("--workers", type=click.IntRange(min=1), default=1, show_default=True,
              help="Threads used to parse files")
def watch(repo_path: Path, port: int, host: str, open_browser: bool, debounce_ms: int, workers: int):
    """Serve a live-updating graph of the uncommitted changes."""
    try:
        import uvicorn
    except ImportError:
        raise click.ClickException(
            "uvicorn is required for watch mode. "
            "Install with: pip install 'code-clarity[web]'"
        )

    from code_clarity.web import WatchSession, create_app

    config = WatchConfig(
        repo_path=repo_path.resolve(),
        host=host,
        port=port,
        debounce_ms=debounce_ms,
        workers=workers,
    )
    session = WatchSession(config)

    click.echo(f"Watching {config.repo_path} at http://{host}:{port}")

    if open_browser:
        import threading
        import webbrowser
        threading.Timer(1.0, lambda: webbrowser.open(f"http://{host}:{port}")).start()

    uvicorn.run(create_app(session), host=host, port=port, log_level="info")


if __name__ == "__main__":
    cli()
