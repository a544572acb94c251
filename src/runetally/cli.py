from __future__ import annotations

from pathlib import Path

import msgspec
import typer

from .config import ConfigError, ReaderConfig, load_config
from .log import configure_logging
from .reader import SaveReader
from .runes import RUNES
from .summary import RunesSummary

app = typer.Typer(add_completion=False)


def _format_summary(summary: RunesSummary) -> list[str]:
    lines = [f"{name}: {count}" for name, count in summary.sorted_runes()]
    lines.append(f"total: {summary.total} runes in {len(summary.read_files)} files")
    if summary.read_errors:
        lines.append(f"could not read {len(summary.read_errors)} files:")
        lines.extend(f"  {name}" for name in summary.read_errors)
    return lines


def _load_reader_config(config_path: Path | None) -> ReaderConfig:
    if config_path is None:
        return ReaderConfig()
    if not config_path.is_file():
        typer.echo(f"config file not found: {config_path}", err=True)
        raise typer.Exit(code=1)
    try:
        return load_config(config_path)
    except (ConfigError, OSError) as exc:
        typer.echo(f"invalid config: {exc}", err=True)
        raise typer.Exit(code=1) from exc


@app.command("count")
def cmd_count(
    paths: list[Path] = typer.Argument(..., help="save files or directories to scan"),
    as_json: bool = typer.Option(False, "--json", help="print the summary as JSON"),
    config_path: Path | None = typer.Option(None, "--config", help="TOML file with a [runetally] table"),
    timeout: float | None = typer.Option(None, "--timeout", help="per-file timeout in seconds"),
    jobs: int | None = typer.Option(None, "--jobs", min=1, help="max files processed at once"),
    recursive: bool | None = typer.Option(
        None, "--recursive/--no-recursive", help="descend into subdirectories (default from config, else on)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="log per-file progress"),
) -> None:
    """Count unsocketed runes across save files."""
    missing = [path for path in paths if not path.exists()]
    if missing:
        for path in missing:
            typer.echo(f"path not found: {path}", err=True)
        raise typer.Exit(code=1)

    base = _load_reader_config(config_path)
    try:
        config = base.with_overrides(
            file_timeout=timeout,
            max_concurrency=jobs,
            recursive=recursive,
            log_level="INFO" if verbose else None,
        )
    except ConfigError as exc:
        typer.echo(f"invalid option: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    configure_logging(config.log_level_value)

    def _report(summary: RunesSummary) -> None:
        if as_json:
            typer.echo(msgspec.json.encode(summary.to_dict()).decode("utf-8"))
            return
        for line in _format_summary(summary):
            typer.echo(line)

    reader = SaveReader(_report, config=config)
    if not reader.select(paths):
        typer.echo("no files found", err=True)
        raise typer.Exit(code=1)
    reader.submit()


@app.command("runes")
def cmd_runes() -> None:
    """List the rune item codes and their names."""
    for code, name in RUNES.items():
        typer.echo(f"{code}  {name}")


def main(argv: list[str] | None = None) -> None:
    app(prog_name="runetally", args=argv)


if __name__ == "__main__":
    main()
