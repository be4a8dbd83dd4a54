"""tipbook command-line interface for checking, browsing, and formatting a corpus.

What:
  Provide a Typer-based command-line entry point over a directory of tip
  entries. The module exposes ``check``, ``list``, ``show``, ``tags``,
  ``search``, ``fmt``, ``export``, and ``new``.

Why:
  Authors and CI jobs need the same validation and formatting rules. Wiring
  every command through the shared loaders guarantees that what ``check``
  accepts is what ``show`` renders and what ``fmt`` writes.

How:
  Each command resolves the runtime configuration (optional ``tipbook.yaml``),
  configures logging, resolves the corpus directory, and loads it through
  :func:`tipbook.config.loader.load_corpus`. Output goes to stdout through
  :func:`typer.echo`; diagnostics go to stderr.

Interfaces:
  ``app`` (Typer application) and one function per command.

Invariants & Safety:
  - Exit codes follow shell expectations (``0`` success, ``1`` failure).
  - Every :class:`~tipbook.errors.TipbookError` becomes a one-line message on
    stderr and exit code ``1``; other exceptions propagate.
  - ``fmt`` and ``new`` only ever write files inside the corpus directory, and
    ``new`` never overwrites an existing file.
"""
from __future__ import annotations

import datetime
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional

import typer
import yaml

from .catalog import Catalog
from .config.loader import (
    CorpusLoadResult,
    load_corpus,
    load_runtime_config,
    resolve_content_dir,
)
from .config.schema import RuntimeConfig
from .content.checks import ERROR, WARNING, check_corpus, has_errors
from .content.entry import ContentEntry
from .content.render import entry_to_mapping, render_markdown, render_text
from .content.serializer import dump_entry
from .errors import TipbookError
from .utils.files import atomic_write_text
from .utils.logging import configure_logging


app = typer.Typer(help="tipbook: load, check, and browse a corpus of tip entries")

LOGGER = logging.getLogger("tipbook.cli")


@dataclass
class _Session:
    """Resolved settings shared by one command invocation."""

    runtime: RuntimeConfig
    directory: Path

    def load(self, *, strict: bool = False) -> CorpusLoadResult:
        return load_corpus(
            self.directory,
            pattern=self.runtime.content.pattern,
            encoding=self.runtime.content.encoding,
            strict=strict,
        )


def _open_session(directory: Optional[Path], config: Optional[Path]) -> _Session:
    """Load the runtime configuration and resolve the corpus directory.

    What:
      Bundle the configuration and corpus location for a command.

    Why:
      Every command needs the same precedence (explicit directory, then
      ``content.directory``, then the working directory) and the same logging
      setup; keeping it here avoids drift between commands.

    How:
      An explicit ``--config`` must exist; otherwise the configuration is
      optional and defaults apply when none is found.

    Raises:
      RuntimeConfigError: When the configuration is present but invalid.
    """

    if config is not None:
        runtime = load_runtime_config(config, reload=True)
    else:
        runtime = load_runtime_config(optional=True)
    configure_logging(runtime.logging.level)
    session = _Session(runtime=runtime, directory=resolve_content_dir(directory, runtime))
    LOGGER.debug("session directory=%s pattern=%s", session.directory, runtime.content.pattern)
    return session


def _fail(message: str) -> typer.Exit:
    typer.echo(message, err=True)
    return typer.Exit(code=1)


def _report_failures(result: CorpusLoadResult) -> None:
    for failure in result.failures:
        typer.echo(f"{failure}", err=True)


def _iter_entries(result: CorpusLoadResult) -> Iterator[ContentEntry]:
    return (loaded.entry for loaded in result.entries)


_DIRECTORY_HELP = "Corpus directory (defaults to content.directory or the working directory)"
_CONFIG_HELP = "Path to tipbook.yaml"


@app.command("check")
def check(
    directory: Optional[Path] = typer.Argument(None, help=_DIRECTORY_HELP),
    *,
    strict: bool = typer.Option(False, "--strict", help="Treat warnings as errors"),
    config: Optional[Path] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """Validate every entry and report integrity issues.

    What:
      Load the corpus without stopping at the first broken file, run the
      integrity checks, and print one line per problem.

    Why:
      This is the command CI runs on every change to the corpus, so it has to
      report everything in one pass and fail with a non-zero exit code.

    How:
      Parse failures are printed first, then issues from
      :func:`check_corpus`, then a summary. The run fails on parse failures,
      on error issues, and on warnings when ``--strict`` or
      ``checks.fail_on_warnings`` is set.
    """

    try:
        session = _open_session(directory, config)
        result = session.load(strict=False)
    except TipbookError as exc:
        raise _fail(str(exc)) from exc

    _report_failures(result)
    issues = check_corpus(
        ((loaded.entry, str(loaded.path)) for loaded in result.entries),
        https_only_docs=session.runtime.checks.https_only_docs,
    )
    for issue in issues:
        typer.echo(issue.format())
    errors = sum(1 for issue in issues if issue.severity == ERROR) + len(result.failures)
    warnings = sum(1 for issue in issues if issue.severity == WARNING)
    typer.echo(f"{len(result.entries)} entries checked, {errors} errors, {warnings} warnings")

    warnings_are_errors = strict or session.runtime.checks.fail_on_warnings
    if result.failures or has_errors(issues, warnings_are_errors=warnings_are_errors):
        raise typer.Exit(code=1)


@app.command("list")
def list_entries(
    directory: Optional[Path] = typer.Argument(None, help=_DIRECTORY_HELP),
    *,
    tag: Optional[List[str]] = typer.Option(None, "--tag", "-t", help="Only entries carrying this tag (repeatable)"),
    config: Optional[Path] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """List entry names with their one-line summaries."""

    try:
        session = _open_session(directory, config)
        catalog = Catalog(_iter_entries(session.load()))
    except TipbookError as exc:
        raise _fail(str(exc)) from exc

    for entry in catalog.with_all_tags(tag or []):
        typer.echo(f"{entry.name} - {entry.tldr}" if entry.tldr else entry.name)


@app.command("show")
def show(
    name: str = typer.Argument(..., help="Entry name (case-insensitive)"),
    directory: Optional[Path] = typer.Argument(None, help=_DIRECTORY_HELP),
    *,
    markdown: bool = typer.Option(False, "--markdown", help="Render as Markdown"),
    config: Optional[Path] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """Render one entry."""

    try:
        session = _open_session(directory, config)
        catalog = Catalog(_iter_entries(session.load()))
    except TipbookError as exc:
        raise _fail(str(exc)) from exc

    try:
        entry = catalog.by_name(name)
    except KeyError:
        raise _fail(f"No entry named {name!r}") from None
    if markdown:
        typer.echo(render_markdown(entry), nl=False)
    else:
        typer.echo(render_text(entry, width=session.runtime.render.width), nl=False)


@app.command("tags")
def tags(
    directory: Optional[Path] = typer.Argument(None, help=_DIRECTORY_HELP),
    *,
    config: Optional[Path] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """Print every tag with the number of entries using it."""

    try:
        session = _open_session(directory, config)
        catalog = Catalog(_iter_entries(session.load()))
    except TipbookError as exc:
        raise _fail(str(exc)) from exc

    for tag_name, count in catalog.tag_counts():
        typer.echo(f"{count:>4}  {tag_name}")


@app.command("search")
def search(
    text: str = typer.Argument(..., help="Text to look for in names, summaries, and bodies"),
    directory: Optional[Path] = typer.Argument(None, help=_DIRECTORY_HELP),
    *,
    config: Optional[Path] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """List entries whose name, tldr, or content contains ``text``."""

    try:
        session = _open_session(directory, config)
        catalog = Catalog(_iter_entries(session.load()))
    except TipbookError as exc:
        raise _fail(str(exc)) from exc

    matches = catalog.search(text)
    for entry in matches:
        typer.echo(entry.name)
    if not matches:
        raise typer.Exit(code=1)


@app.command("fmt")
def fmt(
    directory: Optional[Path] = typer.Argument(None, help=_DIRECTORY_HELP),
    *,
    check_only: bool = typer.Option(False, "--check", help="Report files that would change without writing"),
    config: Optional[Path] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """Rewrite entry files in canonical form.

    What:
      Serialise every loaded entry with :func:`dump_entry` and replace files
      whose text differs.

    Why:
      Canonical field order, inline short fields, and sorted tags make diffs
      between revisions of the corpus small and predictable.

    How:
      Files that fail to parse are reported and left untouched. Rewrites go
      through :func:`~tipbook.utils.files.atomic_write_text`, so a failed
      write never leaves a truncated entry behind. With
      ``--check`` nothing is written and the command fails when any file would
      change.
    """

    try:
        session = _open_session(directory, config)
        result = session.load(strict=False)
    except TipbookError as exc:
        raise _fail(str(exc)) from exc

    _report_failures(result)
    changed = 0
    unwritable = 0
    for loaded in result.entries:
        try:
            canonical = dump_entry(loaded.entry)
        except TipbookError as exc:
            typer.echo(f"{loaded.path}: {exc}", err=True)
            unwritable += 1
            continue
        if canonical == loaded.raw:
            continue
        changed += 1
        if check_only:
            typer.echo(f"would reformat {loaded.path}")
        else:
            try:
                atomic_write_text(loaded.path, canonical, encoding=session.runtime.content.encoding)
            except (OSError, UnicodeError) as exc:
                typer.echo(f"{loaded.path}: unable to write: {exc}", err=True)
                unwritable += 1
                continue
            typer.echo(f"reformatted {loaded.path}")
    LOGGER.info("fmt changed=%s failures=%s", changed, len(result.failures) + unwritable)
    if result.failures or unwritable or (check_only and changed):
        raise typer.Exit(code=1)


@app.command("export")
def export(
    directory: Optional[Path] = typer.Argument(None, help=_DIRECTORY_HELP),
    *,
    output_format: str = typer.Option("yaml", "--format", help="Output format: yaml or json"),
    config: Optional[Path] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """Dump the whole corpus as YAML or JSON on stdout."""

    if output_format not in ("yaml", "json"):
        raise _fail(f"Unsupported format {output_format!r} (expected yaml or json)")
    try:
        session = _open_session(directory, config)
        result = session.load(strict=True)
    except TipbookError as exc:
        raise _fail(str(exc)) from exc

    payload = []
    for loaded in result.entries:
        record = entry_to_mapping(loaded.entry)
        record["source"] = loaded.path.name
        record["checksum"] = loaded.checksum
        payload.append(record)
    if output_format == "json":
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        typer.echo(yaml.safe_dump(payload, sort_keys=False, allow_unicode=True), nl=False)


@app.command("new")
def new(
    name: str = typer.Argument(..., help="Title of the new entry"),
    directory: Optional[Path] = typer.Argument(None, help=_DIRECTORY_HELP),
    *,
    author: Optional[str] = typer.Option(None, "--author", help="Author attribution"),
    tag: Optional[List[str]] = typer.Option(None, "--tag", "-t", help="Tag (repeatable)"),
    tldr: Optional[str] = typer.Option(None, "--tldr", help="One-line summary"),
    docs: Optional[str] = typer.Option(None, "--docs", help="Reference documentation URL"),
    config: Optional[Path] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """Create a new entry file from the given metadata."""

    try:
        session = _open_session(directory, config)
        entry = ContentEntry.from_fields(
            {
                "name": name,
                "author": author,
                "date": datetime.date.today(),
                "docs": docs,
                "tags": tag or [],
                "tldr": tldr,
                "content": "Describe the tip here.",
            }
        )
    except TipbookError as exc:
        raise _fail(str(exc)) from exc

    suffix = Path(session.runtime.content.pattern).suffix or ".tip"
    target = session.directory / f"{entry.slug}{suffix}"
    try:
        text = dump_entry(entry)
        session.directory.mkdir(parents=True, exist_ok=True)
        with target.open("x", encoding=session.runtime.content.encoding) as handle:
            handle.write(text)
    except FileExistsError as exc:
        raise _fail(f"Refusing to overwrite existing file {target}") from exc
    except TipbookError as exc:
        raise _fail(str(exc)) from exc
    typer.echo(str(target))


def main() -> None:
    """Execute the Typer application entry point."""

    app()


if __name__ == "__main__":  # pragma: no cover
    main()
