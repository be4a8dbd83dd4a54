"""Strict loaders for the tipbook runtime configuration and corpus files.

What:
  Provide helpers to locate, parse, and validate ``tipbook.yaml`` and to read
  entry files from a corpus directory into typed models.

Why:
  Configuration and entries both live outside the package and are edited by
  hand. Centralising the reading logic enforces consistent validation,
  error messages that carry the file path, and checksums that let tooling
  detect changed files.

How:
  Resolve candidate configuration locations based on explicit parameters, the
  ``TIPBOOK_CONFIG_PATH`` environment variable, and defaults. Parse YAML with
  PyYAML's ``safe_load`` and validate using Pydantic models. Entry files are
  decoded, handed to :func:`tipbook.content.parser.parse_entry`, and wrapped
  in :class:`LoadedEntry` with their raw text and checksum.

Interfaces:
  - :func:`load_runtime_config` / :func:`get_runtime_config` /
    :func:`reset_runtime_config`: Manage ``tipbook.yaml`` discovery and caching.
  - :func:`resolve_content_dir`: Pick the corpus directory.
  - :func:`load_entry_file` / :func:`load_corpus`: Read entries from disk.
  - :class:`LoadedEntry` / :class:`CorpusLoadResult`: Return types.

Invariants:
  - All external payloads pass strict validation before they are returned.
  - The runtime configuration cache respects explicit reload requests and the
    precedence order of candidate paths.
  - Corpus files are always returned in sorted path order.

Safety/Performance:
  - File operations avoid silent failures by converting OS and decoding errors
    into typed exceptions that include path context.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Optional, Tuple

import yaml
from pydantic import ValidationError as _PydanticValidationError

from ..content.entry import ContentEntry
from ..content.parser import parse_entry
from ..errors import ParseError, TipbookError
from ..utils.hashing import text_checksum
from ..utils.logging import get_logger
from .schema import RuntimeConfig


LOGGER = get_logger("tipbook.loader")


class ConfigLoadError(TipbookError):
    """Base error for configuration or corpus loading failures."""


class RuntimeConfigError(ConfigLoadError):
    """Error raised when ``tipbook.yaml`` cannot be loaded or validated."""


class CorpusLoadError(ConfigLoadError):
    """Error raised when an entry file or corpus directory cannot be read.

    What:
      Carry the offending path and, for malformed entries, the underlying
      :class:`~tipbook.errors.ParseError`.

    Why:
      Non-strict corpus scans collect these errors instead of stopping, so each
      one must be self-describing when printed later.

    How:
      Store ``path`` and keep the parse error available through
      :attr:`parse_error` (it is also the exception ``__cause__``).
    """

    def __init__(self, message: str, *, path: Path, parse_error: Optional[ParseError] = None) -> None:
        super().__init__(message)
        self.path = path
        self.parse_error = parse_error


@dataclass
class LoadedEntry:
    """Bundle a parsed entry with its source text.

    Attributes:
      entry: The validated :class:`ContentEntry`.
      raw: Text exactly as read from disk.
      checksum: SHA-256 checksum prefixed with ``sha256:``.
      path: File the entry was read from.
    """

    entry: ContentEntry
    raw: str
    checksum: str
    path: Path


@dataclass
class CorpusLoadResult:
    """Entries loaded from a directory plus the files that failed."""

    directory: Path
    entries: List[LoadedEntry] = field(default_factory=list)
    failures: List[CorpusLoadError] = field(default_factory=list)

    def __iter__(self) -> Iterator[LoadedEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def ok(self) -> bool:
        return not self.failures


_CONFIG_ENV = "TIPBOOK_CONFIG_PATH"
_DEFAULT_LOCATIONS: Tuple[Path, ...] = (
    Path("tipbook.yaml"),
    Path("~/.config/tipbook/tipbook.yaml"),
)
_RUNTIME_CACHE: Optional[Tuple[Optional[Path], RuntimeConfig]] = None


def _candidate_paths(path: Optional[Path]) -> Iterable[Path]:
    """Yield configuration file locations in priority order.

    What:
      Produce the ordered, de-duplicated list of paths that should be
      inspected for ``tipbook.yaml``.

    How:
      An explicit argument is the only candidate. Otherwise check the
      ``TIPBOOK_CONFIG_PATH`` environment variable, then the default
      locations, expanding ``~`` on each.

    Args:
      path: Explicit path requested by the caller, or ``None``.

    Yields:
      Candidate paths ordered from most specific to least specific.
    """

    if path is not None:
        yield path.expanduser()
        return
    seen: set[Path] = set()
    candidates: List[Path] = []
    env_path = os.environ.get(_CONFIG_ENV)
    if env_path:
        candidates.append(Path(env_path))
    candidates.extend(_DEFAULT_LOCATIONS)
    for candidate in candidates:
        candidate = candidate.expanduser()
        if candidate not in seen:
            seen.add(candidate)
            yield candidate


def _parse_config_payload(text: str, source: Path) -> dict[str, Any]:
    """Parse ``tipbook.yaml`` text into a dictionary payload.

    JSON documents are accepted as they are valid YAML. An empty document
    yields an empty mapping so every setting takes its default.

    Raises:
      RuntimeConfigError: If the file cannot be parsed or does not contain a
      mapping.
    """

    try:
        payload = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise RuntimeConfigError(f"Invalid YAML in {source}: {exc}") from exc
    if not isinstance(payload, dict):
        raise RuntimeConfigError(f"{source} must contain a mapping at the top-level")
    return payload


def _load_runtime_from_path(path: Path) -> RuntimeConfig:
    """Load and validate ``tipbook.yaml`` from a specific path.

    Relative ``content.directory`` values are resolved against the directory
    holding the configuration file, so a project can ship its config next to
    its corpus and be run from anywhere.

    Raises:
      RuntimeConfigError: If the file cannot be read or fails validation.
    """

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise RuntimeConfigError(f"Configuration file missing: {path}") from exc
    except OSError as exc:  # pragma: no cover - filesystem surface
        raise RuntimeConfigError(f"Unable to read configuration file {path}: {exc}") from exc
    payload = _parse_config_payload(text, path)
    try:
        config = RuntimeConfig.model_validate(payload)
    except _PydanticValidationError as exc:
        raise RuntimeConfigError(f"Invalid configuration {path}: {exc}") from exc
    directory = config.content.directory
    if directory is not None and not Path(directory).expanduser().is_absolute():
        resolved = (path.parent / directory).resolve()
        config = config.model_copy(
            update={"content": config.content.model_copy(update={"directory": str(resolved)})}
        )
    return config


def load_runtime_config(
    path: Optional[Path | str] = None,
    *,
    reload: bool = False,
    optional: bool = False,
) -> RuntimeConfig:
    """Resolve, parse, and cache the runtime configuration.

    What:
      Locate ``tipbook.yaml`` using the precedence chain, parse it, and return
      a validated :class:`RuntimeConfig`.

    Why:
      The CLI reads settings for every command; caching avoids repeated disk
      IO while ``reload`` enables deterministic refreshes in tests.

    How:
      Consult the cache unless ``reload`` is requested or the cached entry
      answers a different request (an explicit path, or discovery when
      ``path`` is ``None``), iterate through candidate paths until an
      existing file is found, and store the result under the request. An explicit path must exist. With
      ``optional=True`` a search that finds nothing yields (and caches) the
      default configuration.

    Args:
      path: Optional explicit location of ``tipbook.yaml``.
      reload: When ``True`` forces a fresh load bypassing the cache.
      optional: Fall back to defaults instead of raising when nothing is found.

    Returns:
      The validated runtime configuration.

    Raises:
      RuntimeConfigError: If no configuration file can be located (and
      ``optional`` is false) or a located file fails validation.
    """

    global _RUNTIME_CACHE

    requested_path = Path(path).expanduser() if isinstance(path, (str, Path)) else None
    if not reload and _RUNTIME_CACHE is not None:
        cached_request, cached_config = _RUNTIME_CACHE
        if cached_request == requested_path:
            return cached_config

    searched: list[str] = []
    for candidate in _candidate_paths(requested_path):
        if requested_path is None and not candidate.exists():
            searched.append(str(candidate))
            continue
        config = _load_runtime_from_path(candidate)
        _RUNTIME_CACHE = (requested_path, config)
        LOGGER.debug("config_loaded", path=str(candidate))
        return config

    if optional and requested_path is None:
        config = RuntimeConfig()
        _RUNTIME_CACHE = (None, config)
        LOGGER.debug("config_defaults", searched=searched)
        return config
    raise RuntimeConfigError(f"Unable to locate tipbook.yaml (searched: {', '.join(searched) or '<none>'})")


def get_runtime_config() -> RuntimeConfig:
    """Return the cached runtime configuration, falling back to defaults."""

    return load_runtime_config(optional=True)


def reset_runtime_config() -> None:
    """Clear the runtime configuration cache."""

    global _RUNTIME_CACHE
    _RUNTIME_CACHE = None


def resolve_content_dir(directory: Optional[Path | str], runtime: RuntimeConfig) -> Path:
    """Pick the corpus directory: explicit argument, configuration, then cwd."""

    if directory is not None:
        return Path(directory).expanduser()
    if runtime.content.directory is not None:
        return Path(runtime.content.directory).expanduser()
    return Path(".")


def load_entry_file(path: Path | str, *, encoding: str = "utf-8") -> LoadedEntry:
    """Read and parse one entry file.

    What:
      Decode ``path``, parse it with :func:`parse_entry`, and bundle the result
      with its raw text and checksum.

    Why:
      Every consumer (checks, formatter, export) needs the same combination of
      typed entry and original text; doing it in one place keeps error
      reporting uniform.

    How:
      Read the file, translate IO and decoding errors into
      :class:`CorpusLoadError`, and wrap :class:`ParseError` the same way while
      keeping it reachable for callers that want the location details.

    Args:
      path: Entry file to read.
      encoding: Text encoding of the file.

    Returns:
      The loaded entry bundle.

    Raises:
      CorpusLoadError: If the file cannot be read, decoded, or parsed.
    """

    path = Path(path)
    try:
        raw = path.read_text(encoding=encoding)
    except FileNotFoundError as exc:
        raise CorpusLoadError(f"Entry file missing: {path}", path=path) from exc
    except UnicodeDecodeError as exc:
        raise CorpusLoadError(f"Unable to decode {path} as {encoding}: {exc}", path=path) from exc
    except OSError as exc:  # pragma: no cover - filesystem surface
        raise CorpusLoadError(f"Unable to read entry file {path}: {exc}", path=path) from exc
    try:
        entry = parse_entry(raw, source=str(path))
    except ParseError as exc:
        raise CorpusLoadError(str(exc), path=path, parse_error=exc) from exc
    return LoadedEntry(entry=entry, raw=raw, checksum=text_checksum(raw), path=path)


def load_corpus(
    directory: Path | str,
    *,
    pattern: str = "*.tip",
    encoding: str = "utf-8",
    strict: bool = True,
) -> CorpusLoadResult:
    """Load every entry file matching ``pattern`` under ``directory``.

    What:
      Glob the directory, load each file with :func:`load_entry_file`, and
      return the entries in sorted path order.

    Why:
      ``check`` must report every broken file in one run, while commands that
      only display content should stop at the first problem; ``strict``
      selects between the two.

    How:
      Validate that ``directory`` exists, iterate over the sorted matches, and
      either re-raise or collect each :class:`CorpusLoadError`. Collected
      failures are only logged at debug level; reporting them is up to the
      caller.

    Args:
      directory: Corpus root.
      pattern: Glob pattern relative to ``directory`` (``**`` recurses).
      encoding: Text encoding of entry files.
      strict: Raise on the first failure instead of collecting failures.

    Returns:
      A :class:`CorpusLoadResult` with the loaded entries and any failures.

    Raises:
      CorpusLoadError: If ``directory`` is not a directory, or on the first
      failing file when ``strict`` is true.
    """

    root = Path(directory)
    if not root.is_dir():
        raise CorpusLoadError(f"Corpus directory not found: {root}", path=root)
    result = CorpusLoadResult(directory=root)
    for path in sorted(candidate for candidate in root.glob(pattern) if candidate.is_file()):
        try:
            result.entries.append(load_entry_file(path, encoding=encoding))
        except CorpusLoadError as exc:
            if strict:
                raise
            LOGGER.debug("entry_load_failed", path=str(path), error=str(exc))
            result.failures.append(exc)
    LOGGER.info(
        "corpus_loaded",
        directory=str(root),
        entries=len(result.entries),
        failures=len(result.failures),
    )
    return result
