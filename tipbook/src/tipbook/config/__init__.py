"""tipbook configuration and corpus loading package.

What:
  Provide a cohesive import surface for runtime configuration discovery and
  for reading entry files from disk.

Why:
  Centralising the exports shields callers from the internal layout and keeps
  every read going through the validating loaders.

Interfaces:
  - load_runtime_config / get_runtime_config / reset_runtime_config: Resolve
    ``tipbook.yaml`` and expose a cached runtime configuration object.
  - load_entry_file / load_corpus / resolve_content_dir: Read entries.
  - LoadedEntry / CorpusLoadResult: Loader return types.
  - ConfigLoadError / RuntimeConfigError / CorpusLoadError: Loader errors.
  - RuntimeConfig: Pydantic model for ``tipbook.yaml``.
"""

from .loader import (
    ConfigLoadError,
    CorpusLoadError,
    CorpusLoadResult,
    LoadedEntry,
    RuntimeConfigError,
    get_runtime_config,
    load_corpus,
    load_entry_file,
    load_runtime_config,
    reset_runtime_config,
    resolve_content_dir,
)
from .schema import RuntimeConfig

__all__ = [
    "load_runtime_config",
    "get_runtime_config",
    "reset_runtime_config",
    "resolve_content_dir",
    "load_entry_file",
    "load_corpus",
    "LoadedEntry",
    "CorpusLoadResult",
    "ConfigLoadError",
    "RuntimeConfigError",
    "CorpusLoadError",
    "RuntimeConfig",
]
