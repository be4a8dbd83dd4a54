"""
Module: tipbook.__init__

What:
  Aggregate package exports for tipbook, the loader and checker for a corpus
  of short testing-framework tips, and expose the primary namespace segments
  (configuration and loading, entry content, catalog, and utilities).

Why:
  Centralising the exports keeps the CLI and downstream scripts stable while
  the internal layout evolves.

How:
  Provide an explicit ``__all__`` declaration that enumerates the public
  subpackages and the handful of names most callers need.

Interfaces:
  - config: Runtime configuration and corpus loaders.
  - content: Entry model, text format, checks, and renderings.
  - catalog: Lookup and tag index over loaded entries.
  - utils: Shared helpers for logging and checksums.
"""

from .catalog import Catalog
from .content import ContentEntry, dump_entry, parse_entry
from .errors import ParseError, SerializeError, TipbookError

__version__ = "0.1.0"

__all__ = [
    "config",
    "content",
    "catalog",
    "utils",
    "Catalog",
    "ContentEntry",
    "parse_entry",
    "dump_entry",
    "ParseError",
    "SerializeError",
    "TipbookError",
]
