"""Expose the public utility surface for tipbook.

What:
  Re-export logging, checksum, and file-writing helpers that other packages
  may import without knowing the underlying module layout.

Interfaces:
  ``get_logger``, ``configure_logging``, ``JsonLogger``, ``checksum``,
  ``text_checksum``, ``atomic_write_text``.

Invariants & Safety:
  - The module only re-exports side-effect-free callables to keep import order
    predictable.
"""

from .files import atomic_write_text
from .hashing import checksum, text_checksum
from .logging import JsonLogger, configure_logging, get_logger

__all__ = [
    "JsonLogger",
    "get_logger",
    "configure_logging",
    "checksum",
    "text_checksum",
    "atomic_write_text",
]
