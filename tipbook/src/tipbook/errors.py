"""Exception hierarchy shared by every tipbook package.

What:
  Define the base :class:`TipbookError` and the content-level failures raised
  while parsing, validating, and serialising tip entries.

Why:
  The CLI converts any tipbook failure into a clean exit code and message.
  Grouping errors under one base keeps that mapping in a single ``except``
  clause while still letting callers react to the specific category.

How:
  Plain exception classes. :class:`ParseError` carries the location of the
  offending block so messages point authors at the exact file, field, and
  line. Loader errors live next to the loader in :mod:`tipbook.config.loader`
  and derive from :class:`TipbookError` as well.

Interfaces:
  :class:`TipbookError`, :class:`ParseError`, :class:`SerializeError`,
  :class:`EntryValidationError`.
"""
from __future__ import annotations

from typing import Optional, Union


class TipbookError(Exception):
    """Base class for all errors raised by tipbook."""


class EntryValidationError(TipbookError, ValueError):
    """Raised when field values do not form a valid entry.

    ``field`` names the first offending field when it is known.
    """

    def __init__(self, message: str, *, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class ParseError(TipbookError):
    """Raised when entry text cannot be split into valid fields.

    What:
      Signal malformed entry text: a block without a label, an unknown or
      duplicated field, a missing required field, or an invalid value.

    Why:
      Authors edit entries by hand. A message that names the file, the section
      (field name or block number), and the line lets them fix the text without
      guessing.

    How:
      Store the location attributes and render them as a ``source:line``
      prefix followed by the section in brackets.

    Attributes:
      message: Bare description of the problem.
      source: File name or ``<string>`` for in-memory text.
      section: Field name, or ``block N`` when no label could be read.
      line: 1-based line number of the offending block, when known.
    """

    def __init__(
        self,
        message: str,
        *,
        source: Optional[str] = None,
        section: Optional[Union[str, int]] = None,
        line: Optional[int] = None,
    ) -> None:
        self.message = message
        self.source = source or "<string>"
        self.section = f"block {section}" if isinstance(section, int) else section
        self.line = line
        super().__init__(self._format())

    def _format(self) -> str:
        location = self.source if self.line is None else f"{self.source}:{self.line}"
        if self.section:
            return f"{location}: [{self.section}] {self.message}"
        return f"{location}: {self.message}"


class SerializeError(TipbookError):
    """Raised when an entry cannot be written in a form that parses back."""
