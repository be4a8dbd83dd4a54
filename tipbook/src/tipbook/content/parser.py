"""Split entry text into fields and validate them into :class:`ContentEntry`.

What:
  Read the plain-text entry format: field blocks separated by ``---`` lines,
  each block opening with a bare ``label:`` line whose value runs until the
  next delimiter.

Why:
  Entries are hand-edited files. The parser is the single gate between that
  text and the typed model, so every malformed shape must surface as a
  :class:`~tipbook.errors.ParseError` that names the offending section rather
  than a generic exception deep inside validation.

How:
  Walk the lines once, cutting blocks at delimiter lines while remembering
  where each block starts. The first non-blank line of a block must match the
  label pattern; the remainder of the block is the value. Field-level rules
  (required, single-line, dates, URLs, tags) are delegated to
  :meth:`ContentEntry.from_fields` and translated back into located parse
  errors.

Interfaces:
  :func:`parse_fields`, :func:`parse_entry`, :func:`is_delimiter`.

Invariants:
  - Only the first ``label:`` line of a block is structural; later lines are
    value text.
  - Field order in the text carries no meaning.
  - Missing ``tags`` yields an empty tag set, never an error.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..errors import EntryValidationError, ParseError
from .entry import BLOCK_DELIMITER, FIELD_NAMES, ContentEntry, clean_block


_LABEL = re.compile(r"^(?P<label>[A-Za-z][A-Za-z0-9_-]*)\s*:(?P<rest>.*)$")


def is_delimiter(line: str) -> bool:
    """Return ``True`` when ``line`` separates two field blocks."""

    return line.rstrip() == BLOCK_DELIMITER


@dataclass
class _Block:
    index: int
    start: int
    lines: List[str] = field(default_factory=list)


def _split_blocks(text: str) -> List[_Block]:
    blocks: List[_Block] = []
    current: Optional[_Block] = None
    for number, line in enumerate(text.splitlines(), start=1):
        if is_delimiter(line):
            current = None
            continue
        if current is None:
            if not line.strip():
                continue
            current = _Block(index=len(blocks) + 1, start=number)
            blocks.append(current)
        current.lines.append(line)
    return blocks


def _read_fields(text: str, source: Optional[str]) -> Tuple[Dict[str, str], Dict[str, int]]:
    fields: Dict[str, str] = {}
    positions: Dict[str, int] = {}
    for block in _split_blocks(text.lstrip("\ufeff")):
        match = _LABEL.match(block.lines[0])
        if match is None:
            raise ParseError(
                f"expected '<label>:' but found {block.lines[0].strip()[:40]!r}",
                source=source,
                section=block.index,
                line=block.start,
            )
        label = match.group("label").lower()
        if label not in FIELD_NAMES:
            raise ParseError(f"unknown field: {label}", source=source, section=label, line=block.start)
        if label in fields:
            raise ParseError(f"duplicate field: {label}", source=source, section=label, line=block.start)
        rest = block.lines[1:]
        if label != "content":
            for offset, line in enumerate(rest, start=1):
                inner = _LABEL.match(line)
                if inner is not None and inner.group("label").lower() in FIELD_NAMES:
                    raise ParseError(
                        f"missing '{BLOCK_DELIMITER}' delimiter before '{inner.group('label')}:'",
                        source=source,
                        section=label,
                        line=block.start + offset,
                    )
        inline = match.group("rest").strip()
        value_lines = ([inline] if inline else []) + rest
        fields[label] = clean_block("\n".join(value_lines))
        positions[label] = block.start
    return fields, positions


def parse_fields(text: str, source: Optional[str] = None) -> Dict[str, str]:
    """Split raw entry text into a mapping of field name to value.

    What:
      Structural parse only: labels, delimiters, unknown and duplicate fields.

    Why:
      Tools such as the formatter need the raw field values before any value
      level validation runs.

    How:
      Delegates to the block reader and discards line positions.

    Args:
      text: Entry text.
      source: Name used in error messages (file path or ``<string>``).

    Returns:
      Field values in the order they appear in ``text``.

    Raises:
      ParseError: When a block has no label, or a label is unknown or repeated.
    """

    fields, _ = _read_fields(text, source)
    return fields


def parse_entry(text: str, source: Optional[str] = None) -> ContentEntry:
    """Parse and validate entry text into a :class:`ContentEntry`.

    What:
      Full parse: structure first, then required fields and value rules.

    Why:
      Loader and CLI code want a single call that either yields a trustworthy
      entry or a located error.

    How:
      Read fields with :func:`_read_fields`, hand them to
      :meth:`ContentEntry.from_fields`, and convert any
      :class:`EntryValidationError` into :class:`ParseError` with the line of
      the failing field.

    Args:
      text: Entry text.
      source: Name used in error messages.

    Returns:
      The validated entry.

    Raises:
      ParseError: On any structural or validation failure.
    """

    fields, positions = _read_fields(text, source)
    try:
        return ContentEntry.from_fields(fields)
    except EntryValidationError as exc:
        raise ParseError(
            str(exc),
            source=source,
            section=exc.field,
            line=positions.get(exc.field or ""),
        ) from exc
