"""Canonical text serialisation for :class:`ContentEntry`."""
from __future__ import annotations

from typing import List

from ..errors import SerializeError
from .entry import BLOCK_DELIMITER, ContentEntry
from .parser import is_delimiter


def dump_entry(entry: ContentEntry) -> str:
    """Render ``entry`` in the canonical delimited text form.

    What:
      Emit the fields in canonical order, short fields inline
      (``label: value``) and ``content`` as a block below its label, separated
      by ``---`` lines and terminated by a newline.

    Why:
      The formatter rewrites corpus files with this output, so it has to parse
      back into an identical entry and stay stable across runs.

    How:
      Use :meth:`ContentEntry.as_fields` for the textual values, refuse any
      content line that would read as a delimiter, and join the blocks.

    Args:
      entry: Entry to serialise.

    Returns:
      Entry text ending with a single newline.

    Raises:
      SerializeError: When ``content`` holds a ``---`` line.
    """

    blocks: List[str] = []
    for name, value in entry.as_fields().items():
        if name == "content":
            for number, line in enumerate(value.splitlines(), start=1):
                if is_delimiter(line):
                    raise SerializeError(
                        f"{entry.name!r}: content line {number} is a block delimiter ({BLOCK_DELIMITER!r})"
                    )
            blocks.append(f"{name}:\n{value}")
        else:
            blocks.append(f"{name}: {value}")
    return f"\n{BLOCK_DELIMITER}\n".join(blocks) + "\n"
