"""Crash-safe file replacement for corpus files.

What:
  Provide :func:`atomic_write_text`, used whenever an existing entry file is
  rewritten in place.

Why:
  ``tipbook fmt`` rewrites many files in one run. Opening a file with ``"w"``
  truncates it before the new text is written, so an encoding error, a full
  disk, or an interrupted process would leave the tip half written.

How:
  Write the text to a temporary file in the target directory, copy the
  original permission bits, and rename it over the destination. The rename
  is atomic on POSIX filesystems. The temporary file is removed when anything
  fails before the rename.

Interfaces:
  :func:`atomic_write_text`.
"""
from __future__ import annotations

import pathlib
import stat
import tempfile
from typing import Union


def atomic_write_text(path: Union[str, pathlib.Path], text: str, *, encoding: str = "utf-8") -> None:
    """Replace ``path`` with ``text`` without exposing a partial file.

    Args:
      path: Destination file. Its parent directory must exist.
      text: Full new content.
      encoding: Text encoding used for the write.

    Raises:
      OSError: When the temporary file cannot be written or renamed.
      UnicodeEncodeError: When ``text`` cannot be encoded with ``encoding``.
    """

    path = pathlib.Path(path)
    handle = tempfile.NamedTemporaryFile(
        "w",
        encoding=encoding,
        dir=str(path.parent),
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
    )
    temp_path = pathlib.Path(handle.name)
    try:
        with handle:
            handle.write(text)
        if path.exists():
            temp_path.chmod(stat.S_IMODE(path.stat().st_mode))
        temp_path.replace(path)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise
