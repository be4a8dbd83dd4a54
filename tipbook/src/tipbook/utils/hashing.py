"""Stable checksums for corpus files.

What:
  Provide the namespaced SHA-256 helper used to fingerprint loaded entries.

Why:
  The formatter and export output carry checksums so a reviewer can tell
  whether a file changed between two runs without diffing the text.

How:
  Wrap :mod:`hashlib` with a consistent ``sha256:`` prefix.

Interfaces:
  :func:`checksum`, :func:`text_checksum`.
"""
from __future__ import annotations

import hashlib


def checksum(data: bytes) -> str:
    """Compute a namespaced SHA-256 digest for ``data``.

    The prefix signals which hash algorithm was used, enabling future upgrades
    without ambiguity.
    """

    return f"sha256:{hashlib.sha256(data).hexdigest()}"


def text_checksum(text: str) -> str:
    """Checksum the UTF-8 encoding of ``text``."""

    return checksum(text.encode("utf-8"))
