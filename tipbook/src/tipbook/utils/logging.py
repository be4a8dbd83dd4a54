"""tipbook logging helpers with deterministic JSON emission and payload trimming.

What:
  Offer a tiny facade over Python streams so every tipbook component can emit
  JSON log lines with consistent fields, a level threshold, and automatic
  removal of bulky text payloads.

Why:
  Corpus runs are often wired into CI where logs are grepped or parsed. A
  structured layout keeps parsing trivial, and dropping whole entry bodies
  keeps a single malformed file from flooding the output.

How:
  Provide a :class:`JsonLogger` dataclass that resolves its stream at write
  time (``stderr`` by default) and enforces uppercase severity levels.
  ``extra`` dictionaries are copied and trimmed via a recursive helper before
  being serialised with ``json.dump``. :func:`configure_logging` sets the
  process-wide threshold and mirrors it onto stdlib :mod:`logging`.

Interfaces:
  :class:`JsonLogger`, :func:`get_logger`, :func:`configure_logging`.

Invariants & Safety:
  - The emitted payload always includes an ISO8601 timestamp, severity, and
    component name so downstream tooling can index entries reliably.
  - Values stored under ``content`` or ``raw`` are replaced with an
    ``[omitted N chars]`` marker even inside nested dictionaries.
  - Streams are flushed after every write.
"""
from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional


LEVELS = {"DEBUG": 10, "INFO": 20, "WARN": 30, "WARNING": 30, "ERROR": 40}
BULKY_KEYS = frozenset({"content", "raw"})

_threshold = "WARNING"


@dataclass
class JsonLogger:
    """Structured JSON logger with payload trimming.

    What:
      Encapsulates the logic required to emit single-line JSON log entries that
      include timestamps, severity, a component tag, and optional supplemental
      fields.

    Why:
      Centralising structured logging avoids duplicating the trimming logic and
      guarantees a uniform schema for CI log scrapers and test assertions.

    How:
      Stores an optional destination stream, the component label, and an
      optional level override, then exposes :meth:`log` plus the usual
      per-level helpers.
    """

    stream: Optional[Any] = None
    component: str = "tipbook"
    level: Optional[str] = None

    def enabled_for(self, level: str) -> bool:
        """Return ``True`` when ``level`` passes the active threshold."""

        threshold = self.level or _threshold
        return LEVELS[level.upper()] >= LEVELS[threshold.upper()]

    def log(self, level: str, message: str, *, extra: Optional[Dict[str, Any]] = None) -> None:
        """Emit a structured JSON log entry.

        What:
          Serialises ``message`` and ``extra`` metadata to the configured
          stream using the log schema (``ts``, ``lvl``, ``msg``,
          ``component``).

        Why:
          All log entries should adhere to a predictable contract so tests and
          CI tooling can parse them without ad-hoc heuristics.

        How:
          Drops the entry when below the threshold, builds a dictionary with
          the core fields, merges a trimmed copy of ``extra``, writes a JSON
          payload, and flushes the stream.

        Args:
          level: Severity name (``"debug"``, ``"info"``, ``"warn"``, ``"error"``).
          message: Core log message.
          extra: Optional context dictionary that will be trimmed recursively.
        """

        if not self.enabled_for(level):
            return
        stream = self.stream if self.stream is not None else sys.stderr
        payload = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "lvl": level.upper(),
            "msg": message,
            "component": self.component,
        }
        if extra:
            payload.update(self._trim(extra))
        json.dump(payload, stream, separators=(",", ":"), default=str)
        stream.write("\n")
        stream.flush()

    def debug(self, message: str, **kwargs: Any) -> None:
        self.log("DEBUG", message, extra=kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """Log an informational message with structured context."""

        self.log("INFO", message, extra=kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log a warning message; emitted with the ``WARN`` level name."""

        self.log("WARN", message, extra=kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        """Log an error entry suitable for alerting."""

        self.log("ERROR", message, extra=kwargs)

    @staticmethod
    def _trim(data: Dict[str, Any]) -> Dict[str, Any]:
        """Replace bulky text values with a length marker, recursively.

        Args:
          data: Arbitrary metadata to sanitise.

        Returns:
          A copy of ``data`` with ``content``/``raw`` strings replaced.
        """

        result: Dict[str, Any] = {}
        for key, value in data.items():
            if key in BULKY_KEYS and isinstance(value, str):
                result[key] = f"[omitted {len(value)} chars]"
            elif isinstance(value, dict):
                result[key] = JsonLogger._trim(value)
            else:
                result[key] = value
        return result


def configure_logging(level: str) -> None:
    """Set the process-wide log threshold for JSON and stdlib loggers.

    What:
      Updates the default threshold used by every :class:`JsonLogger` without
      an explicit level and configures the root stdlib logger.

    Why:
      The runtime configuration carries a single ``logging.level``; both
      logging paths must agree on it.

    How:
      Validate ``level`` against :data:`LEVELS`, store it, and call
      :func:`logging.basicConfig` (forcing reconfiguration so repeated CLI
      invocations in one process pick up the new level).

    Args:
      level: ``DEBUG``, ``INFO``, ``WARNING`` or ``ERROR``.

    Raises:
      ValueError: For unknown level names.
    """

    global _threshold

    name = level.upper()
    if name not in LEVELS:
        raise ValueError(f"unknown log level: {level}")
    _threshold = name
    logging.basicConfig(
        level=LEVELS[name],
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        force=True,
    )


def get_logger(component: str) -> JsonLogger:
    """Construct a :class:`JsonLogger` for the requested component.

    Args:
      component: Logical subsystem name to include in log payloads.

    Returns:
      Configured :class:`JsonLogger` instance following the global threshold.
    """

    return JsonLogger(component=component)
