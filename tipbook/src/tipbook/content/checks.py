"""Content integrity checks for entries and whole corpora.

What:
  Inspect validated entries for problems that the model itself tolerates:
  duplicate names, untagged entries, missing summaries, insecure or stale
  metadata.

Why:
  The model enforces what must hold (required fields, single-line titles);
  editorial conventions such as unique names are recommended only. Reporting
  them as warnings keeps the corpus tidy without rejecting a file outright.

How:
  Each check returns :class:`Issue` records with a severity. Corpus level
  checks combine per-entry issues with cross-entry ones. Callers decide the
  exit policy (for example failing on warnings in CI).

Interfaces:
  :class:`Issue`, :func:`check_entry`, :func:`check_corpus`, :func:`has_errors`.
"""
from __future__ import annotations

import datetime
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
from urllib.parse import urlsplit

from .entry import REQUIRED_FIELDS, ContentEntry


ERROR = "error"
WARNING = "warning"


@dataclass(frozen=True)
class Issue:
    """A single finding produced by an integrity check."""

    severity: str
    code: str
    message: str
    name: Optional[str] = None
    source: Optional[str] = None

    def format(self) -> str:
        where = self.source or self.name or "<corpus>"
        return f"{where}: {self.severity}: {self.code}: {self.message}"


def check_entry(
    entry: ContentEntry,
    *,
    source: Optional[str] = None,
    https_only_docs: bool = True,
    today: Optional[datetime.date] = None,
) -> List[Issue]:
    """Return integrity issues for one entry.

    Args:
      entry: Entry to inspect.
      source: File the entry came from, used in issue locations.
      https_only_docs: Warn when ``docs`` uses plain ``http``.
      today: Reference date for the future-date check (defaults to today).

    Returns:
      Issues in a stable order.
    """

    issues: List[Issue] = []

    def add(severity: str, code: str, message: str) -> None:
        issues.append(Issue(severity, code, message, name=entry.name, source=source))

    for field in REQUIRED_FIELDS:
        if not (getattr(entry, field) or "").strip():
            add(ERROR, "required-field", f"required field is empty: {field}")
    if not entry.tags:
        add(WARNING, "no-tags", "entry has no tags")
    if entry.tldr is None:
        add(WARNING, "no-tldr", "entry has no tldr summary")
    if https_only_docs and entry.docs is not None and urlsplit(entry.docs).scheme == "http":
        add(WARNING, "insecure-docs", f"docs link is not https: {entry.docs}")
    reference = today or datetime.date.today()
    if entry.date is not None and entry.date > reference:
        add(WARNING, "future-date", f"date {entry.date.isoformat()} is in the future")
    return issues


def check_corpus(
    entries: Iterable[Tuple[ContentEntry, Optional[str]]],
    *,
    https_only_docs: bool = True,
    today: Optional[datetime.date] = None,
) -> List[Issue]:
    """Run per-entry checks and report duplicate names across the corpus.

    Names are compared case-insensitively. Every occurrence after the first is
    reported, pointing back at the file that used the name first.
    """

    issues: List[Issue] = []
    seen: Dict[str, List[Tuple[ContentEntry, Optional[str]]]] = defaultdict(list)
    for entry, source in entries:
        issues.extend(check_entry(entry, source=source, https_only_docs=https_only_docs, today=today))
        seen[entry.name.casefold()].append((entry, source))
    for occurrences in seen.values():
        first_entry, first_source = occurrences[0]
        for entry, source in occurrences[1:]:
            issues.append(
                Issue(
                    WARNING,
                    "duplicate-name",
                    f"name {entry.name!r} already used by {first_source or first_entry.name}",
                    name=entry.name,
                    source=source,
                )
            )
    return issues


def has_errors(issues: Sequence[Issue], *, warnings_are_errors: bool = False) -> bool:
    """Return ``True`` when ``issues`` should fail a check run."""

    failing = {ERROR, WARNING} if warnings_are_errors else {ERROR}
    return any(issue.severity in failing for issue in issues)
