"""In-memory index over a list of entries.

What:
  Answer the discovery questions the CLI asks: look an entry up by name,
  filter by tags, search text, count tags, and spot duplicate names.

Why:
  Entries only relate to each other through shared tags and (ideally unique)
  names. A small index keeps those lookups in one tested place instead of
  scattering list comprehensions across commands.

How:
  Keep the entries in input order and build two dictionaries on construction:
  case-folded name to entries, and tag to entries. Queries return lists in
  input order so output stays stable.

Interfaces:
  :class:`Catalog`.

Invariants:
  - Iteration order equals construction order.
  - Tag queries go through :func:`normalise_tags`, so ``"Fixtures"`` finds
    entries tagged ``fixtures``.
"""
from __future__ import annotations

from collections import Counter, defaultdict
from typing import Dict, Iterable, Iterator, List, Sequence, Tuple

from .content.entry import ContentEntry, normalise_tags


class Catalog:
    """Read-only index over entries, built once from an iterable."""

    def __init__(self, entries: Iterable[ContentEntry]):
        self._entries: List[ContentEntry] = list(entries)
        self._by_name: Dict[str, List[ContentEntry]] = defaultdict(list)
        self._by_tag: Dict[str, List[ContentEntry]] = defaultdict(list)
        for entry in self._entries:
            self._by_name[entry.name.casefold()].append(entry)
            for tag in entry.tags:
                self._by_tag[tag].append(entry)

    def __iter__(self) -> Iterator[ContentEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def by_name(self, name: str) -> ContentEntry:
        """Return the first entry named ``name`` (case-insensitive).

        Raises:
          KeyError: When no entry carries that name.
        """

        matches = self._by_name.get(name.strip().casefold())
        if not matches:
            raise KeyError(name)
        return matches[0]

    def with_tag(self, tag: str) -> List[ContentEntry]:
        """Entries carrying ``tag``, in input order."""

        normalised = normalise_tags(tag)
        if len(normalised) != 1:
            return []
        return list(self._by_tag.get(next(iter(normalised)), []))

    def with_all_tags(self, tags: Iterable[str]) -> List[ContentEntry]:
        """Entries carrying every tag in ``tags``; all entries when ``tags`` is empty."""

        wanted = normalise_tags(list(tags))
        return [entry for entry in self._entries if wanted <= entry.tags]

    def search(self, text: str) -> List[ContentEntry]:
        """Case-insensitive substring search over name, tldr, and content."""

        needle = text.casefold()
        if not needle:
            return list(self._entries)
        return [
            entry
            for entry in self._entries
            if needle in entry.name.casefold()
            or needle in (entry.tldr or "").casefold()
            or needle in entry.content.casefold()
        ]

    def tag_counts(self) -> List[Tuple[str, int]]:
        """Tags with their entry counts, most used first, ties by tag name."""

        counts = Counter({tag: len(entries) for tag, entries in self._by_tag.items()})
        return sorted(counts.items(), key=lambda item: (-item[1], item[0]))

    def duplicates(self) -> Dict[str, Sequence[ContentEntry]]:
        """Names used by more than one entry, keyed by the first spelling."""

        return {
            entries[0].name: tuple(entries)
            for entries in self._by_name.values()
            if len(entries) > 1
        }
