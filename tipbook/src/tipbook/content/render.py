"""Human-facing renderings of entries (plain text, Markdown, export mappings)."""
from __future__ import annotations

import textwrap
from typing import Any, Dict, List

from .entry import ContentEntry


def _metadata_lines(entry: ContentEntry) -> List[str]:
    lines: List[str] = []
    if entry.author:
        lines.append(f"Author: {entry.author}")
    if entry.date:
        lines.append(f"Date:   {entry.date.isoformat()}")
    if entry.tags:
        lines.append(f"Tags:   {', '.join(sorted(entry.tags))}")
    if entry.docs:
        lines.append(f"Docs:   {entry.docs}")
    return lines


def render_text(entry: ContentEntry, width: int = 80) -> str:
    """Render ``entry`` for terminal display.

    The title is underlined, metadata follows, then the wrapped summary and the
    body. The body is printed verbatim since it usually holds code samples.
    """

    parts = [entry.name, "=" * min(len(entry.name), width)]
    meta = _metadata_lines(entry)
    if meta:
        parts.append("")
        parts.extend(meta)
    if entry.tldr:
        parts.append("")
        parts.extend(textwrap.wrap(f"TL;DR: {entry.tldr}", width=width))
    parts.append("")
    parts.append(entry.content)
    return "\n".join(parts) + "\n"


def render_markdown(entry: ContentEntry) -> str:
    """Render ``entry`` as a standalone Markdown article."""

    parts = [f"# {entry.name}", ""]
    if entry.tldr:
        parts.extend([f"> {entry.tldr}", ""])
    meta = []
    if entry.author:
        meta.append(f"- **Author:** {entry.author}")
    if entry.date:
        meta.append(f"- **Date:** {entry.date.isoformat()}")
    if entry.tags:
        meta.append(f"- **Tags:** {', '.join(f'`{tag}`' for tag in sorted(entry.tags))}")
    if entry.docs:
        meta.append(f"- **Docs:** <{entry.docs}>")
    if meta:
        parts.extend(meta)
        parts.append("")
    parts.append(entry.content)
    return "\n".join(parts) + "\n"


def entry_to_mapping(entry: ContentEntry) -> Dict[str, Any]:
    """Return a JSON/YAML-safe mapping with every field, tags sorted."""

    payload = entry.model_dump(mode="json")
    payload["tags"] = sorted(entry.tags)
    return payload
