"""Tip entry model, text format, integrity checks, and renderings.

What:
  Group everything that operates on a single entry or a list of entries
  without touching the filesystem.

Why:
  Keeping the text format and model free of IO lets the loader, the CLI, and
  tests share one implementation and exercise it on in-memory strings.

Interfaces:
  - ContentEntry / normalise_tags: The immutable entry model.
  - parse_entry / parse_fields: Text to model.
  - dump_entry: Model to canonical text.
  - check_entry / check_corpus / Issue: Integrity checks.
  - render_text / render_markdown / entry_to_mapping: Display and export.
"""

from .checks import Issue, check_corpus, check_entry, has_errors
from .entry import FIELD_ORDER, REQUIRED_FIELDS, ContentEntry, normalise_tags
from .parser import parse_entry, parse_fields
from .render import entry_to_mapping, render_markdown, render_text
from .serializer import dump_entry

__all__ = [
    "ContentEntry",
    "FIELD_ORDER",
    "REQUIRED_FIELDS",
    "normalise_tags",
    "parse_entry",
    "parse_fields",
    "dump_entry",
    "Issue",
    "check_entry",
    "check_corpus",
    "has_errors",
    "render_text",
    "render_markdown",
    "entry_to_mapping",
]
