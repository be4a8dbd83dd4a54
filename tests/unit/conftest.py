"""Pytest fixtures for unit tests working on in-memory entries.

What:
  Expose canned entry text and a factory for :class:`ContentEntry` objects.

Why:
  Most unit tests need a valid entry and differ only in one or two fields.
  A factory with sensible defaults keeps each test focused on the field it
  exercises.

Interfaces:
  :func:`entry_text` and :func:`make_entry` (pytest fixtures).
"""

import datetime

import pytest

from tipbook.content.entry import ContentEntry


ENTRY_TEXT = """\
name: Fixtures as factories
---
author: Priya Raman
---
date: 2024-05-02
---
docs: https://docs.pytest.org/en/stable/how-to/fixtures.html
---
tags: Fixtures, patterns
---
tldr: Return a function from a fixture.
---
content:
A fixture returns one value per test.

    @pytest.fixture
    def make_user():
        ...
"""


@pytest.fixture
def entry_text() -> str:
    """Valid entry text using every field."""

    return ENTRY_TEXT


@pytest.fixture
def make_entry():
    """Return a factory building entries with overridable defaults."""

    def _make(**overrides) -> ContentEntry:
        fields = {
            "name": "Readable parametrize ids",
            "author": "Dana Whitfield",
            "date": datetime.date(2024, 6, 20),
            "docs": "https://docs.pytest.org/en/stable/how-to/parametrize.html",
            "tags": ["parametrize", "output"],
            "tldr": "Use pytest.param ids.",
            "content": "Give each case an explicit id.",
        }
        fields.update(overrides)
        return ContentEntry(**fields)

    return _make
