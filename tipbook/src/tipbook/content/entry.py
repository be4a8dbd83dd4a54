"""Pydantic model describing a single tip entry."""
from __future__ import annotations

import datetime
import re
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Union
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, ValidationError as _PydanticValidationError
from pydantic import field_validator

from ..errors import EntryValidationError


FIELD_ORDER = ("name", "author", "date", "docs", "tags", "tldr", "content")
FIELD_NAMES = frozenset(FIELD_ORDER)
REQUIRED_FIELDS = ("name", "content")
BLOCK_DELIMITER = "---"

_SLUG_STRIP = re.compile(r"[^a-z0-9]+")
_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


def clean_block(text: str) -> str:
    """Drop surrounding blank lines and trailing whitespace, keep inner layout."""

    lines = [line.rstrip() for line in text.splitlines()]
    while lines and not lines[0]:
        lines.pop(0)
    while lines and not lines[-1]:
        lines.pop()
    return "\n".join(lines)


def normalise_tags(values: Union[str, Iterable[str], None]) -> FrozenSet[str]:
    """Return the lower-cased, de-duplicated tag set for ``values``.

    What:
      Accepts either the comma-separated text form or an iterable of tags and
      produces the canonical set.

    Why:
      Tags drive discovery; ``Fixtures`` and ``fixtures `` must be the same
      label. Items holding commas are split too, so every tag set survives a
      trip through the text form unchanged.

    How:
      Split on commas, strip whitespace, lower-case, and drop empty pieces.

    Args:
      values: Comma-separated string, iterable of strings, or ``None``.

    Returns:
      Frozen set of normalised tags (empty when ``values`` is ``None``).
    """

    if values is None:
        return frozenset()
    items = [values] if isinstance(values, str) else list(values)
    tags = set()
    for item in items:
        if not isinstance(item, str):
            raise ValueError(f"tag must be a string, got {type(item).__name__}")
        for piece in item.split(","):
            tag = " ".join(piece.split()).lower()
            if tag:
                tags.add(tag)
    return frozenset(tags)


def _single_line(value: str, name: str) -> str:
    value = value.strip()
    # the parser splits with str.splitlines, not only on "\n"
    if len(value.splitlines()) > 1:
        raise ValueError(f"{name} must be a single line")
    return value


class ContentEntry(BaseModel):
    """One published tip: immutable metadata plus a free-form body."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    author: Optional[str] = None
    content: str
    date: Optional[datetime.date] = None
    docs: Optional[str] = None
    tags: FrozenSet[str] = Field(default_factory=frozenset)
    tldr: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def _validate_name(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("name must be a string")
        value = _single_line(value, "name")
        if not value:
            raise ValueError("name must not be empty")
        return value

    @field_validator("content", mode="before")
    @classmethod
    def _validate_content(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("content must be a string")
        value = clean_block(value)
        if not value:
            raise ValueError("content must not be empty")
        return value

    @field_validator("author", "tldr", mode="before")
    @classmethod
    def _validate_optional_line(cls, value: Any, info: Any) -> Optional[str]:
        if value is None:
            return None
        if not isinstance(value, str):
            raise ValueError(f"{info.field_name} must be a string")
        value = _single_line(value, info.field_name)
        return value or None

    @field_validator("date", mode="before")
    @classmethod
    def _validate_date(cls, value: Any) -> Optional[datetime.date]:
        if isinstance(value, datetime.datetime):
            return value.date()
        if value is None or isinstance(value, datetime.date):
            return value
        if isinstance(value, str):
            text = value.strip()
            if not text:
                return None
            if _ISO_DATE.fullmatch(text) is None:
                raise ValueError(f"date must use YYYY-MM-DD, got {text!r}")
            try:
                return datetime.date.fromisoformat(text)
            except ValueError as exc:
                raise ValueError(f"date must use YYYY-MM-DD, got {text!r}") from exc
        raise ValueError("date must be a date or an ISO string")

    @field_validator("docs", mode="before")
    @classmethod
    def _validate_docs(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        if not isinstance(value, str):
            raise ValueError("docs must be a string")
        value = value.strip()
        if not value:
            return None
        parts = urlsplit(value)
        if parts.scheme not in ("http", "https") or not parts.netloc or any(ch.isspace() for ch in value):
            raise ValueError(f"docs must be an absolute http(s) URL, got {value!r}")
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _validate_tags(cls, value: Any) -> FrozenSet[str]:
        return normalise_tags(value)

    @classmethod
    def from_fields(cls, fields: Mapping[str, Any]) -> "ContentEntry":
        """Build an entry from a field mapping, raising :class:`EntryValidationError`.

        What:
          Validate a mapping such as the one produced by
          :func:`tipbook.content.parser.parse_fields`.

        Why:
          Callers outside the model should not have to understand pydantic's
          error structure; they need the first failing field and a readable
          message.

        How:
          Check required fields first so the message reads
          ``missing required field: <name>``, then delegate to
          :meth:`model_validate` and translate the first pydantic error.

        Args:
          fields: Field name to value mapping.

        Returns:
          A validated, immutable :class:`ContentEntry`.

        Raises:
          EntryValidationError: For unknown, missing, or invalid fields.
        """

        unknown = sorted(set(fields) - FIELD_NAMES)
        if unknown:
            raise EntryValidationError(f"unknown field: {unknown[0]}", field=unknown[0])
        for required in REQUIRED_FIELDS:
            if required not in fields:
                raise EntryValidationError(f"missing required field: {required}", field=required)
        try:
            return cls.model_validate(dict(fields))
        except _PydanticValidationError as exc:
            first = exc.errors()[0]
            field = str(first["loc"][0]) if first.get("loc") else None
            message = first.get("msg", str(exc))
            # pydantic prefixes ValueError messages raised by validators
            message = message.removeprefix("Value error, ")
            raise EntryValidationError(message, field=field) from exc

    @property
    def slug(self) -> str:
        """File-name friendly identifier derived from ``name``."""

        slug = _SLUG_STRIP.sub("-", self.name.lower()).strip("-")
        return slug or "entry"

    def as_fields(self) -> Dict[str, str]:
        """Return the textual value of every present field in canonical order."""

        values: Dict[str, str] = {}
        for name in FIELD_ORDER:
            value = getattr(self, name)
            if value is None or value == frozenset():
                continue
            if name == "tags":
                values[name] = ", ".join(sorted(value))
            elif name == "date":
                values[name] = value.isoformat()
            else:
                values[name] = value
        return values
