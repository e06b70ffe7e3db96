"""Document record consumed by the index writer.

A document exposes zero or more string values per named field. The writer
only reads fields through ``get_field`` so any object with the same method
can stand in for ``Document``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
import logging
from typing import Any, Protocol


logger = logging.getLogger(__name__)


class FieldName(str, Enum):
    """Names of the fields a document may carry."""

    TITLE = "TITLE"
    AUTHOR = "AUTHOR"
    AUTHORORG = "AUTHORORG"
    CATEGORY = "CATEGORY"
    CONTENT = "CONTENT"
    NEWSDATE = "NEWSDATE"
    PLACE = "PLACE"
    FILEID = "FILEID"


class FieldSource(Protocol):
    """Protocol implemented by document records."""

    def get_field(self, name: FieldName) -> list[str] | None:  # pragma: no cover - interface definition
        ...


class Document:
    """Mutable mapping of field name to string values."""

    def __init__(self) -> None:
        self._fields: dict[FieldName, list[str]] = {}

    def set_field(self, name: FieldName, *values: str) -> None:
        self._fields[FieldName(name)] = [str(value) for value in values]

    def get_field(self, name: FieldName) -> list[str] | None:
        """Return the field values, or None when the field has none."""
        values = self._fields.get(FieldName(name))
        if not values:
            return None
        return list(values)

    def __contains__(self, name: object) -> bool:
        try:
            return self.get_field(FieldName(name)) is not None
        except ValueError:
            return False

    def __repr__(self) -> str:
        doc_id = self.get_field(FieldName.FILEID)
        return f"Document(fileid={doc_id[0] if doc_id else None!r}, fields={sorted(f.value for f in self._fields)})"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Document:
        """Build a document from ``{"TITLE": "...", "CONTENT": [...]}`` style data.

        Keys are matched case-insensitively against ``FieldName``; unknown keys
        are ignored. Values may be a string or an iterable of strings.
        """
        document = cls()
        for key, value in data.items():
            try:
                name = FieldName(str(key).upper())
            except ValueError:
                logger.debug("Ignoring unknown document field %r", key)
                continue
            if value is None:
                continue
            document.set_field(name, *_as_values(value))
        return document


def _as_values(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, Iterable):
        return [str(item) for item in value if item is not None]
    return [str(value)]
