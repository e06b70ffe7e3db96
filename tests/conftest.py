"""Shared test fixtures and configuration."""

from collections.abc import Callable
from pathlib import Path

import pytest

from termindex.document import Document, FieldName
from termindex.index.posting import Posting
from termindex.index.store import IndexStore


# Test environment that overrides every configurable value
TEST_ENV = {
    "TERMINDEX_INDEX_DIR": "./index",
    "TERMINDEX_LOG_LEVEL": "info",
    "TERMINDEX_LOG_JSON": "false",
    "TERMINDEX_STOPWORDS": "",
    "TERMINDEX_LOGGER_LEVELS": "{}",
}


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Pin config environment variables so local settings never leak into tests."""
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)


@pytest.fixture
def make_document() -> Callable[..., Document]:
    """Build a Document from a file id and FIELD=value keyword arguments."""

    def _make(fileid: str | None, **fields: str | list[str]) -> Document:
        document = Document()
        if fileid is not None:
            document.set_field(FieldName.FILEID, fileid)
        for name, value in fields.items():
            values = [value] if isinstance(value, str) else value
            document.set_field(FieldName(name.upper()), *values)
        return document

    return _make


@pytest.fixture
def pet_index_dir(tmp_path: Path) -> Path:
    """Index root holding cat/dog/bird postings written through the store."""
    index_dir = tmp_path / "index"
    IndexStore(index_dir).write(
        {
            "cat": Posting({"d1": 2, "d2": 1}, total_term_frequency=3, total_document_frequency=2),
            "dog": Posting({"d1": 1, "d3": 5}, total_term_frequency=6, total_document_frequency=2),
            "bird": Posting({"d4": 3}, total_term_frequency=3, total_document_frequency=1),
        }
    )
    return index_dir
