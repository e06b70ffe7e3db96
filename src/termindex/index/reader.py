"""Read-only access to a persisted term index.

The reader loads the whole index file at construction. Loading is
all-or-nothing: a missing or malformed file is logged and leaves the reader
empty, which callers should treat as an unusable index (``is_usable``).
"""

from __future__ import annotations

import logging
from pathlib import Path

from termindex.index.posting import Posting
from termindex.index.store import IndexFormatError, IndexStore


logger = logging.getLogger(__name__)


class QueryError(LookupError):
    """Raised when a query cannot be answered."""


class UnknownTermError(QueryError):
    """Raised when a conjunctive query names a term missing from the index."""

    def __init__(self, term: str) -> None:
        super().__init__(f"Unknown term {term!r}")
        self.term = term


class IndexReader:
    """Loads an index written by ``IndexWriter`` and answers queries."""

    def __init__(self, index_dir: str | Path) -> None:
        self.store = IndexStore(index_dir)
        self._index: dict[str, Posting] | None = {}
        self._load()

    def _load(self) -> None:
        try:
            loaded = self.store.read()
        except FileNotFoundError:
            logger.error("Index file not found: %s", self.store.path)
            return
        except IndexFormatError as exc:
            logger.error("Malformed index file: %s", exc)
            return
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Failed to read index file %s: %s", self.store.path, exc)
            return
        self._index = loaded
        logger.debug("Loaded %d terms from %s", len(loaded), self.store.path)

    @property
    def is_usable(self) -> bool:
        return bool(self._index)

    def total_key_terms(self) -> int:
        """Number of distinct terms, or -1 when no map is loaded."""
        return len(self._index) if self._index is not None else -1

    def total_value_terms(self) -> int:
        """Number of distinct document ids across all postings."""
        if self._index is None:
            return -1
        doc_ids: set[str] = set()
        for posting in self._index.values():
            doc_ids.update(posting.per_document_frequency)
        return len(doc_ids)

    def get_posting(self, term: str) -> Posting | None:
        if not self._index:
            return None
        return self._index.get(term)

    def get_postings(self, term: str) -> dict[str, int] | None:
        """Return doc id -> occurrences for an analyzed ``term``, or None if unknown."""
        posting = self.get_posting(term)
        if posting is None:
            return None
        return dict(posting.per_document_frequency)

    def get_top_k(self, k: int) -> list[str] | None:
        """Return up to ``k`` terms by total occurrences, most frequent first.

        Ties are broken by term so equal-frequency terms are all kept and the
        order is stable. Returns None for ``k <= 0`` or an empty index.
        """
        if k <= 0 or not self._index:
            return None
        ranked = sorted(self._index.items(), key=lambda item: (-item[1].total_term_frequency, item[0]))
        return [term for term, _ in ranked[:k]]

    def query(self, *terms: str) -> dict[str, int] | None:
        """Boolean AND over analyzed ``terms``.

        Returns doc id -> summed occurrences of all terms for every document
        containing each of them, or None when no terms are given or no
        document matches. Raises ``UnknownTermError`` if any term is missing.
        """
        if not terms:
            return None

        postings: list[dict[str, int]] = []
        for term in terms:
            posting = self.get_posting(term)
            if posting is None:
                raise UnknownTermError(term)
            postings.append(posting.per_document_frequency)

        common = set(postings[0])
        for doc_map in postings[1:]:
            common.intersection_update(doc_map)
        if not common:
            return None

        return {doc_id: sum(doc_map[doc_id] for doc_map in postings) for doc_id in sorted(common)}
