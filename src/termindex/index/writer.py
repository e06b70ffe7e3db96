"""Index writer: folds analyzed document fields into postings and persists them.

The writer owns its term -> Posting map for one build session. Documents are
processed field by field; a value that fails to tokenize is logged and
dropped without aborting the document. ``close()`` writes the map through
``IndexStore`` and ends the session.
"""

from __future__ import annotations

import logging
from pathlib import Path
from types import TracebackType

from termindex.analysis.analyzers import AnalyzerFactory, analyze
from termindex.analysis.tokenizer import Tokenizer, TokenizerError
from termindex.analysis.tokens import TokenStream
from termindex.document import FieldName, FieldSource
from termindex.index.posting import Posting
from termindex.index.store import IndexStore, is_encodable_doc_id


logger = logging.getLogger(__name__)

INDEXED_FIELDS: tuple[FieldName, ...] = (
    FieldName.AUTHOR,
    FieldName.AUTHORORG,
    FieldName.CATEGORY,
    FieldName.CONTENT,
    FieldName.NEWSDATE,
    FieldName.PLACE,
)


class IndexerError(Exception):
    """Raised when a document cannot be indexed or the index cannot be written."""


class IndexWriterClosedError(RuntimeError):
    """Raised when a closed writer is used again."""


class IndexWriter:
    """Builds the term index for one session and writes it on ``close()``."""

    def __init__(
        self,
        index_dir: str | Path,
        *,
        tokenizer: Tokenizer | None = None,
        analyzer_factory: AnalyzerFactory | None = None,
    ) -> None:
        self.store = IndexStore(index_dir)
        self.tokenizer = tokenizer or Tokenizer()
        self.analyzer_factory = analyzer_factory or AnalyzerFactory()
        self._index: dict[str, Posting] = {}
        self._doc_ids: set[str] = set()
        self._closed = False

    @property
    def index_dir(self) -> Path:
        return self.store.root

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def term_count(self) -> int:
        return len(self._index)

    @property
    def document_count(self) -> int:
        return len(self._doc_ids)

    def add_document(self, document: FieldSource) -> str:
        """Index every indexable field of ``document`` and return its id."""
        self._ensure_open()
        doc_id = self._document_id(document)

        title = document.get_field(FieldName.TITLE)
        if title:
            self._add_title(title[0], doc_id)

        for field_name in INDEXED_FIELDS:
            values = document.get_field(field_name)
            if not values:
                continue
            for value in values:
                try:
                    stream = self.tokenizer.consume(value)
                except TokenizerError as exc:
                    logger.warning("Dropping %s value of document %s: %s", field_name.value, doc_id, exc)
                    continue
                analyzer = self.analyzer_factory.analyzer_for_field(field_name, stream)
                self._add_stream(analyze(analyzer), doc_id)

        self._doc_ids.add(doc_id)
        return doc_id

    def close(self) -> Path:
        """Write the index to disk and end the build session."""
        self._ensure_open()
        self._closed = True
        try:
            written, skipped = self.store.write(self._index)
        except OSError as exc:
            msg = f"Failed to write index to {self.store.path}: {exc}"
            raise IndexerError(msg) from exc

        if skipped:
            logger.warning("Skipped %d unencodable terms while writing %s", len(skipped), self.store.path)
        logger.info(
            "Wrote %d terms from %d documents to %s",
            written,
            len(self._doc_ids),
            self.store.path,
        )
        return self.store.path

    def __enter__(self) -> IndexWriter:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc_type is None and not self._closed:
            self.close()

    def _add_title(self, title: str, doc_id: str) -> None:
        try:
            stream = self.tokenizer.consume(title)
        except TokenizerError as exc:
            logger.warning("Dropping TITLE of document %s: %s", doc_id, exc)
            return
        for token in stream:
            token.mark_as_title_word()
        stream.reset()
        analyzer = self.analyzer_factory.analyzer_for_field(FieldName.TITLE, stream)
        self._add_stream(analyze(analyzer), doc_id)

    def _add_stream(self, stream: TokenStream, doc_id: str) -> None:
        for token in stream:
            term = str(token)
            posting = self._index.get(term)
            if posting is None:
                posting = self._index[term] = Posting()
            posting.record(doc_id)

    def _document_id(self, document: FieldSource) -> str:
        values = document.get_field(FieldName.FILEID)
        if not values:
            raise IndexerError("Document has no FILEID")
        doc_id = values[0]
        if not is_encodable_doc_id(doc_id):
            msg = f"Document id {doc_id!r} is empty or contains a reserved delimiter"
            raise IndexerError(msg)
        return doc_id

    def _ensure_open(self) -> None:
        if self._closed:
            raise IndexWriterClosedError("IndexWriter is closed")
