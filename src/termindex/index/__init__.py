"""Term index engine.

- posting: per-term statistics and their frequency ordering
- store: the ``indexFile.properties`` line codec and file access
- writer: builds the term map from documents and persists it
- reader: loads a persisted index and answers lookups, top-K and AND queries
"""

from termindex.index.posting import Posting
from termindex.index.reader import IndexReader, QueryError, UnknownTermError
from termindex.index.store import INDEX_FILENAME, IndexFormatError, IndexStore, decode_entry, encode_entry
from termindex.index.writer import IndexerError, IndexWriter, IndexWriterClosedError


__all__ = [
    "INDEX_FILENAME",
    "IndexFormatError",
    "IndexReader",
    "IndexStore",
    "IndexWriter",
    "IndexWriterClosedError",
    "IndexerError",
    "Posting",
    "QueryError",
    "UnknownTermError",
    "decode_entry",
    "encode_entry",
]
