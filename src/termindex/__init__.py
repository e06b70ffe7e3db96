"""Term-level inverted index: build, persist, reload and query.

- document: field-structured document records
- analysis: tokenizer, token filters and per-field analyzers
- index: postings, the flat-file store, the writer and the reader
"""

__version__ = "0.1.0"
