"""Flat-file persistence for the term index.

The index lives in a single ``indexFile.properties`` file inside the index
root. Each line stores one term::

    <term>=<doc_1>|<doc_2>|...@<freq_1>|<freq_2>|...@<total_term_freq>@<total_doc_freq>

Lines are written in lexicographic term order, document ids within a line in
lexicographic order, and no timestamp header is emitted, so writing the same
index twice produces identical bytes.

No escaping is defined for the delimiters. ``encode_entry`` refuses terms and
document ids that would corrupt the line instead of silently writing them.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
import logging
import os
from pathlib import Path

from termindex.index.posting import Posting


logger = logging.getLogger(__name__)

INDEX_FILENAME = "indexFile.properties"
ENCODING = "utf-8"

KEY_SEPARATOR = "="
FIELD_SEPARATOR = "@"
LIST_SEPARATOR = "|"
_COMMENT_PREFIXES = ("#", "!")
_LINE_BREAKS = ("\n", "\r")
_RESERVED_IN_DOC_ID = (FIELD_SEPARATOR, LIST_SEPARATOR, *_LINE_BREAKS)
_RESERVED_IN_TERM = (KEY_SEPARATOR, *_RESERVED_IN_DOC_ID)


class IndexFormatError(ValueError):
    """Raised when index data cannot be encoded or decoded."""


def is_encodable_doc_id(doc_id: str) -> bool:
    return bool(doc_id) and not any(char in doc_id for char in _RESERVED_IN_DOC_ID)


def is_encodable_term(term: str) -> bool:
    if not term or term.startswith(_COMMENT_PREFIXES):
        return False
    return not any(char in term for char in _RESERVED_IN_TERM)


def encode_entry(term: str, posting: Posting) -> str:
    """Return the single-line encoding of ``posting`` under ``term``."""
    if not is_encodable_term(term):
        msg = f"Term {term!r} cannot be encoded"
        raise IndexFormatError(msg)
    if not posting.per_document_frequency:
        msg = f"Posting for term {term!r} has no documents"
        raise IndexFormatError(msg)

    doc_ids = sorted(posting.per_document_frequency)
    for doc_id in doc_ids:
        if not is_encodable_doc_id(doc_id):
            msg = f"Document id {doc_id!r} for term {term!r} cannot be encoded"
            raise IndexFormatError(msg)

    frequencies = (str(posting.per_document_frequency[doc_id]) for doc_id in doc_ids)
    value = FIELD_SEPARATOR.join(
        (
            LIST_SEPARATOR.join(doc_ids),
            LIST_SEPARATOR.join(frequencies),
            str(posting.total_term_frequency),
            str(posting.total_document_frequency),
        )
    )
    return f"{term}{KEY_SEPARATOR}{value}"


def decode_entry(line: str) -> tuple[str, Posting]:
    """Parse one encoded line back into ``(term, Posting)``."""
    term, sep, value = line.rstrip("\r\n").partition(KEY_SEPARATOR)
    if not sep or not term:
        msg = f"Missing '{KEY_SEPARATOR}' between term and postings"
        raise IndexFormatError(msg)

    segments = value.split(FIELD_SEPARATOR)
    if len(segments) != 4:
        msg = f"Expected 4 '{FIELD_SEPARATOR}'-separated segments for term {term!r}, got {len(segments)}"
        raise IndexFormatError(msg)

    doc_ids = segments[0].split(LIST_SEPARATOR)
    if "" in doc_ids:
        msg = f"Empty document id in postings of term {term!r}"
        raise IndexFormatError(msg)
    raw_frequencies = segments[1].split(LIST_SEPARATOR)
    if len(doc_ids) != len(raw_frequencies):
        msg = f"Term {term!r} lists {len(doc_ids)} documents but {len(raw_frequencies)} frequencies"
        raise IndexFormatError(msg)

    try:
        frequencies = [int(raw) for raw in raw_frequencies]
        total_term_frequency = int(segments[2])
        total_document_frequency = int(segments[3])
    except ValueError as exc:
        msg = f"Non-integer frequency for term {term!r}: {exc}"
        raise IndexFormatError(msg) from exc

    per_document_frequency = dict(zip(doc_ids, frequencies))
    if len(per_document_frequency) != total_document_frequency:
        msg = (
            f"Term {term!r} declares {total_document_frequency} documents "
            f"but lists {len(per_document_frequency)} distinct ids"
        )
        raise IndexFormatError(msg)
    if any(freq < 0 for freq in frequencies):
        msg = f"Negative frequency for term {term!r}"
        raise IndexFormatError(msg)
    if total_term_frequency < total_document_frequency:
        msg = (
            f"Term {term!r} has total frequency {total_term_frequency} "
            f"below its document frequency {total_document_frequency}"
        )
        raise IndexFormatError(msg)

    return term, Posting(
        per_document_frequency=per_document_frequency,
        total_term_frequency=total_term_frequency,
        total_document_frequency=total_document_frequency,
    )


class IndexStore:
    """Reads and writes the index file under an index root directory."""

    def __init__(self, root: str | Path, *, filename: str = INDEX_FILENAME) -> None:
        self.root = Path(root)
        self.path = self.root / filename

    def exists(self) -> bool:
        return self.path.is_file()

    def write(self, index: Mapping[str, Posting]) -> tuple[int, list[str]]:
        """Persist ``index`` atomically.

        Returns the number of terms written and the terms skipped because
        they could not be encoded. Raises ``OSError`` when the root cannot be
        created or the file cannot be written.
        """
        self.root.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        written = 0
        skipped: list[str] = []
        try:
            with tmp_path.open("w", encoding=ENCODING, newline="\n") as handle:
                for term in sorted(index):
                    try:
                        line = encode_entry(term, index[term])
                    except IndexFormatError as exc:
                        logger.warning("Skipping term during index write: %s", exc)
                        skipped.append(term)
                        continue
                    handle.write(line)
                    handle.write("\n")
                    written += 1
            os.replace(tmp_path, self.path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise
        return written, skipped

    def iter_entries(self) -> Iterator[tuple[str, Posting]]:
        """Yield decoded entries, raising ``IndexFormatError`` with the line number."""
        with self.path.open("r", encoding=ENCODING) as handle:
            for line_number, line in enumerate(handle, start=1):
                stripped = line.strip()
                if not stripped or stripped.startswith(_COMMENT_PREFIXES):
                    continue
                try:
                    yield decode_entry(line)
                except IndexFormatError as exc:
                    msg = f"{self.path}:{line_number}: {exc}"
                    raise IndexFormatError(msg) from exc

    def read(self) -> dict[str, Posting]:
        """Load every entry into a new term -> Posting map."""
        index: dict[str, Posting] = {}
        for term, posting in self.iter_entries():
            if term in index:
                msg = f"{self.path}: duplicate term {term!r}"
                raise IndexFormatError(msg)
            index[term] = posting
        return index
