"""Unit tests for the index writer."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from pathlib import Path

import pytest

from termindex.analysis.analyzers import AnalyzerFactory
from termindex.analysis.filters import LowercaseFilter
from termindex.analysis.tokens import Token, TokenStream
from termindex.document import FieldName
from termindex.index.reader import IndexReader
from termindex.index.store import INDEX_FILENAME
from termindex.index.writer import IndexerError, IndexWriter, IndexWriterClosedError


pytestmark = pytest.mark.unit


class RecordingFilter:
    """Pass-through filter remembering the tokens it saw."""

    def __init__(self) -> None:
        self.seen: list[Token] = []

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            self.seen.append(token)
            yield token


class UppercaseAnalyzer:
    """Analyzer exposing only increment/get_stream, finishing in a single step."""

    def __init__(self, stream: TokenStream) -> None:
        self._stream = stream
        self.steps = 0

    def increment(self) -> bool:
        self.steps += 1
        if self.steps == 1:
            self._stream = TokenStream([token.copy_with(text=token.text.upper()) for token in self._stream.tokens()])
        return False

    def get_stream(self) -> TokenStream:
        return self._stream


class UppercaseFactory(AnalyzerFactory):
    def __init__(self) -> None:
        super().__init__()
        self.analyzers: list[UppercaseAnalyzer] = []

    def analyzer_for_field(self, field: FieldName, stream: TokenStream) -> UppercaseAnalyzer:
        analyzer = UppercaseAnalyzer(stream)
        self.analyzers.append(analyzer)
        return analyzer


def _postings(writer: IndexWriter) -> dict[str, dict[str, int]]:
    return {term: dict(posting.per_document_frequency) for term, posting in writer._index.items()}


def test_add_document_folds_every_indexed_field(tmp_path: Path, make_document) -> None:
    writer = IndexWriter(tmp_path)

    doc_id = writer.add_document(
        make_document(
            "d1",
            title="Cat",
            author="Mary O'Neil",
            category=["acq", "earn"],
            content="cat dog dog",
            place="Paris",
            newsdate="March 3",
        )
    )

    snapshot = _postings(writer)
    assert doc_id == "d1"
    assert snapshot["cat"] == {"d1": 2}
    assert snapshot["dog"] == {"d1": 2}
    assert snapshot["mary"] == {"d1": 1}
    assert snapshot["oneil"] == {"d1": 1}
    assert snapshot["acq"] == {"d1": 1}
    assert snapshot["earn"] == {"d1": 1}
    assert snapshot["paris"] == {"d1": 1}
    assert snapshot["march"] == {"d1": 1}
    assert snapshot["3"] == {"d1": 1}
    assert writer.document_count == 1


def test_content_is_normalized_by_text_chain(tmp_path: Path, make_document) -> None:
    writer = IndexWriter(tmp_path)

    writer.add_document(make_document("d1", content="The Cats and the dogs"))

    assert set(_postings(writer)) == {"cat", "dog"}


def test_identical_documents_share_postings(tmp_path: Path, make_document) -> None:
    writer = IndexWriter(tmp_path)
    text = "bird fish cat bird"

    writer.add_document(make_document("a", content=text))
    writer.add_document(make_document("b", content=text))

    snapshot = _postings(writer)
    assert snapshot
    for term, doc_map in snapshot.items():
        assert set(doc_map) == {"a", "b"}, term
    writer.close()

    reader = IndexReader(tmp_path)
    for term in snapshot:
        posting = reader.get_posting(term)
        assert posting is not None
        assert posting.total_document_frequency == 2


def test_title_tokens_are_marked_before_analysis(tmp_path: Path, make_document) -> None:
    title_recorder = RecordingFilter()
    content_recorder = RecordingFilter()
    factory = AnalyzerFactory(
        chains={
            FieldName.TITLE: lambda: [title_recorder, LowercaseFilter()],
            FieldName.CONTENT: lambda: [content_recorder, LowercaseFilter()],
        }
    )
    writer = IndexWriter(tmp_path, analyzer_factory=factory)

    writer.add_document(make_document("d1", title=["Big News", "Ignored Subtitle"], content="Body text"))

    assert [t.text for t in title_recorder.seen] == ["Big", "News"]
    assert all(t.title_word for t in title_recorder.seen)
    assert [t.text for t in content_recorder.seen] == ["Body", "text"]
    assert not any(t.title_word for t in content_recorder.seen)
    assert "ignored" not in _postings(writer)


def test_tokenizer_failure_drops_only_that_value(
    tmp_path: Path, make_document, caplog: pytest.LogCaptureFixture
) -> None:
    writer = IndexWriter(tmp_path)

    writer.add_document(make_document("d7", title="   ", content=["cat dog", "   ", "bird"]))

    assert set(_postings(writer)) == {"cat", "dog", "bird"}
    assert "Dropping CONTENT value of document d7" in caplog.text
    assert "Dropping TITLE of document d7" in caplog.text


def test_absent_fields_are_skipped(tmp_path: Path, make_document) -> None:
    writer = IndexWriter(tmp_path)

    writer.add_document(make_document("d1"))

    assert _postings(writer) == {}
    assert writer.document_count == 1


def test_document_without_fileid_is_rejected(tmp_path: Path, make_document) -> None:
    writer = IndexWriter(tmp_path)

    with pytest.raises(IndexerError, match="no FILEID"):
        writer.add_document(make_document(None, content="cat"))


@pytest.mark.parametrize("fileid", ["d|1", "d@1", ""])
def test_document_with_unencodable_id_is_rejected(tmp_path: Path, make_document, fileid: str) -> None:
    writer = IndexWriter(tmp_path)

    with pytest.raises(IndexerError):
        writer.add_document(make_document(fileid, content="cat"))


def test_posting_invariants_hold_across_documents(tmp_path: Path, make_document) -> None:
    writer = IndexWriter(tmp_path)
    for document in (
        make_document("d1", content="cat cat dog"),
        make_document("d2", content="dog bird"),
        make_document("d3", content="cat bird bird bird"),
    ):
        writer.add_document(document)

    for posting in writer._index.values():
        assert posting.total_document_frequency == len(posting.per_document_frequency)
        assert posting.total_term_frequency >= posting.total_document_frequency
    assert writer.term_count == 3


def test_close_round_trips_through_reader(tmp_path: Path, make_document) -> None:
    writer = IndexWriter(tmp_path / "idx")
    writer.add_document(make_document("d1", title="Cat", content="cat dog fish"))
    writer.add_document(make_document("d2", author="Dog Walker", content="dog dog"))
    expected = _postings(writer)

    path = writer.close()

    assert path == tmp_path / "idx" / INDEX_FILENAME
    reader = IndexReader(tmp_path / "idx")
    assert reader.total_key_terms() == len(expected)
    for term, doc_map in expected.items():
        assert reader.get_postings(term) == doc_map


def test_closed_writer_rejects_further_use(tmp_path: Path, make_document) -> None:
    writer = IndexWriter(tmp_path)
    writer.close()

    assert writer.closed
    with pytest.raises(IndexWriterClosedError):
        writer.add_document(make_document("d1", content="cat"))
    with pytest.raises(IndexWriterClosedError):
        writer.close()


def test_close_raises_indexer_error_when_target_is_unwritable(tmp_path: Path, make_document) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    writer = IndexWriter(blocker / "index")
    writer.add_document(make_document("d1", content="cat"))

    with pytest.raises(IndexerError, match="Failed to write index"):
        writer.close()


def test_context_manager_closes_on_success(tmp_path: Path, make_document) -> None:
    with IndexWriter(tmp_path) as writer:
        writer.add_document(make_document("d1", content="cat"))

    assert writer.closed
    assert (tmp_path / INDEX_FILENAME).exists()


def test_context_manager_does_not_write_after_error(tmp_path: Path, make_document) -> None:
    with pytest.raises(RuntimeError, match="boom"):
        with IndexWriter(tmp_path) as writer:
            writer.add_document(make_document("d1", content="cat"))
            raise RuntimeError("boom")

    assert not writer.closed
    assert not (tmp_path / INDEX_FILENAME).exists()


def test_writer_drives_any_analyzer_through_increment_and_get_stream(tmp_path: Path, make_document) -> None:
    factory = UppercaseFactory()
    writer = IndexWriter(tmp_path, analyzer_factory=factory)

    writer.add_document(make_document("d1", title="Cat", content="cat dog"))

    assert _postings(writer) == {"CAT": {"d1": 2}, "DOG": {"d1": 1}}
    assert [analyzer.steps for analyzer in factory.analyzers] == [1, 1]
