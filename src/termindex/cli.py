"""Command line entry point for building and querying a term index."""

# ruff: noqa: T201  # CLI prints query results

from __future__ import annotations

import argparse
from collections.abc import Iterator, Sequence
import logging
from pathlib import Path
import sys
from typing import Any

import orjson

from termindex.analysis.analyzers import AnalyzerFactory, analyze
from termindex.analysis.tokenizer import Tokenizer, TokenizerError
from termindex.config import Settings
from termindex.document import Document, FieldName
from termindex.index.reader import IndexReader, QueryError
from termindex.index.writer import IndexerError, IndexWriter
from termindex.observability.logging import configure_logging


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_QUERY_ERROR = 2


def build_argument_parser() -> argparse.ArgumentParser:
    index_dir_help = "Index root directory (default: settings)"
    parser = argparse.ArgumentParser(prog="termindex", description="Build and query a term-level inverted index.")
    parser.add_argument("--index-dir", type=Path, default=None, help=index_dir_help)

    # Subcommands accept the option too; SUPPRESS keeps an omitted one from clearing the top-level value.
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--index-dir", type=Path, default=argparse.SUPPRESS, help=index_dir_help)

    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", parents=[common], help="Index a JSON Lines corpus")
    build.add_argument("corpus", type=Path, help="File with one JSON document per line")

    postings = subparsers.add_parser("postings", parents=[common], help="Print the postings of one term")
    postings.add_argument("term")
    postings.add_argument("--raw", action="store_true", help="Look the term up without analysis")

    top = subparsers.add_parser("top", parents=[common], help="Print the K most frequent terms")
    top.add_argument("k", type=int)

    query = subparsers.add_parser("query", parents=[common], help="Boolean AND query over terms")
    query.add_argument("terms", nargs="+")
    query.add_argument("--raw", action="store_true", help="Look the terms up without analysis")

    return parser


def iter_corpus(path: Path) -> Iterator[Document]:
    """Yield documents from a JSON Lines file, skipping blank lines."""
    with path.open("rb") as handle:
        for line_number, line in enumerate(handle, start=1):
            if not line.strip():
                continue
            try:
                payload = orjson.loads(line)
            except orjson.JSONDecodeError as exc:
                msg = f"{path}:{line_number}: invalid JSON: {exc}"
                raise IndexerError(msg) from exc
            if not isinstance(payload, dict):
                msg = f"{path}:{line_number}: expected a JSON object"
                raise IndexerError(msg)
            yield Document.from_mapping(payload)


def analyze_term(raw: str, tokenizer: Tokenizer, factory: AnalyzerFactory) -> list[str]:
    """Run ``raw`` through the CONTENT analyzer chain and return every surviving term."""
    try:
        stream = tokenizer.consume(raw)
    except TokenizerError:
        return []
    return [str(token) for token in analyze(factory.analyzer_for_field(FieldName.CONTENT, stream))]


def _run_build(args: argparse.Namespace, index_dir: Path, factory: AnalyzerFactory) -> int:
    indexed = 0
    skipped = 0
    try:
        with IndexWriter(index_dir, analyzer_factory=factory) as writer:
            for document in iter_corpus(args.corpus):
                try:
                    writer.add_document(document)
                except IndexerError as exc:
                    logger.warning("Skipping %r: %s", document, exc)
                    skipped += 1
                    continue
                indexed += 1
    except FileNotFoundError as exc:
        logger.error("Corpus not found: %s", exc)
        return EXIT_FAILURE
    except IndexerError as exc:
        logger.error("Indexing failed: %s", exc)
        return EXIT_FAILURE
    logger.info("Indexed %d documents (%d skipped) into %s", indexed, skipped, index_dir)
    return EXIT_OK


def _resolve_terms(raw_terms: Sequence[str], *, raw: bool, factory: AnalyzerFactory) -> list[list[str]]:
    if raw:
        return [[term] for term in raw_terms]
    tokenizer = Tokenizer()
    return [analyze_term(term, tokenizer, factory) for term in raw_terms]


def _print_json(value: Any) -> None:
    print(orjson.dumps(value, option=orjson.OPT_INDENT_2).decode("utf-8"))


def _run_read(args: argparse.Namespace, index_dir: Path, factory: AnalyzerFactory) -> int:
    reader = IndexReader(index_dir)
    if not reader.is_usable:
        logger.error("Index at %s is missing or empty", index_dir)
        return EXIT_FAILURE

    if args.command == "top":
        _print_json(reader.get_top_k(args.k))
        return EXIT_OK

    if args.command == "postings":
        (terms,) = _resolve_terms([args.term], raw=args.raw, factory=factory)
        if len(terms) > 1:
            logger.error("Postings take a single term; %r analyzes to: %s", args.term, ", ".join(terms))
            return EXIT_QUERY_ERROR
        _print_json(reader.get_postings(terms[0]) if terms else None)
        return EXIT_OK

    resolved = _resolve_terms(args.terms, raw=args.raw, factory=factory)
    try:
        missing = [raw for raw, terms in zip(args.terms, resolved) if not terms]
        if missing:
            msg = f"Terms removed by analysis: {', '.join(missing)}"
            raise QueryError(msg)
        result = reader.query(*[term for terms in resolved for term in terms])
    except QueryError as exc:
        logger.error("Query failed: %s", exc)
        return EXIT_QUERY_ERROR
    _print_json(result)
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_argument_parser()
    args = parser.parse_args(argv)
    settings = Settings()
    configure_logging(settings.log_level, settings.log_json, logger_levels=settings.logger_levels)

    index_dir = args.index_dir or settings.index_dir
    factory = AnalyzerFactory(stopwords=settings.get_stopwords())

    if args.command == "build":
        return _run_build(args, index_dir, factory)
    return _run_read(args, index_dir, factory)


if __name__ == "__main__":
    sys.exit(main())
