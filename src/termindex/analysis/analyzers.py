"""Per-field analyzers and the factory that selects them.

An analyzer wraps a token stream and a chain of filters. Each call to
``increment()`` runs one more filter over the stream; once every filter has
run, ``increment()`` returns False and ``get_stream()`` holds the normalized
tokens.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Protocol

from termindex.analysis.filters import (
    LowercaseFilter,
    PorterStemFilter,
    PunctuationFilter,
    StopFilter,
    TokenFilter,
)
from termindex.analysis.tokens import TokenStream
from termindex.document import FieldName


class Analyzer(Protocol):
    """Protocol implemented by analyzers."""

    def increment(self) -> bool:  # pragma: no cover - interface definition
        ...

    def get_stream(self) -> TokenStream:  # pragma: no cover - interface definition
        ...


class FieldAnalyzer:
    """Runs a filter chain over a token stream one filter per step."""

    def __init__(self, stream: TokenStream, filters: Sequence[TokenFilter] | None = None) -> None:
        self._stream = stream
        self._filters = list(filters or [])
        self._step = 0

    def increment(self) -> bool:
        if self._step >= len(self._filters):
            return False
        token_filter = self._filters[self._step]
        self._stream = TokenStream(token_filter(self._stream.tokens()))
        self._step += 1
        return self._step < len(self._filters)

    def get_stream(self) -> TokenStream:
        return self._stream


def analyze(analyzer: Analyzer) -> TokenStream:
    """Step ``analyzer`` until it reports no further filters and return its rewound stream."""
    while analyzer.increment():
        pass
    stream = analyzer.get_stream()
    stream.reset()
    return stream


FilterChain = Callable[[], list[TokenFilter]]


class AnalyzerFactory:
    """Selects the analyzer chain for a document field.

    One factory is built per writer (or per query session) and passed in
    explicitly; chains can be overridden per field.
    """

    def __init__(
        self,
        *,
        stopwords: Sequence[str] | None = None,
        chains: Mapping[FieldName, FilterChain] | None = None,
    ) -> None:
        self._stopwords = list(stopwords) if stopwords is not None else None
        self._chains: dict[FieldName, FilterChain] = self._default_chains()
        if chains:
            self._chains.update({FieldName(name): chain for name, chain in chains.items()})

    def analyzer_for_field(self, field: FieldName, stream: TokenStream) -> FieldAnalyzer:
        try:
            chain = self._chains[FieldName(field)]
        except (KeyError, ValueError) as exc:
            msg = f"No analyzer registered for field {field!r}"
            raise ValueError(msg) from exc
        return FieldAnalyzer(stream, chain())

    def _default_chains(self) -> dict[FieldName, FilterChain]:
        def text_chain() -> list[TokenFilter]:
            return [PunctuationFilter(), LowercaseFilter(), StopFilter(self._stopwords), PorterStemFilter()]

        def name_chain() -> list[TokenFilter]:
            return [PunctuationFilter(), LowercaseFilter()]

        def keyword_chain() -> list[TokenFilter]:
            return [LowercaseFilter()]

        return {
            FieldName.TITLE: text_chain,
            FieldName.CONTENT: text_chain,
            FieldName.AUTHOR: name_chain,
            FieldName.AUTHORORG: name_chain,
            FieldName.CATEGORY: keyword_chain,
            FieldName.PLACE: keyword_chain,
            FieldName.NEWSDATE: keyword_chain,
            FieldName.FILEID: list,
        }
