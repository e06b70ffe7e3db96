"""Token filters applied by field analyzers.

A filter maps an iterable of tokens to an iterator of tokens. The filters in
this module rewrite each token on its own, so they share ``TermFilter``:
subclasses return the new text for a token, or None to drop it, and the
original ``Token`` is passed through untouched when its text does not change.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import Protocol

from termindex.analysis.tokens import Token


class TokenFilter(Protocol):
    """Protocol implemented by token filters."""

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:  # pragma: no cover - interface definition
        ...


class TermFilter:
    """Base class for filters that rewrite or drop tokens one at a time."""

    def rewrite(self, text: str) -> str | None:
        raise NotImplementedError

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            text = self.rewrite(token.text)
            if text is None:
                continue
            yield token if text == token.text else token.copy_with(text=text)


class LowercaseFilter(TermFilter):
    def rewrite(self, text: str) -> str | None:
        return text.lower()


class PunctuationFilter(TermFilter):
    """Removes apostrophes ("O'Neil" -> "ONeil"); a bare apostrophe is dropped."""

    def rewrite(self, text: str) -> str | None:
        return text.replace("'", "") or None


# Function words of English newswire text.
DEFAULT_STOPWORDS = frozenset(
    """
    a about after all also an and any are as at be been but by can could for
    from had has have he her his i if in into is it its may more no not of on
    or our out over said she so such than that the their them then there these
    they this to up was we were which who will with would you
    """.split()
)


class StopFilter(TermFilter):
    """Drops stopwords, compared case-insensitively."""

    def __init__(self, stopwords: Iterable[str] | None = None) -> None:
        vocab = DEFAULT_STOPWORDS if stopwords is None else stopwords
        self.stopwords = frozenset(word.lower() for word in vocab)

    def rewrite(self, text: str) -> str | None:
        return None if text.lower() in self.stopwords else text


DERIVATIONAL_SUFFIXES: Mapping[str, str] = {
    "ization": "ize",
    "isation": "ise",
    "ational": "ate",
    "fulness": "ful",
    "iveness": "ive",
    "ousness": "ous",
    "tional": "tion",
    "ation": "ate",
    "ness": "",
    "ment": "",
}

# "ss" maps to itself so that "class" keeps its final s.
INFLECTIONAL_SUFFIXES: Mapping[str, str] = {
    "ingly": "",
    "sses": "ss",
    "edly": "",
    "ies": "y",
    "ing": "",
    "ss": "ss",
    "ed": "",
    "ly": "",
    "es": "",
    "s": "",
}


class SuffixStemmer:
    """Porter-style suffix stripping in ordered passes.

    Within a pass only the longest matching suffix is considered; it is
    replaced when at least ``min_stem`` characters remain before it, and the
    word is returned. A pass whose longest match leaves too short a stem, or
    that matches nothing, hands the word to the next pass unchanged.
    """

    def __init__(
        self,
        passes: Sequence[Mapping[str, str]] = (DERIVATIONAL_SUFFIXES, INFLECTIONAL_SUFFIXES),
        *,
        min_stem: int = 2,
    ) -> None:
        self.min_stem = min_stem
        self._passes = [sorted(rules.items(), key=lambda rule: len(rule[0]), reverse=True) for rules in passes]

    def stem(self, word: str) -> str:
        for rules in self._passes:
            for suffix, replacement in rules:
                if not word.endswith(suffix):
                    continue
                stem_length = len(word) - len(suffix)
                if stem_length >= self.min_stem:
                    return word[:stem_length] + replacement
                break
        return word


class PorterStemFilter(TermFilter):
    def __init__(self, stemmer: SuffixStemmer | None = None) -> None:
        self.stemmer = stemmer or SuffixStemmer()

    def rewrite(self, text: str) -> str | None:
        return self.stemmer.stem(text)
