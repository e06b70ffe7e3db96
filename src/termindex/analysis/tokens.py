"""Token and token stream types shared by the tokenizer, filters and writer."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any


@dataclass
class Token:
    """Represents a token emitted by the tokenizer.

    ``str(token)`` is the normalized form the index stores as a term.
    """

    text: str
    position: int = 0
    start_char: int = 0
    end_char: int = 0
    title_word: bool = False

    def __str__(self) -> str:
        return self.text

    def mark_as_title_word(self) -> None:
        self.title_word = True

    def copy_with(self, **updates: Any) -> Token:
        data = {
            "text": self.text,
            "position": self.position,
            "start_char": self.start_char,
            "end_char": self.end_char,
            "title_word": self.title_word,
        }
        data.update(updates)
        return Token(**data)


class TokenStream:
    """Restartable cursor over a list of tokens.

    Iterating a stream advances its cursor, so a fully consumed stream yields
    nothing until ``reset()`` rewinds it.
    """

    def __init__(self, tokens: Iterable[Token] | None = None) -> None:
        self._tokens: list[Token] = list(tokens or [])
        self._cursor = 0

    def has_next(self) -> bool:
        return self._cursor < len(self._tokens)

    def next(self) -> Token | None:
        if not self.has_next():
            return None
        token = self._tokens[self._cursor]
        self._cursor += 1
        return token

    def remove(self) -> None:
        """Remove the token most recently returned by ``next()``."""
        if self._cursor == 0:
            return
        self._cursor -= 1
        del self._tokens[self._cursor]

    def reset(self) -> None:
        self._cursor = 0

    def tokens(self) -> list[Token]:
        """Return every token regardless of the cursor position."""
        return list(self._tokens)

    def __iter__(self) -> Iterator[Token]:
        while self.has_next():
            token = self.next()
            if token is not None:
                yield token

    def __len__(self) -> int:
        return len(self._tokens)

    def __repr__(self) -> str:
        return f"TokenStream({[t.text for t in self._tokens]!r}, cursor={self._cursor})"
