"""Regex tokenizer producing restartable token streams."""

from __future__ import annotations

import re

from termindex.analysis.tokens import Token, TokenStream


class TokenizerError(ValueError):
    """Raised when raw text cannot be tokenized."""


class Tokenizer:
    """Regex-based tokenizer that yields word tokens with offsets."""

    def __init__(self, pattern: str = r"[\w']+", flags: int = re.UNICODE | re.MULTILINE) -> None:
        self.pattern = re.compile(pattern, flags)

    def consume(self, text: str | None) -> TokenStream:
        if text is None:
            raise TokenizerError("Cannot tokenize None")
        if not isinstance(text, str):
            msg = f"Cannot tokenize value of type {type(text).__name__}"
            raise TokenizerError(msg)
        if not text.strip():
            raise TokenizerError("Cannot tokenize blank text")
        return TokenStream(
            Token(
                text=match.group(0),
                position=position,
                start_char=match.start(),
                end_char=match.end(),
            )
            for position, match in enumerate(self.pattern.finditer(text))
        )
