"""Lexical reader that splits argument text into parameter tokens."""

from __future__ import annotations

import logging
from typing import Iterator, List

logger = logging.getLogger(__name__)

__all__ = ["MAX_TOKEN_LENGTH", "WHITESPACE", "iter_tokens", "read_tokens"]

WHITESPACE = " \t\n\v\f\r"
MAX_TOKEN_LENGTH = 1999
_QUOTE = '"'
_COMMENT = ";"


def iter_tokens(text: str) -> Iterator[str]:
    """
    Yield tokens from ``text`` in source order.

    Tokens are maximal runs of non-whitespace characters, capped at
    ``MAX_TOKEN_LENGTH`` (longer runs continue as the next token). A token that
    opens with a double quote runs to the closing quote or the end of the line,
    so whitespace and commas survive inside it. A token starting with ``;``
    discards the rest of its line.

    The reader is deliberately lenient: an empty quoted string ends the stream
    instead of raising, matching what legacy config files rely on.
    """

    length = len(text)
    pos = 0
    while True:
        while pos < length and text[pos] in WHITESPACE:
            pos += 1
        if pos >= length:
            return

        if text[pos] == _QUOTE:
            end = pos + 1
            while end < length and text[end] not in '"\n':
                end += 1
            token = text[pos + 1 : end]
            if not token:
                logger.debug("Empty quoted token at offset %d; stopping", pos)
                return
            pos = end
            if pos < length and text[pos] == _QUOTE:
                pos += 1
            yield token
            continue

        end = pos
        limit = pos + MAX_TOKEN_LENGTH
        while end < length and end < limit and text[end] not in WHITESPACE:
            end += 1
        token = text[pos:end]
        pos = end
        if token.startswith(_COMMENT):
            newline = text.find("\n", pos)
            pos = length if newline < 0 else newline
            continue
        yield token


def read_tokens(text: str) -> List[str]:
    """Materialise every token of ``text`` into a list."""

    return list(iter_tokens(text))
