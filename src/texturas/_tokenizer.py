"""Quote normalization, typed tokenization and negation phrase scan."""

from __future__ import annotations

import re

import ahocorasick

from ._stop_words import NEGATION_PHRASES
from ._types import RawToken, TokenKind

# ASCII letters, digits and underscore plus the Spanish accented letters.
_WORD_CHARS = "A-Za-z0-9_áéíóúñüÁÉÍÓÚÑÜ'-"
_TOKEN_RE = re.compile(rf"([{_WORD_CHARS}]+)|(\s+)|([^\s{_WORD_CHARS}]+)")
_WORD_CHAR_RE = re.compile(rf"[{_WORD_CHARS}]")

_QUOTE_TABLE = str.maketrans({
    "\u2018": "'", "\u2019": "'", "\u201a": "'", "\u201b": "'",
    "\u201c": "\"", "\u201d": "\"", "\u201e": "\"", "\u201f": "\"",
})


def normalize_quotes(text: str) -> str:
    """Replace curly single and double quotes with straight ones."""
    return text.translate(_QUOTE_TABLE)


def _lower_aligned(text: str) -> str:
    """Lowercase without changing string length, so offsets stay valid."""
    lowered = text.lower()
    if len(lowered) == len(text):
        return lowered
    return "".join(c.lower() if len(c.lower()) == 1 else c for c in text)


def tokenize(text: str) -> list[RawToken]:
    """Split text into word, whitespace and symbol runs.

    Nothing is dropped: joining the surfaces reproduces the
    quote-normalized input.
    """
    normalized = normalize_quotes(text)
    tokens: list[RawToken] = []
    for m in _TOKEN_RE.finditer(normalized):
        word, space, _symbol = m.groups()
        if word:
            kind = TokenKind.WORD
        elif space:
            if "\n\n" in space or "\r\n\r\n" in space:
                kind = TokenKind.PARAGRAPH
            else:
                kind = TokenKind.SENTENCE
        else:
            kind = TokenKind.SYMBOL
        tokens.append(RawToken(m.group(), kind, m.start(), m.end()))
    return tokens


class Tokenizer:
    """Tokenizer with a leftmost-longest scan for multi-word negation cues."""

    __slots__ = ("_phrase_ac", "_phrases")

    def __init__(self, phrases: tuple[str, ...] | list[str] = NEGATION_PHRASES) -> None:
        self._phrases = [p.lower() for p in phrases if p.strip()]
        self._phrase_ac: ahocorasick.Automaton | None = None
        if self._phrases:
            ac = ahocorasick.Automaton()
            for idx, phrase in enumerate(self._phrases):
                ac.add_word(phrase, idx)
            ac.make_automaton()
            self._phrase_ac = ac

    def scan_phrases(self, text_lower: str) -> list[tuple[int, int]]:
        """Return non-overlapping (start, end) spans of phrase matches.

        Matches must sit on word boundaries; overlapping candidates are
        resolved leftmost-longest.
        """
        if self._phrase_ac is None:
            return []

        raw_matches: list[tuple[int, int]] = []
        for end_inclusive, idx in self._phrase_ac.iter(text_lower):
            end = end_inclusive + 1
            start = end - len(self._phrases[idx])
            if start > 0 and _WORD_CHAR_RE.match(text_lower[start - 1]):
                continue
            if end < len(text_lower) and _WORD_CHAR_RE.match(text_lower[end]):
                continue
            raw_matches.append((start, end))

        # Sort by start position, then by length descending (longest first)
        raw_matches.sort(key=lambda m: (m[0], -(m[1] - m[0])))

        spans: list[tuple[int, int]] = []
        last_end = -1
        for start, end in raw_matches:
            if start >= last_end:
                spans.append((start, end))
                last_end = end
        return spans

    def process(self, text: str) -> tuple[list[RawToken], set[int]]:
        """Tokenize and flag the word tokens covered by a negation phrase.

        Returns (tokens, indices of word tokens inside a phrase match).
        """
        tokens = tokenize(text)
        spans = self.scan_phrases(_lower_aligned(normalize_quotes(text)))
        negated: set[int] = set()
        if not spans:
            return tokens, negated

        for i, tok in enumerate(tokens):
            if tok.kind is not TokenKind.WORD:
                continue
            for start, end in spans:
                if tok.start >= start and tok.end <= end:
                    negated.add(i)
                    break
        return tokens, negated
