"""Per-token sentiment lookup with a session cache and negation windows."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ._resources import resource_call
from ._types import ResourceState, SentimentScore

if TYPE_CHECKING:
    from ._resources import SentimentLexicon

NEGATION_WINDOW = 3


class SentimentCache:
    """Append-only store of lexicon lookups keyed by ``lemma#pos``."""

    __slots__ = ("_entries", "hits", "misses")

    def __init__(self) -> None:
        self._entries: dict[str, SentimentScore] = {}
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def get(self, key: str) -> SentimentScore | None:
        entry = self._entries.get(key)
        if entry is None:
            self.misses += 1
        else:
            self.hits += 1
        return entry

    def put(self, key: str, score: SentimentScore) -> None:
        self._entries.setdefault(key, score)

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0


class SentimentEnricher:
    """Scores lemmas against the sentiment lexicons.

    The cache is owned by the enricher and may be shared by passing the
    same instance to several enrichers within one session.
    """

    __slots__ = ("lexicon", "cache")

    def __init__(self, lexicon: SentimentLexicon, cache: SentimentCache | None = None) -> None:
        self.lexicon = lexicon
        self.cache = cache if cache is not None else SentimentCache()

    @property
    def ready(self) -> bool:
        return self.lexicon.state is ResourceState.READY

    def score(self, lemma: str, pos: str) -> SentimentScore:
        """Lexicon entry for ``lemma#pos``; an empty score when unloaded."""
        if not self.ready:
            return SentimentScore(lemma=lemma, pos=pos)
        key = f"{lemma}#{pos}"
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        with resource_call("sentiment"):
            result = self.lexicon.lookup(lemma, pos)
        self.cache.put(key, result)
        return result


class NegationWindow:
    """Tracks how many upcoming tokens have their polarity flipped.

    A negation cue opens a window of three tokens. Each following content
    token consumes one slot (flipping its polarity when it has one); stop
    words consume a slot without flipping.
    """

    __slots__ = ("remaining", "size")

    def __init__(self, size: int = NEGATION_WINDOW) -> None:
        self.size = size
        self.remaining = 0

    def apply(self, polarity: float | None, *, is_negation: bool, is_stop: bool) -> float | None:
        if is_negation:
            self.remaining = self.size
            return polarity
        if self.remaining <= 0:
            return polarity
        self.remaining -= 1
        if is_stop or polarity is None:
            return polarity
        return -polarity
