"""Data structures for texturas."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class TokenKind(str, Enum):
    WORD = "w"
    PARAGRAPH = "p"   # whitespace run containing a blank line
    SENTENCE = "s"    # any other whitespace run
    SYMBOL = "x"


class RelationKind(str, Enum):
    SEED = "seed"
    HYPERNYM = "hypernym"
    HYPONYM = "hyponym"
    MERONYM = "meronym"


class Flow(str, Enum):
    """Direction followed by spreading activation."""

    UP = "up"
    DOWN = "down"
    BIDIRECTIONAL = "bi"


class ResourceState(str, Enum):
    UNLOADED = "unloaded"
    READY = "ready"


class SelectionMode(str, Enum):
    SEEDS = "seeds"
    RECURRENT = "recurrent"
    PERSISTENT = "persistent"


class SortMode(str, Enum):
    FREQUENCY = "freq"
    RELEVANCE = "relevance"


class CooccurrenceScope(str, Enum):
    SENTENCE = "sentence"
    DOCUMENT = "document"


def _plain_factory(items: list[tuple[str, Any]]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in items:
        if isinstance(value, Enum):
            value = value.value
        elif isinstance(value, frozenset):
            value = sorted(value)
        out[key] = value
    return out


def as_plain(obj: Any) -> dict[str, Any]:
    """Convert a result dataclass into plain, serializable containers."""
    return dataclasses.asdict(obj, dict_factory=_plain_factory)


@dataclass(slots=True, frozen=True)
class RawToken:
    surface: str
    kind: TokenKind
    start: int   # offset into the quote-normalized text
    end: int


@dataclass(slots=True, frozen=True)
class Token:
    surface: str
    lemma: str
    pos: str              # n | v | a | r, "x" for structural tokens
    is_stop: bool
    is_negation: bool
    kind: TokenKind
    paragraph_index: int


@dataclass(slots=True, frozen=True)
class Relations:
    hypernyms: tuple[str, ...] = ()
    hyponyms: tuple[str, ...] = ()
    meronyms: tuple[str, ...] = ()


@dataclass(slots=True, frozen=True)
class SentimentScore:
    lemma: str
    pos: str
    polarity: float | None = None     # -1..1, from VAD valence
    arousal: float | None = None      # 0..1
    emotions: frozenset[str] = frozenset()
    intensity: dict[str, float] | None = None
    vad: dict[str, float] | None = None
    swn: dict[str, float] | None = None

    @property
    def has(self) -> bool:
        return bool(
            self.emotions or self.intensity or self.vad
            or self.polarity is not None or self.swn
        )


@dataclass(slots=True, frozen=True)
class EnrichedToken:
    surface: str
    lemma: str
    pos: str
    is_stop: bool
    kind: TokenKind
    relevance: float
    frequency: int
    polarity: float | None
    arousal: float | None
    emotions: frozenset[str]
    community_id: int     # -1 outside the top-N vocabulary
    is_negation: bool = False
    paragraph_index: int = 0


@dataclass(slots=True, frozen=True)
class Stage1Result:
    tokens: list[Token]
    filtered_lemmas: list[str]
    filtered_sentences: list[int]   # sentence index per filtered lemma
    freq_map: dict[str, int]
    rel_freq_map: dict[str, float]
    freq_pairs: list[tuple[str, int]]
    top_words: list[tuple[str, int]]
    cooccurrence: dict[str, dict[str, int]]
    communities: dict[str, int]
    sentiment_map: dict[str, SentimentScore]
    bigrams: list[tuple[str, int]]
    trigrams: list[tuple[str, int]]
    max_freq: int
    content_count: int
    word_count: int

    @property
    def bigram_map(self) -> dict[str, int]:
        return dict(self.bigrams)

    @property
    def trigram_map(self) -> dict[str, int]:
        return dict(self.trigrams)


@dataclass(slots=True, frozen=True)
class AnalysisResult:
    stage1: Stage1Result
    enriched: list[EnrichedToken]
    paragraphs: list[list[EnrichedToken]]
    relevance_map: dict[str, float]
    max_rel: float

    @property
    def freq_map(self) -> dict[str, int]:
        return self.stage1.freq_map

    @property
    def communities(self) -> dict[str, int]:
        return self.stage1.communities

    @property
    def top_words(self) -> list[tuple[str, int]]:
        return self.stage1.top_words

    @property
    def filtered_lemmas(self) -> list[str]:
        return self.stage1.filtered_lemmas

    def to_dict(self) -> dict[str, Any]:
        return as_plain(self)


@dataclass(slots=True, frozen=True)
class SeedExpansion:
    word: str
    relation: RelationKind
    distance: int


@dataclass(slots=True, frozen=True)
class SeedGroup:
    seed: str
    expansions: list[SeedExpansion]


@dataclass(slots=True, frozen=True)
class WeaveTerm:
    word: str
    parent: str | None
    relation: RelationKind
    distance: int


@dataclass(slots=True, frozen=True)
class WeaveResult:
    terms: list[WeaveTerm]
    groups: list[SeedGroup]
    cooccurrence: dict[str, dict[str, int]]
    activation: dict[str, dict[str, float]]
    proximity: dict[str, dict[str, float]]
    max_cooc: float     # off-diagonal maxima, 1 when everything is zero
    max_activation: float

    def to_dict(self) -> dict[str, Any]:
        return as_plain(self)


@dataclass(slots=True, frozen=True)
class StackCell:
    doc_count: int
    sum_cooc: float
    sum_activation: float
    sum_proximity: float


@dataclass(slots=True, frozen=True)
class StackWeave:
    cells: dict[str, dict[str, StackCell]]
    max_cooc: float
    max_activation: float
    max_proximity: float
    n_docs: int

    def to_dict(self) -> dict[str, Any]:
        return as_plain(self)


@dataclass(slots=True, frozen=True)
class PassageToken:
    surface: str
    lemma: str
    is_stop: bool
    highlighted: bool


@dataclass(slots=True, frozen=True)
class Segment:
    index: int
    tokens: list[EnrichedToken]
    freq_map: dict[str, int]


@dataclass(slots=True, frozen=True)
class SegmentCell:
    frequency: int       # raw occurrences inside the segment
    activation: float    # frequency plus embedding boost
    relevance: float     # global relevance x activation

    @property
    def is_present(self) -> bool:
        return self.activation > 0


@dataclass(slots=True, frozen=True)
class SegmentTone:
    polarity: float
    arousal: float


@dataclass(slots=True, frozen=True)
class FibrasResult:
    node_words: list[str]
    segments: list[Segment]
    seg_data: list[dict[str, SegmentCell]]
    seg_emo: list[dict[str, float]]
    seg_tone: list[SegmentTone]
    num_segments: int
    max_freq: float
    max_rel: float
    max_seg_activation: float
    max_seg_relevance: float
    decay: float
    clusters: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return as_plain(self)
