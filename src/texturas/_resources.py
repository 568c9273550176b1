"""Lexical resources consumed by the analysis: tagger, lemmatizer, synsets,
sentiment lexicons and static embeddings.

Every resource starts UNLOADED and answers queries with neutral fallbacks
until its tables are loaded. The analysis checks ``state`` before each
dependent call and wraps collaborator failures in ``ResourceError``.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator

import numpy as np

from ._errors import ResourceError, TexturasError
from ._stop_words import POS_SUFFIXES, POS_TAGS
from ._types import RelationKind, Relations, ResourceState, SentimentScore

DEFAULT_POS = "n"


@contextmanager
def resource_call(name: str) -> Iterator[None]:
    """Re-raise anything a collaborator throws as a ResourceError."""
    try:
        yield
    except TexturasError:
        raise
    except Exception as e:
        raise ResourceError(name, f"{type(e).__name__}: {e}") from e


def normalize_rows(matrix: np.ndarray) -> np.ndarray:
    """Scale each row to unit length. All-zero rows stay zero."""
    norms = np.linalg.norm(matrix, axis=1, keepdims=True)
    return np.divide(matrix, norms, out=np.zeros_like(matrix), where=norms > 0)


class PosTagger:
    """Lookup table with Spanish suffix rules as fallback. Tags: n, v, a, r."""

    __slots__ = ("_lookup",)

    def __init__(self, lookup: dict[str, str] | None = None) -> None:
        self._lookup: dict[str, str] | None = None
        if lookup is not None:
            self.load(lookup)

    def load(self, lookup: dict[str, str]) -> None:
        self._lookup = {k.lower(): v for k, v in lookup.items()}

    @property
    def state(self) -> ResourceState:
        return ResourceState.READY if self._lookup is not None else ResourceState.UNLOADED

    def tag(self, word: str) -> str:
        low = word.lower()
        if self._lookup is not None:
            tag = self._lookup.get(low)
            if tag is not None:
                return tag
        for suffix, tag in POS_SUFFIXES:
            if len(low) > len(suffix) and low.endswith(suffix):
                return tag
        return DEFAULT_POS


class Lemmatizer:
    """Lookup lemmatizer: ``word#pos`` key, then ``word``.

    Unknown words come back lowercased and otherwise unchanged.
    """

    __slots__ = ("_lookup",)

    def __init__(self, lookup: dict[str, str] | None = None) -> None:
        self._lookup: dict[str, str] | None = None
        if lookup is not None:
            self.load(lookup)

    def load(self, lookup: dict[str, str]) -> None:
        self._lookup = dict(lookup)

    @property
    def state(self) -> ResourceState:
        return ResourceState.READY if self._lookup is not None else ResourceState.UNLOADED

    def lemmatize(self, word: str, pos: str) -> str:
        low = word.lower()
        if self._lookup is None:
            return low

        lemma = self._lookup.get(f"{low}#{pos}")
        if lemma is not None:
            return lemma
        return self._lookup.get(low, low)


class SynsetGraph:
    """WordNet-style relations keyed by ``lemma#pos``."""

    __slots__ = ("_entries",)

    _EMPTY = Relations()

    def __init__(self, entries: dict[str, dict[str, list[str]]] | None = None) -> None:
        self._entries: dict[str, Relations] | None = None
        if entries is not None:
            self.load(entries)

    def load(self, entries: dict[str, dict[str, list[str]]]) -> None:
        self._entries = {
            key: Relations(
                hypernyms=tuple(rel.get("hypernyms") or ()),
                hyponyms=tuple(rel.get("hyponyms") or ()),
                meronyms=tuple(rel.get("meronyms") or ()),
            )
            for key, rel in entries.items()
        }

    @property
    def state(self) -> ResourceState:
        return ResourceState.READY if self._entries is not None else ResourceState.UNLOADED

    def __len__(self) -> int:
        return len(self._entries or {})

    def relations(self, lemma: str, pos: str) -> Relations:
        if self._entries is None:
            return self._EMPTY
        return self._entries.get(f"{lemma}#{pos}", self._EMPTY)

    def all_relations(self, lemma: str, pos: str) -> list[tuple[str, RelationKind]]:
        """All neighbours tagged with their relation kind.

        Order: hypernyms, then hyponyms, then meronyms.
        """
        rel = self.relations(lemma, pos)
        out: list[tuple[str, RelationKind]] = []
        out.extend((t, RelationKind.HYPERNYM) for t in rel.hypernyms)
        out.extend((t, RelationKind.HYPONYM) for t in rel.hyponyms)
        out.extend((t, RelationKind.MERONYM) for t in rel.meronyms)
        return out


class SentimentLexicon:
    """NRC EmoLex, NRC Intensity, NRC VAD and SentiWordNet tables.

    Ready as soon as any one of the four tables is loaded.
    """

    __slots__ = ("emolex", "intensity", "vad", "swn")

    def __init__(
        self,
        *,
        emolex: dict[str, dict[str, int]] | None = None,
        intensity: dict[str, dict[str, float]] | None = None,
        vad: dict[str, dict[str, float]] | None = None,
        swn: dict[str, dict[str, float]] | None = None,
    ) -> None:
        self.emolex = emolex
        self.intensity = intensity
        self.vad = vad
        self.swn = swn

    def load_emolex(self, data: dict[str, dict[str, int]]) -> None:
        self.emolex = data

    def load_intensity(self, data: dict[str, dict[str, float]]) -> None:
        self.intensity = data

    def load_vad(self, data: dict[str, dict[str, float]]) -> None:
        self.vad = data

    def load_swn(self, data: dict[str, dict[str, float]]) -> None:
        self.swn = data

    @property
    def state(self) -> ResourceState:
        if self.emolex or self.intensity or self.vad or self.swn:
            return ResourceState.READY
        return ResourceState.UNLOADED

    def lookup(self, lemma: str, pos: str) -> SentimentScore:
        """Uncached lexicon lookup. Polarity is derived from VAD valence."""
        emotions: frozenset[str] = frozenset()
        if self.emolex and lemma in self.emolex:
            emotions = frozenset(e for e, flag in self.emolex[lemma].items() if flag)

        intensity = None
        if self.intensity and lemma in self.intensity:
            intensity = dict(self.intensity[lemma])

        vad = polarity = arousal = None
        if self.vad and lemma in self.vad:
            vad = dict(self.vad[lemma])
            # Map VAD valence (0..1) to polarity (-1..+1)
            polarity = (vad["v"] - 0.5) * 2
            arousal = vad.get("a")

        swn = None
        if self.swn:
            entry = self.swn.get(f"{lemma}#{pos}")
            if entry is None:
                for alt in POS_TAGS:
                    entry = self.swn.get(f"{lemma}#{alt}")
                    if entry is not None:
                        break
            if entry is not None:
                swn = dict(entry)

        return SentimentScore(
            lemma=lemma,
            pos=pos,
            polarity=polarity,
            arousal=arousal,
            emotions=emotions,
            intensity=intensity,
            vad=vad,
            swn=swn,
        )


class EmbeddingTable:
    """Static word vectors: a float32 matrix plus a word -> row index."""

    __slots__ = ("_index", "_matrix", "_unit", "dim")

    def __init__(self, vectors: dict[str, list[float]] | None = None) -> None:
        self._index: dict[str, int] = {}
        self._matrix = np.zeros((0, 0), dtype=np.float32)
        self._unit = self._matrix
        self.dim = 0
        if vectors:
            self.load(vectors)

    def load(self, vectors: dict[str, list[float]]) -> None:
        dims = {len(v) for v in vectors.values()}
        if len(dims) > 1:
            raise ValueError(f"inconsistent vector dimensions: {sorted(dims)}")
        dim = dims.pop() if dims else 0
        words = list(vectors)
        matrix = np.array([vectors[w] for w in words], dtype=np.float32).reshape(len(words), dim)
        self.load_matrix({w: i for i, w in enumerate(words)}, matrix)

    def load_matrix(self, index: dict[str, int], matrix: np.ndarray) -> None:
        """Load a (vocab, dim) matrix whose rows are addressed by ``index``."""
        if matrix.ndim != 2 or matrix.shape[0] != len(index):
            raise ValueError(
                f"matrix shape {matrix.shape} does not fit {len(index)} words"
            )
        self._matrix = matrix.astype(np.float32)
        self._unit = normalize_rows(self._matrix)
        self._index = dict(index)
        self.dim = int(matrix.shape[1])

    @property
    def state(self) -> ResourceState:
        return ResourceState.READY if self._index else ResourceState.UNLOADED

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, word: object) -> bool:
        return word in self._index

    def vector(self, word: str) -> np.ndarray | None:
        idx = self._index.get(word)
        if idx is None:
            return None
        return self._matrix[idx]

    def similarity(self, a: str, b: str) -> float:
        ia = self._index.get(a)
        ib = self._index.get(b)
        if ia is None or ib is None:
            return 0.0
        return float(np.dot(self._unit[ia], self._unit[ib]))

    def most_similar(
        self,
        word: str,
        top_k: int = 10,
        vocab_filter: set[str] | None = None,
    ) -> list[tuple[str, float]]:
        """Nearest neighbours by cosine, optionally restricted to a vocabulary."""
        idx = self._index.get(word)
        if idx is None:
            return []
        sims = self._unit @ self._unit[idx]
        results = [
            (cand, float(sims[row]))
            for cand, row in self._index.items()
            if cand != word and (vocab_filter is None or cand in vocab_filter)
        ]
        results.sort(key=lambda x: x[1], reverse=True)
        return results[:top_k]


@dataclass(slots=True)
class LexicalResources:
    """The set of collaborators one analysis reads. All start unloaded."""

    pos: PosTagger = field(default_factory=PosTagger)
    lemmatizer: Lemmatizer = field(default_factory=Lemmatizer)
    synsets: SynsetGraph = field(default_factory=SynsetGraph)
    sentiment: SentimentLexicon = field(default_factory=SentimentLexicon)
    embeddings: EmbeddingTable = field(default_factory=EmbeddingTable)

    def status(self) -> dict[str, ResourceState]:
        return {
            "pos": self.pos.state,
            "lemmatizer": self.lemmatizer.state,
            "synsets": self.synsets.state,
            "sentiment": self.sentiment.state,
            "embeddings": self.embeddings.state,
        }


def pos_of(resources: LexicalResources, word: str) -> str:
    """POS tag of ``word``, or the default tag when the tagger is unloaded."""
    if resources.pos.state is not ResourceState.READY:
        return DEFAULT_POS
    with resource_call("pos"):
        return resources.pos.tag(word)
