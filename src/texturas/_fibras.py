"""Fibras: equal-size temporal segmentation, node-word selection,
per-segment activation with embedding boost, and k-means clustering."""

from __future__ import annotations

import logging
from collections import Counter
from typing import TYPE_CHECKING

import numpy as np

from ._pipeline import check_positive
from ._resources import normalize_rows, resource_call
from ._stop_words import TRACKED_EMOTIONS
from ._types import (
    FibrasResult,
    ResourceState,
    Segment,
    SegmentCell,
    SegmentTone,
    SelectionMode,
    SortMode,
)

if TYPE_CHECKING:
    from ._resources import EmbeddingTable
    from ._types import EnrichedToken

logger = logging.getLogger(__name__)

SIMILARITY_THRESHOLD = 0.4
KMEANS_MAX_ITER = 20
MIN_PERSISTENCE = 2


def segment_text(enriched: list[EnrichedToken], num_segments: int) -> list[Segment]:
    """Split content tokens into ``num_segments`` contiguous segments.

    Each segment holds ``len(content) // num_segments`` tokens; the last one
    absorbs the remainder.
    """
    check_positive("num_segments", num_segments)
    content = [t for t in enriched if not t.is_stop]
    size = len(content) // num_segments
    segments: list[Segment] = []
    for s in range(num_segments):
        start = s * size
        end = len(content) if s == num_segments - 1 else (s + 1) * size
        tokens = content[start:end]
        freq_map = dict(Counter(t.lemma for t in tokens))
        segments.append(Segment(index=s, tokens=tokens, freq_map=freq_map))
    return segments


def _rank(
    freq_map: dict[str, int],
    relevance_map: dict[str, float],
    sort_mode: SortMode,
) -> list[str]:
    # Missing or zero relevance counts as the baseline 1
    candidates = [(w, f, relevance_map.get(w) or 1.0) for w, f in freq_map.items()]
    if SortMode(sort_mode) is SortMode.RELEVANCE:
        candidates.sort(key=lambda c: (-c[2], -c[1], c[0]))
    else:
        candidates.sort(key=lambda c: (-c[1], -c[2], c[0]))
    return [c[0] for c in candidates]


def segment_presence(word: str, segments: list[Segment]) -> int:
    """Number of segments in which ``word`` occurs."""
    return sum(1 for seg in segments if seg.freq_map.get(word))


def select_words(
    freq_map: dict[str, int],
    relevance_map: dict[str, float],
    seeds: list[str],
    mode: SelectionMode,
    top_n: int,
    sort_mode: SortMode = SortMode.FREQUENCY,
    segments: list[Segment] | None = None,
) -> list[str]:
    """Pick the node words for a Fibras view.

    seeds: the user's seeds present in the document, in seed order.
    recurrent: top-N by (freq, relevance, word) or (relevance, freq, word).
    persistent: same ranking restricted to words found in at least two
    segments, truncated after filtering.
    """
    mode = SelectionMode(mode)
    if mode is SelectionMode.SEEDS:
        return [w for w in dict.fromkeys(seeds) if freq_map.get(w)]

    ranked = _rank(freq_map, relevance_map, sort_mode)
    if mode is SelectionMode.RECURRENT:
        return ranked[:top_n]

    if segments is None:
        raise ValueError("persistent selection needs the document segments")
    persistent: list[str] = []
    for w in ranked:
        if segment_presence(w, segments) >= MIN_PERSISTENCE:
            persistent.append(w)
            if len(persistent) >= top_n:
                break
    return persistent


def compute_seg_data(
    segments: list[Segment],
    node_words: list[str],
    embeddings: EmbeddingTable | None = None,
    decay: float = 0.5,
    relevance_map: dict[str, float] | None = None,
) -> list[dict[str, SegmentCell]]:
    """Per-segment activation of every node word.

    Activation is the in-segment frequency. An absent word is boosted by
    its most similar present lemma: ``similarity * count * decay`` for
    similarities above 0.4. Relevance is global relevance times activation.
    """
    use_vectors = embeddings is not None and embeddings.state is ResourceState.READY
    relevance_map = relevance_map or {}
    rows: list[dict[str, SegmentCell]] = []
    for seg in segments:
        row: dict[str, SegmentCell] = {}
        for w in node_words:
            base = seg.freq_map.get(w, 0)
            boost = 0.0
            if base == 0 and use_vectors:
                for lemma, count in seg.freq_map.items():
                    with resource_call("embeddings"):
                        sim = embeddings.similarity(w, lemma)
                    if sim > SIMILARITY_THRESHOLD:
                        boost = max(boost, sim * count * decay)
            activation = base + boost
            global_rel = relevance_map.get(w) or 1.0
            row[w] = SegmentCell(
                frequency=base,
                activation=activation,
                relevance=global_rel * activation if activation > 0 else 0.0,
            )
        rows.append(row)
    return rows


def compute_seg_emo(segments: list[Segment]) -> list[dict[str, float]]:
    """Fraction of each segment's tokens flagged with joy, fear, sadness
    and anger."""
    result: list[dict[str, float]] = []
    for seg in segments:
        counts = dict.fromkeys(TRACKED_EMOTIONS, 0)
        for tok in seg.tokens:
            for emo in TRACKED_EMOTIONS:
                if emo in tok.emotions:
                    counts[emo] += 1
        n = len(seg.tokens)
        result.append({e: (c / n if c else 0.0) for e, c in counts.items()})
    return result


def compute_seg_tone(segments: list[Segment]) -> list[SegmentTone]:
    """Mean polarity and arousal per segment over tokens that carry them."""
    tones: list[SegmentTone] = []
    for seg in segments:
        pols = [t.polarity for t in seg.tokens if t.polarity is not None]
        aros = [t.arousal for t in seg.tokens if t.arousal is not None]
        tones.append(SegmentTone(
            polarity=sum(pols) / len(pols) if pols else 0.0,
            arousal=sum(aros) / len(aros) if aros else 0.0,
        ))
    return tones


def cluster_by_vec(
    words: list[str],
    embeddings: EmbeddingTable | None,
    k: int = 6,
    max_iter: int = KMEANS_MAX_ITER,
) -> dict[str, int]:
    """K-means over word vectors with cosine similarity.

    Centroids start at evenly spaced words. Words without a vector get
    cluster 0. With fewer vectors than clusters, ids are assigned round
    robin instead.
    """
    if embeddings is None or embeddings.state is not ResourceState.READY or not words:
        return {w: 0 for w in words}

    num_k = min(k or 6, len(words))
    vec_idx: list[int] = []
    rows: list[np.ndarray] = []
    for i, w in enumerate(words):
        with resource_call("embeddings"):
            v = embeddings.vector(w)
        if v is not None:
            vec_idx.append(i)
            rows.append(v)

    if len(rows) < num_k:
        return {w: i % max(1, num_k) for i, w in enumerate(words)}

    vecs = np.vstack(rows).astype(np.float64)
    unit = normalize_rows(vecs)
    n = len(vecs)
    centroids = vecs[[(c * n) // num_k for c in range(num_k)]].copy()
    assignments = np.full(n, -1)
    for _ in range(max_iter):
        # argmax keeps the lowest cluster id on ties
        nearest = (unit @ normalize_rows(centroids).T).argmax(axis=1)
        if np.array_equal(nearest, assignments):
            break
        assignments = nearest
        for c in range(num_k):
            members = vecs[assignments == c]
            if len(members):
                centroids[c] = members.mean(axis=0)

    result = {w: 0 for w in words}
    for pos, wi in enumerate(vec_idx):
        result[words[wi]] = int(assignments[pos])
    return result


def compute_fibras(
    enriched: list[EnrichedToken],
    freq_map: dict[str, int],
    relevance_map: dict[str, float],
    embeddings: EmbeddingTable | None,
    seeds: list[str],
    num_segments: int = 10,
    mode: SelectionMode = SelectionMode.RECURRENT,
    top_n: int = 25,
    decay: float = 0.5,
    sort_mode: SortMode = SortMode.FREQUENCY,
) -> FibrasResult:
    """Everything a Fibras view needs: segments, node words, activations,
    emotion and tone profiles, normalisation maxima and clusters."""
    check_positive("num_segments", num_segments)
    check_positive("top_n", top_n)

    segments = segment_text(enriched, num_segments)
    node_words = select_words(
        freq_map, relevance_map, seeds, mode, top_n, sort_mode, segments,
    )
    seg_data = compute_seg_data(segments, node_words, embeddings, decay, relevance_map)

    max_freq = max((freq_map.get(w, 0) for w in node_words), default=0)
    max_rel = max((relevance_map.get(w) or 1.0 for w in node_words), default=0.0)
    max_seg_act = 0.0
    max_seg_rel = 0.0
    for row in seg_data:
        for cell in row.values():
            max_seg_act = max(max_seg_act, cell.activation)
            max_seg_rel = max(max_seg_rel, cell.relevance)

    k = min(8, max(3, len(node_words) // 4))
    clusters = cluster_by_vec(node_words, embeddings, k)

    logger.debug(
        "fibras: %d segments, %d node words (%s), %d clusters",
        num_segments, len(node_words), SelectionMode(mode).value,
        len(set(clusters.values())),
    )

    return FibrasResult(
        node_words=node_words,
        segments=segments,
        seg_data=seg_data,
        seg_emo=compute_seg_emo(segments),
        seg_tone=compute_seg_tone(segments),
        num_segments=num_segments,
        max_freq=max_freq or 1,
        max_rel=max_rel or 1.0,
        max_seg_activation=max_seg_act or 1.0,
        max_seg_relevance=max_seg_rel or 1.0,
        decay=decay,
        clusters=clusters,
    )
