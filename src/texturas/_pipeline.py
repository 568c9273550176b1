"""Two-stage analysis pipeline.

Stage 1 tokenizes, tags and lemmatizes the text, then builds frequency
statistics, n-grams, the windowed co-occurrence matrix over the top-N
vocabulary and its Louvain communities. Stage 2 adds spreading-activation
relevance and per-token sentiment, and regroups tokens into paragraphs.
Stage 1 output is read-only input to Stage 2, so Stage 2 can be re-run
with other decay/flow settings.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import TYPE_CHECKING

from ._activation import spread_activation
from ._community import louvain, modularity
from ._resources import pos_of, resource_call
from ._sentiment import NegationWindow, SentimentEnricher
from ._stop_words import NEGATION_WORDS, STOP_WORDS
from ._tokenizer import Tokenizer
from ._types import (
    AnalysisResult,
    CooccurrenceScope,
    EnrichedToken,
    Flow,
    ResourceState,
    SentimentScore,
    Stage1Result,
    Token,
    TokenKind,
)

if TYPE_CHECKING:
    from ._resources import LexicalResources

logger = logging.getLogger(__name__)

DEFAULT_WINDOW = 5
_SENTENCE_END = frozenset(".!?…")

_tokenizer: Tokenizer | None = None


def _default_tokenizer() -> Tokenizer:
    global _tokenizer
    if _tokenizer is None:
        _tokenizer = Tokenizer()
    return _tokenizer


def rank_counts(items: list[str]) -> list[tuple[str, int]]:
    """Count items and rank by count descending.

    Ties keep discovery order (position of first occurrence).
    """
    counts = Counter(items)   # insertion-ordered by first occurrence
    return sorted(counts.items(), key=lambda p: -p[1])


def ngrams(lemmas: list[str], n: int) -> list[tuple[str, int]]:
    """Ranked space-joined n-grams over a lemma sequence."""
    grams = [" ".join(lemmas[i:i + n]) for i in range(len(lemmas) - n + 1)]
    return rank_counts(grams)


def build_cooccurrence(
    lemmas: list[str],
    vocab: list[str],
    window: int = DEFAULT_WINDOW,
    sentences: list[int] | None = None,
) -> dict[str, dict[str, int]]:
    """Symmetric windowed co-occurrence counts restricted to ``vocab``.

    When ``sentences`` (one sentence id per lemma) is given, pairs in
    different sentences are not counted. The diagonal stays empty.
    """
    vocab_set = set(vocab)
    cooc: dict[str, dict[str, int]] = {w: {} for w in vocab}
    last = len(lemmas) - 1
    for i, w in enumerate(lemmas):
        if w not in vocab_set:
            continue
        row = cooc[w]
        for j in range(max(0, i - window), min(last, i + window) + 1):
            if i == j:
                continue
            b = lemmas[j]
            if b == w or b not in vocab_set:
                continue
            if sentences is not None and sentences[i] != sentences[j]:
                continue
            row[b] = row.get(b, 0) + 1
    return cooc


def _lemmatize(resources: LexicalResources, low: str, pos: str) -> str:
    if resources.lemmatizer.state is not ResourceState.READY:
        return low
    with resource_call("lemmatizer"):
        return resources.lemmatizer.lemmatize(low, pos)


def analyze_stage1(
    text: str,
    resources: LexicalResources,
    top_n: int,
    *,
    window: int = DEFAULT_WINDOW,
    scope: CooccurrenceScope = CooccurrenceScope.SENTENCE,
    enricher: SentimentEnricher | None = None,
    tokenizer: Tokenizer | None = None,
) -> Stage1Result:
    """Frequency, n-gram, co-occurrence and community statistics."""
    raw_tokens, negated = (tokenizer or _default_tokenizer()).process(text)

    tokens: list[Token] = []
    filtered: list[str] = []
    filtered_sentences: list[int] = []
    para_idx = 0
    sentence_idx = 0
    word_count = 0

    for i, rt in enumerate(raw_tokens):
        if rt.kind is not TokenKind.WORD:
            if rt.kind is TokenKind.PARAGRAPH:
                para_idx += 1
                sentence_idx += 1
            elif rt.kind is TokenKind.SYMBOL and _SENTENCE_END.intersection(rt.surface):
                sentence_idx += 1
            tokens.append(Token(
                surface=rt.surface, lemma=rt.surface, pos="x", is_stop=True,
                is_negation=False, kind=rt.kind, paragraph_index=para_idx,
            ))
            continue

        word_count += 1
        low = rt.surface.lower()
        pos = pos_of(resources, low)
        lemma = _lemmatize(resources, low, pos)
        is_neg = low in NEGATION_WORDS or i in negated
        is_stop = lemma in STOP_WORDS or low in STOP_WORDS or is_neg
        tokens.append(Token(
            surface=rt.surface, lemma=lemma, pos=pos, is_stop=is_stop,
            is_negation=is_neg, kind=TokenKind.WORD, paragraph_index=para_idx,
        ))
        if not is_stop:
            filtered.append(lemma)
            filtered_sentences.append(sentence_idx)

    freq_pairs = rank_counts(filtered)
    freq_map = dict(freq_pairs)
    total = len(filtered)
    rel_freq_map = {k: v / total for k, v in freq_map.items()} if total else {}

    top_words = freq_pairs[:top_n]
    vocab = [w for w, _ in top_words]
    cooc = build_cooccurrence(
        filtered, vocab, window,
        filtered_sentences if CooccurrenceScope(scope) is CooccurrenceScope.SENTENCE else None,
    )
    communities = louvain(vocab, cooc)

    sentiment_map: dict[str, SentimentScore] = {}
    if enricher is not None and enricher.ready:
        for w in vocab:
            sentiment_map[w] = enricher.score(w, pos_of(resources, w))

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "stage 1: %d words, %d content, %d distinct, %d communities (Q=%.3f)",
            word_count, total, len(freq_map), len(set(communities.values())),
            modularity(communities, cooc),
        )

    return Stage1Result(
        tokens=tokens,
        filtered_lemmas=filtered,
        filtered_sentences=filtered_sentences,
        freq_map=freq_map,
        rel_freq_map=rel_freq_map,
        freq_pairs=freq_pairs,
        top_words=top_words,
        cooccurrence=cooc,
        communities=communities,
        sentiment_map=sentiment_map,
        bigrams=ngrams(filtered, 2)[:top_n],
        trigrams=ngrams(filtered, 3)[:top_n],
        max_freq=freq_pairs[0][1] if freq_pairs else 1,
        content_count=total,
        word_count=word_count,
    )


def _structural(surface: str, kind: TokenKind, para: int) -> EnrichedToken:
    return EnrichedToken(
        surface=surface, lemma=surface, pos="x", is_stop=True, kind=kind,
        relevance=0.0, frequency=0, polarity=None, arousal=None,
        emotions=frozenset(), community_id=-1, paragraph_index=para,
    )


def analyze_stage2(
    stage1: Stage1Result,
    resources: LexicalResources,
    synset_depth: int,
    decay: float,
    flow: Flow = Flow.BIDIRECTIONAL,
    *,
    enricher: SentimentEnricher | None = None,
) -> AnalysisResult:
    """Relevance, sentiment and paragraph structure on top of Stage 1."""
    if enricher is None:
        enricher = SentimentEnricher(resources.sentiment)
    freq_map = stage1.freq_map
    relevance_map = spread_activation(freq_map, resources, synset_depth, decay, flow)
    max_rel = max(relevance_map.values(), default=0.0) or 1.0

    negation = NegationWindow()
    enriched: list[EnrichedToken] = []
    for tok in stage1.tokens:
        if tok.kind is not TokenKind.WORD:
            continue
        sent = enricher.score(tok.lemma, tok.pos)
        polarity = negation.apply(
            sent.polarity, is_negation=tok.is_negation, is_stop=tok.is_stop,
        )
        enriched.append(EnrichedToken(
            surface=tok.surface,
            lemma=tok.lemma,
            pos=tok.pos,
            is_stop=tok.is_stop,
            kind=tok.kind,
            relevance=relevance_map.get(tok.lemma, 0.0),
            frequency=freq_map.get(tok.lemma, 0),
            polarity=polarity,
            arousal=sent.arousal,
            emotions=sent.emotions,
            community_id=stage1.communities.get(tok.lemma, -1),
            is_negation=tok.is_negation,
            paragraph_index=tok.paragraph_index,
        ))

    paragraphs: list[list[EnrichedToken]] = [[]]
    word_idx = 0
    for tok in stage1.tokens:
        current = paragraphs[-1]
        if tok.kind is TokenKind.PARAGRAPH:
            paragraphs.append([])
        elif tok.kind is TokenKind.SENTENCE:
            if current:
                current.append(_structural(" ", TokenKind.SENTENCE, tok.paragraph_index))
        elif tok.kind is TokenKind.SYMBOL:
            current.append(_structural(tok.surface, TokenKind.SYMBOL, tok.paragraph_index))
        else:
            current.append(enriched[word_idx])
            word_idx += 1

    return AnalysisResult(
        stage1=stage1,
        enriched=enriched,
        paragraphs=paragraphs,
        relevance_map=relevance_map,
        max_rel=max_rel,
    )


def check_positive(name: str, value: int) -> None:
    if value <= 0:
        raise ValueError(f"{name} must be >= 1, got {value}")


def analyze(
    text: str,
    resources: LexicalResources,
    top_n: int = 25,
    synset_depth: int = 2,
    decay: float = 0.5,
    flow: Flow = Flow.BIDIRECTIONAL,
    *,
    window: int = DEFAULT_WINDOW,
    scope: CooccurrenceScope = CooccurrenceScope.SENTENCE,
    enricher: SentimentEnricher | None = None,
) -> AnalysisResult:
    """Run Stage 1 and Stage 2 over ``text``.

    Raises:
        ValueError: If ``top_n`` or ``window`` is not positive,
            ``synset_depth`` is negative or ``decay`` is outside (0, 1).
    """
    check_positive("top_n", top_n)
    check_positive("window", window)
    if synset_depth < 0:
        raise ValueError(f"synset_depth must be >= 0, got {synset_depth}")
    if not 0.0 < decay < 1.0:
        raise ValueError(f"decay must be in (0, 1), got {decay}")

    if enricher is None:
        enricher = SentimentEnricher(resources.sentiment)
    stage1 = analyze_stage1(
        text, resources, top_n, window=window, scope=scope, enricher=enricher,
    )
    return analyze_stage2(
        stage1, resources, synset_depth, decay, Flow(flow), enricher=enricher,
    )
