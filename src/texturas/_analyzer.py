"""Analyzer: one session over a set of lexical resources and settings."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable, Mapping

from ._activation import pair_activation, spread_activation, synset_distance
from ._config import AnalysisConfig
from ._fibras import compute_fibras
from ._pipeline import analyze_stage1, analyze_stage2
from ._resources import LexicalResources, resource_call
from ._sentiment import SentimentCache, SentimentEnricher
from ._tokenizer import Tokenizer
from ._types import CooccurrenceScope, ResourceState
from ._weave import (
    compute_stack_weave,
    compute_union_terms,
    compute_weave,
    expand_seeds,
    find_passages,
)

if TYPE_CHECKING:
    from ._types import (
        AnalysisResult,
        FibrasResult,
        PassageToken,
        StackWeave,
        WeaveResult,
    )

logger = logging.getLogger(__name__)


class Analyzer:
    """Main analysis engine. Holds the loaded resources and exposes the public API.

    The sentiment cache lives as long as the analyzer; call
    :meth:`clear_cache` after swapping lexicons.
    """

    __slots__ = ("resources", "config", "_tokenizer", "_enricher")

    def __init__(
        self,
        resources: LexicalResources | None = None,
        config: AnalysisConfig | None = None,
    ) -> None:
        self.resources = resources if resources is not None else LexicalResources()
        self.config = (config if config is not None else AnalysisConfig()).validate()
        self._tokenizer = Tokenizer()
        self._enricher = SentimentEnricher(self.resources.sentiment, SentimentCache())

    def _settings(self, overrides: dict[str, Any]) -> AnalysisConfig:
        return self.config.replace(**overrides) if overrides else self.config

    # -- Document analysis --

    def analyze(self, text: str, **overrides: Any) -> AnalysisResult:
        """Run both stages over ``text``.

        Keyword arguments override single :class:`AnalysisConfig` fields
        for this call only.
        """
        cfg = self._settings(overrides)
        stage1 = analyze_stage1(
            text, self.resources, cfg.top_n,
            window=cfg.window, scope=cfg.cooccurrence_scope,
            enricher=self._enricher, tokenizer=self._tokenizer,
        )
        return analyze_stage2(
            stage1, self.resources, cfg.synset_depth, cfg.decay, cfg.flow,
            enricher=self._enricher,
        )

    def analyze_batch(self, texts: Iterable[str], **overrides: Any) -> list[AnalysisResult]:
        """Analyze several texts with the same settings."""
        return [self.analyze(t, **overrides) for t in texts]

    def reanalyze(self, result: AnalysisResult, **overrides: Any) -> AnalysisResult:
        """Re-run Stage 2 on an existing Stage 1 (e.g. with another decay or flow)."""
        cfg = self._settings(overrides)
        return analyze_stage2(
            result.stage1, self.resources, cfg.synset_depth, cfg.decay, cfg.flow,
            enricher=self._enricher,
        )

    # -- Spreading activation --

    def spread_activation(self, freq_map: dict[str, int], **overrides: Any) -> dict[str, float]:
        cfg = self._settings(overrides)
        return spread_activation(freq_map, self.resources, cfg.synset_depth, cfg.decay, cfg.flow)

    def pair_activation(
        self, seed: str, freq_map: dict[str, int], **overrides: Any,
    ) -> dict[str, float]:
        cfg = self._settings(overrides)
        return pair_activation(
            seed, freq_map, self.resources, cfg.synset_depth, cfg.decay, cfg.flow,
        )

    def synset_distance(self, a: str, b: str, max_hops: int | None = None) -> int:
        """Hop distance between two lemmas; ``max_hops`` defaults to twice
        the configured synset depth."""
        if max_hops is None:
            max_hops = self.config.synset_depth * 2
        return synset_distance(a, b, self.resources, max_hops)

    def similar_words(
        self,
        word: str,
        top_k: int = 10,
        result: AnalysisResult | None = None,
    ) -> list[tuple[str, float]]:
        """Embedding neighbours of ``word``, restricted to a document's
        lemmas when ``result`` is given."""
        if self.resources.embeddings.state is not ResourceState.READY:
            return []
        vocab = set(result.freq_map) if result is not None else None
        with resource_call("embeddings"):
            return self.resources.embeddings.most_similar(word, top_k, vocab)

    # -- Weave --

    def weave(
        self, result: AnalysisResult, seeds: list[str], **overrides: Any,
    ) -> WeaveResult | None:
        """Seed-centred term matrices for one document; None when no seed
        occurs in it."""
        cfg = self._settings(overrides)
        groups = expand_seeds(seeds, self.resources, result.freq_map, cfg.synset_depth)
        if not groups:
            logger.debug("weave: none of %d seeds occur in the document", len(seeds))
            return None
        sentences = None
        if cfg.cooccurrence_scope is CooccurrenceScope.SENTENCE:
            sentences = result.stage1.filtered_sentences
        return compute_weave(
            groups, result.filtered_lemmas, result.freq_map, self.resources,
            cfg.synset_depth, cfg.decay, cfg.flow, cfg.window, sentences,
        )

    def stack_weave(
        self,
        weaves: Mapping[str, WeaveResult | None],
        total_docs: int | None = None,
    ) -> StackWeave:
        """Aggregate per-document weaves over their union term set."""
        union = compute_union_terms(weaves)
        return compute_stack_weave(weaves, union, total_docs)

    def passages(
        self, result: AnalysisResult, word_a: str, word_b: str,
    ) -> list[list[PassageToken]]:
        return find_passages(result.enriched, word_a, word_b, self.config.passage_window)

    # -- Fibras --

    def fibras(
        self, result: AnalysisResult, seeds: list[str] | None = None, **overrides: Any,
    ) -> FibrasResult:
        cfg = self._settings(overrides)
        return compute_fibras(
            result.enriched,
            result.freq_map,
            result.relevance_map,
            self.resources.embeddings,
            list(seeds or ()),
            num_segments=cfg.segment_count,
            mode=cfg.selection,
            top_n=cfg.top_n,
            decay=cfg.decay,
            sort_mode=cfg.sort_mode,
        )

    # -- Session --

    def status(self) -> dict[str, ResourceState]:
        return self.resources.status()

    def clear_cache(self) -> None:
        self._enricher.cache.clear()

    @property
    def cache_size(self) -> int:
        return len(self._enricher.cache)
