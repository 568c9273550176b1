"""Tests for sentiment lookup, caching and negation windows."""

import pytest

from texturas import SentimentLexicon
from texturas._sentiment import NegationWindow, SentimentCache, SentimentEnricher


def test_polarity_from_valence(resources):
    score = SentimentEnricher(resources.sentiment).score("bueno", "a")
    assert score.polarity == pytest.approx(0.6)
    assert score.arousal == pytest.approx(0.5)
    assert score.has


def test_emotions_and_swn(resources):
    score = SentimentEnricher(resources.sentiment).score("malo", "a")
    assert score.emotions == frozenset({"anger", "disgust"})
    assert score.swn == {"pos": 0.0, "neg": 0.625}


def test_swn_pos_fallback(resources):
    """A SentiWordNet entry under another POS is still found."""
    score = SentimentEnricher(resources.sentiment).score("bueno", "n")
    assert score.swn == {"pos": 0.75, "neg": 0.0}


def test_unknown_lemma(resources):
    score = SentimentEnricher(resources.sentiment).score("casa", "n")
    assert score.polarity is None
    assert score.emotions == frozenset()
    assert not score.has


def test_cache_hits(resources):
    enricher = SentimentEnricher(resources.sentiment)
    first = enricher.score("bueno", "a")
    second = enricher.score("bueno", "a")
    assert first is second
    assert len(enricher.cache) == 1
    assert enricher.cache.hits == 1
    assert "bueno#a" in enricher.cache


def test_cache_keyed_by_pos(resources):
    enricher = SentimentEnricher(resources.sentiment)
    enricher.score("bueno", "a")
    enricher.score("bueno", "n")
    assert len(enricher.cache) == 2


def test_shared_cache(resources):
    cache = SentimentCache()
    SentimentEnricher(resources.sentiment, cache).score("malo", "a")
    SentimentEnricher(resources.sentiment, cache).score("malo", "a")
    assert cache.hits == 1
    cache.clear()
    assert len(cache) == 0
    assert cache.hits == 0


def test_unloaded_lexicon_not_cached():
    enricher = SentimentEnricher(SentimentLexicon())
    assert not enricher.ready
    score = enricher.score("bueno", "a")
    assert score.polarity is None
    assert len(enricher.cache) == 0


def test_negation_flips_next_content_token():
    window = NegationWindow()
    assert window.apply(None, is_negation=True, is_stop=True) is None
    assert window.apply(0.6, is_negation=False, is_stop=False) == pytest.approx(-0.6)


def test_negation_window_length():
    """Three tokens after the cue; stop words use a slot without flipping."""
    window = NegationWindow()
    window.apply(None, is_negation=True, is_stop=True)
    assert window.apply(None, is_negation=False, is_stop=True) is None
    assert window.apply(0.5, is_negation=False, is_stop=False) == -0.5
    assert window.apply(0.5, is_negation=False, is_stop=False) == -0.5
    assert window.apply(0.5, is_negation=False, is_stop=False) == 0.5
    assert window.remaining == 0


def test_negation_tokens_without_polarity_use_slots():
    window = NegationWindow(size=1)
    window.apply(None, is_negation=True, is_stop=True)
    assert window.apply(None, is_negation=False, is_stop=False) is None
    assert window.apply(0.3, is_negation=False, is_stop=False) == 0.3


def test_second_cue_reopens_window():
    window = NegationWindow()
    window.apply(None, is_negation=True, is_stop=True)
    window.apply(0.2, is_negation=False, is_stop=False)
    window.apply(None, is_negation=True, is_stop=True)
    assert window.remaining == 3
