"""Tests for the two-stage analysis pipeline."""

import pytest

from texturas import (
    CooccurrenceScope,
    Flow,
    Lemmatizer,
    LexicalResources,
    PosTagger,
    TokenKind,
)
from texturas._pipeline import (
    analyze,
    analyze_stage2,
    build_cooccurrence,
    ngrams,
    rank_counts,
)


def test_end_to_end_scenario(resources):
    """Stop words drop out, "come" lemmatizes to "comer", windows stay in a sentence."""
    result = analyze("El gato come. El perro come.", resources, top_n=10)
    assert result.freq_map == {"gato": 1, "comer": 2, "perro": 1}
    cooc = result.stage1.cooccurrence
    assert cooc["gato"]["comer"] == 1
    assert cooc["comer"]["perro"] == 1
    assert cooc["gato"].get("perro", 0) == 0


def test_document_scope_crosses_sentences(resources):
    result = analyze(
        "El gato come. El perro come.", resources, top_n=10,
        scope=CooccurrenceScope.DOCUMENT,
    )
    cooc = result.stage1.cooccurrence
    assert cooc["gato"]["perro"] == 1
    assert cooc["comer"]["perro"] == 2


def test_frequency_invariant(resources, text):
    """Frequencies sum to the number of non-stop word tokens."""
    result = analyze(text, resources)
    content = [
        t for t in result.stage1.tokens
        if t.kind is TokenKind.WORD and not t.is_stop
    ]
    assert sum(result.freq_map.values()) == len(content) == 17
    assert result.stage1.content_count == 17


def test_relative_frequency(resources, text):
    result = analyze(text, resources)
    rel = result.stage1.rel_freq_map
    assert rel["comer"] == pytest.approx(3 / 17)
    assert sum(rel.values()) == pytest.approx(1.0)


def test_cooccurrence_symmetric(resources, text):
    result = analyze(text, resources, scope=CooccurrenceScope.DOCUMENT)
    cooc = result.stage1.cooccurrence
    for a, row in cooc.items():
        assert a not in row
        for b, v in row.items():
            assert cooc[b][a] == v


def test_top_words_ranked(resources, text):
    result = analyze(text, resources, top_n=3)
    assert result.top_words == [("comer", 3), ("gato", 2), ("perro", 2)]
    assert set(result.stage1.cooccurrence) == {"comer", "gato", "perro"}
    assert set(result.communities) == {"comer", "gato", "perro"}


def test_negation_marks_stop(resources):
    result = analyze("no bueno", resources)
    neg = result.stage1.tokens[0]
    assert neg.is_negation
    assert neg.is_stop
    assert result.freq_map == {"bueno": 1}


def test_negated_polarity(resources):
    result = analyze("no bueno", resources)
    assert result.enriched[1].polarity == pytest.approx(-0.6)


def test_negation_skips_stop_words(resources):
    """"no es malo": the stop word uses up a slot, "malo" is still flipped."""
    result = analyze("El gato no es malo.", resources)
    malo = [t for t in result.enriched if t.lemma == "malo"][0]
    assert malo.polarity == pytest.approx(0.8)


def test_negation_only_from_cue_words():
    """Content words near a negation cue still count."""
    result = analyze("Lo hizo de ningún modo. El modo correcto.", LexicalResources())
    assert result.freq_map["modo"] == 2
    negations = [t.surface for t in result.stage1.tokens if t.is_negation]
    assert negations == ["ningún"]


def test_unknown_words_keep_their_form():
    """A word missing from the lemma table is not folded into a similar lemma."""
    res = LexicalResources(pos=PosTagger({}), lemmatizer=Lemmatizer({"come": "comer"}))
    result = analyze("El gato come comida.", res)
    assert result.freq_map == {"gato": 1, "comer": 1, "comida": 1}


def test_empty_text(resources):
    result = analyze("", resources)
    assert result.freq_map == {}
    assert result.enriched == []
    assert result.communities == {}
    assert result.stage1.max_freq == 1
    assert result.max_rel == 1.0


def test_only_stop_words(resources):
    result = analyze("el de la y", resources)
    assert result.freq_map == {}
    assert result.stage1.rel_freq_map == {}
    assert all(t.is_stop for t in result.enriched)


def test_no_resources():
    """Without tagger or lemmatizer, lemmas are lowercase surfaces."""
    result = analyze("Gatos y GATOS", LexicalResources())
    assert result.freq_map == {"gatos": 2}
    assert result.relevance_map == {"gatos": 1.0}
    assert result.enriched[0].polarity is None


def test_paragraphs(resources, text):
    result = analyze(text, resources)
    assert len(result.paragraphs) == 2
    assert {t.paragraph_index for t in result.paragraphs[1]} == {1}
    first = result.paragraphs[0]
    assert first[0].lemma == "el"
    assert any(t.kind is TokenKind.SENTENCE for t in first)
    assert any(t.kind is TokenKind.SYMBOL for t in first)


def test_enriched_fields(result):
    gato = [t for t in result.enriched if t.lemma == "gato"][0]
    assert gato.frequency == 2
    assert gato.relevance == result.relevance_map["gato"]
    assert gato.community_id == result.communities.get("gato", -1)


def test_stage2_rerun_keeps_stage1(resources, text):
    """Re-running Stage 2 reads Stage 1 without changing it."""
    first = analyze(text, resources)
    freq_before = dict(first.stage1.freq_map)
    second = analyze_stage2(first.stage1, resources, 2, 0.9, Flow.UP)
    assert second.stage1 is first.stage1
    assert first.stage1.freq_map == freq_before
    assert second.relevance_map != first.relevance_map


def test_sentiment_map(result):
    assert result.stage1.sentiment_map["comer"].polarity is None
    assert result.stage1.sentiment_map["gato"].lemma == "gato"


@pytest.mark.parametrize("kwargs", [
    {"top_n": 0},
    {"top_n": -3},
    {"window": 0},
    {"synset_depth": -1},
    {"decay": 0.0},
    {"decay": 1.0},
])
def test_invalid_arguments(resources, kwargs):
    with pytest.raises(ValueError):
        analyze("gato", resources, **kwargs)


def test_rank_counts_ties_keep_discovery_order():
    assert rank_counts(["b", "a", "b", "c", "a"]) == [("b", 2), ("a", 2), ("c", 1)]


def test_ngrams():
    lemmas = ["gato", "comer", "gato", "comer", "pez"]
    assert ngrams(lemmas, 2) == [("gato comer", 2), ("comer gato", 1), ("comer pez", 1)]
    assert ngrams(lemmas, 3)[0] == ("gato comer gato", 1)
    assert ngrams(["gato"], 2) == []


def test_bigram_map(resources):
    result = analyze("El gato come. El gato come.", resources)
    assert result.stage1.bigram_map["gato comer"] == 2


def test_build_cooccurrence_window():
    lemmas = ["a", "x", "x", "b"]
    assert build_cooccurrence(lemmas, ["a", "b"], window=2)["a"] == {}
    assert build_cooccurrence(lemmas, ["a", "b"], window=3)["a"] == {"b": 1}
