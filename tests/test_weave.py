"""Tests for Weave seed expansion, matrices, aggregation and passages."""

import pytest

from texturas import RelationKind
from texturas._pipeline import analyze
from texturas._types import SeedExpansion, SeedGroup, WeaveResult
from texturas._weave import (
    MAX_PASSAGES,
    compute_stack_weave,
    compute_union_terms,
    compute_weave,
    expand_seeds,
    find_passages,
)

CORPUS = {"gato": 2, "felino": 1, "animal": 1, "perro": 1, "cola": 1, "casa": 1}


def _weave(seed, expansions, cooc=None):
    """Minimal per-document weave for aggregation tests."""
    group = SeedGroup(seed, [SeedExpansion(w, RelationKind.HYPERNYM, d) for w, d in expansions])
    words = [seed] + [w for w, _ in expansions]
    cooc = cooc or {}
    return WeaveResult(
        terms=[],
        groups=[group],
        cooccurrence={a: {b: cooc.get((a, b), cooc.get((b, a), 0)) for b in words} for a in words},
        activation={a: {b: 0.5 for b in words} for a in words},
        proximity={a: {b: 1.0 for b in words} for a in words},
        max_cooc=1,
        max_activation=1.0,
    )


def test_expand_seeds(resources):
    groups = expand_seeds(["gato"], resources, CORPUS, 2)
    assert len(groups) == 1
    got = [(e.word, e.relation, e.distance) for e in groups[0].expansions]
    assert got == [
        ("cola", RelationKind.MERONYM, 1),
        ("felino", RelationKind.HYPERNYM, 1),
        ("animal", RelationKind.HYPERNYM, 2),
    ]


def test_expand_seeds_depth(resources):
    groups = expand_seeds(["gato"], resources, CORPUS, 3)
    words = [e.word for e in groups[0].expansions]
    assert words[-1] == "perro"
    assert groups[0].expansions[-1].distance == 3


def test_expand_seeds_skips_absent_seeds(resources):
    groups = expand_seeds(["ratón", "perro"], resources, CORPUS, 1)
    assert [g.seed for g in groups] == ["perro"]
    assert [e.word for e in groups[0].expansions] == ["animal"]


def test_expansions_only_corpus_words(resources):
    groups = expand_seeds(["gato"], resources, {"gato": 1, "animal": 1}, 2)
    assert [e.word for e in groups[0].expansions] == ["animal"]


def test_expand_without_synsets(bare_resources):
    groups = expand_seeds(["gato"], bare_resources, CORPUS, 2)
    assert groups[0].expansions == []


def test_union_keeps_minimum_distance():
    """Document A has perro at distance 2, B at distance 1: the union keeps 1."""
    weaves = {
        "a": _weave("gato", [("perro", 2)]),
        "b": _weave("gato", [("perro", 1)]),
    }
    terms = compute_union_terms(weaves)
    assert [(t.word, t.parent, t.distance) for t in terms] == [
        ("gato", None, 0),
        ("perro", "gato", 1),
    ]
    assert terms[0].relation is RelationKind.SEED


def test_union_skips_missing_documents():
    terms = compute_union_terms({"a": None, "b": _weave("gato", [("felino", 1)])})
    assert [t.word for t in terms] == ["gato", "felino"]


def test_union_merges_words_across_documents():
    weaves = {
        "a": _weave("gato", [("felino", 1)]),
        "b": _weave("gato", [("animal", 2), ("cola", 1)]),
    }
    assert [t.word for t in compute_union_terms(weaves)] == ["gato", "cola", "felino", "animal"]


def test_stack_weave_sums():
    weaves = {
        "a": _weave("gato", [("perro", 1)], {("gato", "perro"): 2}),
        "b": _weave("gato", [("perro", 1)], {("gato", "perro"): 3}),
        "c": _weave("gato", [("perro", 1)]),
        "d": None,
    }
    stack = compute_stack_weave(weaves, compute_union_terms(weaves))
    cell = stack.cells["gato"]["perro"]
    assert cell.doc_count == 2
    assert cell.sum_cooc == 5
    assert cell.sum_activation == pytest.approx(1.5)
    assert cell.sum_proximity == pytest.approx(3.0)
    assert stack.n_docs == 4
    assert stack.max_cooc == 5


def test_stack_weave_empty():
    stack = compute_stack_weave({}, [], total_docs=0)
    assert stack.cells == {}
    assert stack.max_cooc == 1.0
    assert stack.max_activation == 1.0
    assert stack.max_proximity == 1.0


def test_compute_weave_matrices(resources):
    result = analyze("El gato come. El felino come.", resources)
    groups = expand_seeds(["gato"], resources, result.freq_map, 2)
    weave = compute_weave(
        groups, result.filtered_lemmas, result.freq_map, resources, 2, 0.5,
        sentences=result.stage1.filtered_sentences,
    )
    assert [t.word for t in weave.terms] == ["gato", "felino"]
    assert weave.cooccurrence["gato"]["felino"] == 0
    assert weave.activation["gato"]["felino"] == pytest.approx(0.5)
    assert weave.activation["felino"]["gato"] == pytest.approx(0.5)
    assert weave.proximity["gato"]["felino"] == pytest.approx(0.5)
    assert weave.proximity["gato"]["gato"] == 1.0
    assert weave.max_cooc == 1
    assert weave.max_activation == pytest.approx(0.5)


def test_compute_weave_symmetric(resources, text):
    result = analyze(text, resources)
    groups = expand_seeds(["gato", "perro"], resources, result.freq_map, 2)
    weave = compute_weave(groups, result.filtered_lemmas, result.freq_map, resources, 2, 0.5)
    words = list(weave.cooccurrence)
    for a in words:
        for b in words:
            assert weave.cooccurrence[a][b] == weave.cooccurrence[b][a]
            assert weave.activation[a][b] == weave.activation[b][a]
            assert weave.proximity[a][b] == weave.proximity[b][a]


def test_find_passages(resources):
    result = analyze("El gato come pescado en la casa.", resources)
    passages = find_passages(result.enriched, "gato", "casa")
    assert len(passages) == 1
    highlighted = [t.surface for t in passages[0] if t.highlighted]
    assert highlighted == ["gato", "casa"]
    assert passages[0][0].surface == "El"


def test_find_passages_limit(resources):
    text = " ".join(["gato casa"] * 60)
    result = analyze(text, resources)
    passages = find_passages(result.enriched, "gato", "casa")
    assert len(passages) == MAX_PASSAGES
    assert all(sum(t.highlighted for t in p) >= 2 for p in passages)


def test_find_passages_too_far(resources):
    text = "gato " + "pescado " * 20 + "casa"
    result = analyze(text, resources)
    assert find_passages(result.enriched, "gato", "casa", window=5) == []
    assert len(find_passages(result.enriched, "gato", "casa", window=10)) == 1
