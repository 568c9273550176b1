"""Weave: seed expansion over the synset graph and per-document /
cross-document term matrices."""

from __future__ import annotations

from typing import TYPE_CHECKING, Mapping

from ._activation import pair_activation, synset_distance
from ._pipeline import DEFAULT_WINDOW, build_cooccurrence
from ._resources import pos_of, resource_call
from ._types import (
    Flow,
    PassageToken,
    RelationKind,
    SeedExpansion,
    SeedGroup,
    StackCell,
    StackWeave,
    WeaveResult,
    WeaveTerm,
)

if TYPE_CHECKING:
    from ._resources import LexicalResources
    from ._types import EnrichedToken

MAX_PASSAGES = 5
PASSAGE_CONTEXT = 8


def expand_seeds(
    seeds: list[str],
    resources: LexicalResources,
    freq_map: dict[str, int],
    depth: int,
) -> list[SeedGroup]:
    """Expand each corpus seed to the corpus words reachable within ``depth``.

    Follows hypernyms, hyponyms and meronyms, tagging each expansion with
    the relation that first reached it. Expansions are sorted by hop
    distance, then alphabetically. Seeds absent from the corpus are skipped.
    """
    groups: list[SeedGroup] = []
    for seed in seeds:
        if seed not in freq_map:
            continue
        expansions: list[SeedExpansion] = []
        visited = {seed}
        frontier = [(seed, pos_of(resources, seed))]
        for h in range(1, depth + 1):
            next_frontier: list[tuple[str, str]] = []
            for word, pos in frontier:
                with resource_call("synsets"):
                    rels = resources.synsets.all_relations(word, pos)
                for target, kind in rels:
                    if target in visited:
                        continue
                    visited.add(target)
                    if target in freq_map:
                        expansions.append(SeedExpansion(target, RelationKind(kind), h))
                    next_frontier.append((target, pos_of(resources, target)))
            frontier = next_frontier
        expansions.sort(key=lambda e: (e.distance, e.word))
        groups.append(SeedGroup(seed, expansions))
    return groups


def _terms_from_groups(groups: list[SeedGroup]) -> list[WeaveTerm]:
    terms: list[WeaveTerm] = []
    for g in groups:
        terms.append(WeaveTerm(g.seed, None, RelationKind.SEED, 0))
        for e in g.expansions:
            terms.append(WeaveTerm(e.word, g.seed, e.relation, e.distance))
    return terms


def compute_weave(
    groups: list[SeedGroup],
    filtered_lemmas: list[str],
    freq_map: dict[str, int],
    resources: LexicalResources,
    depth: int,
    decay: float,
    flow: Flow = Flow.BIDIRECTIONAL,
    window: int = DEFAULT_WINDOW,
    sentences: list[int] | None = None,
) -> WeaveResult:
    """Co-occurrence, activation and proximity matrices over the term set.

    Activation between two terms is the larger of the two directed pair
    activations; proximity is ``1 / (1 + hops)`` with a hop bound of
    ``2 * depth`` (0 when unreachable).
    """
    terms = _terms_from_groups(groups)
    words = list(dict.fromkeys(t.word for t in terms))

    counts = build_cooccurrence(filtered_lemmas, words, window, sentences)
    cooc = {a: {b: counts[a].get(b, 0) for b in words} for a in words}

    pair = {w: pair_activation(w, freq_map, resources, depth, decay, flow) for w in words}
    activation = {
        a: {b: max(pair[a].get(b, 0.0), pair[b].get(a, 0.0)) for b in words}
        for a in words
    }

    max_hops = depth * 2
    proximity: dict[str, dict[str, float]] = {}
    for a in words:
        row: dict[str, float] = {}
        for b in words:
            d = synset_distance(a, b, resources, max_hops)
            row[b] = 1.0 / (1 + d) if d >= 0 else 0.0
        proximity[a] = row

    max_cooc = 0
    max_act = 0.0
    for a in words:
        for b in words:
            if a != b:
                max_cooc = max(max_cooc, cooc[a][b])
                max_act = max(max_act, activation[a][b])

    return WeaveResult(
        terms=terms,
        groups=groups,
        cooccurrence=cooc,
        activation=activation,
        proximity=proximity,
        max_cooc=max_cooc or 1,
        max_activation=max_act or 1.0,
    )


def compute_union_terms(weaves: Mapping[str, WeaveResult | None]) -> list[WeaveTerm]:
    """Merge per-document seed groups, keeping the minimum distance per
    (seed, word) pair. Seeds appear in first-seen order."""
    by_seed: dict[str, dict[str, tuple[RelationKind, int]]] = {}
    for weave in weaves.values():
        if weave is None:
            continue
        for g in weave.groups:
            merged = by_seed.setdefault(g.seed, {})
            for e in g.expansions:
                prev = merged.get(e.word)
                if prev is None or e.distance < prev[1]:
                    merged[e.word] = (e.relation, e.distance)

    terms: list[WeaveTerm] = []
    for seed, merged in by_seed.items():
        terms.append(WeaveTerm(seed, None, RelationKind.SEED, 0))
        expansions = sorted(merged.items(), key=lambda kv: (kv[1][1], kv[0]))
        for word, (relation, distance) in expansions:
            terms.append(WeaveTerm(word, seed, relation, distance))
    return terms


def compute_stack_weave(
    weaves: Mapping[str, WeaveResult | None],
    union_terms: list[WeaveTerm],
    total_docs: int | None = None,
) -> StackWeave:
    """Sum per-document weave matrices over the union term set.

    Each cell holds the number of documents where the pair co-occurs and
    the summed co-occurrence, activation and proximity.
    """
    words = [t.word for t in union_terms]
    docs = [w for w in weaves.values() if w is not None]
    cells: dict[str, dict[str, StackCell]] = {}
    max_c = max_a = max_p = 0.0

    for a in words:
        row: dict[str, StackCell] = {}
        for b in words:
            doc_count = 0
            sc = sa = sp = 0.0
            for wd in docs:
                cv = wd.cooccurrence.get(a, {}).get(b, 0)
                if cv > 0:
                    doc_count += 1
                sc += cv
                sa += wd.activation.get(a, {}).get(b, 0.0)
                sp += wd.proximity.get(a, {}).get(b, 0.0)
            max_c = max(max_c, sc)
            max_a = max(max_a, sa)
            max_p = max(max_p, sp)
            row[b] = StackCell(doc_count, sc, sa, sp)
        cells[a] = row

    return StackWeave(
        cells=cells,
        max_cooc=max_c or 1.0,
        max_activation=max_a or 1.0,
        max_proximity=max_p or 1.0,
        n_docs=total_docs if total_docs is not None else len(weaves),
    )


def find_passages(
    enriched: list[EnrichedToken],
    word_a: str,
    word_b: str,
    window: int = DEFAULT_WINDOW,
) -> list[list[PassageToken]]:
    """Text windows where ``word_a`` and ``word_b`` appear close together.

    Pairs are searched within ``3 * window`` tokens; each passage spans
    eight tokens either side of the pair. At most five passages, none
    overlapping an earlier one.
    """
    passages: list[list[PassageToken]] = []
    taken: list[tuple[int, int]] = []
    n = len(enriched)
    radius = window * 3

    for i, tok in enumerate(enriched):
        if tok.is_stop or tok.lemma not in (word_a, word_b):
            continue
        want = word_b if tok.lemma == word_a else word_a
        for j in range(max(0, i - radius), min(n - 1, i + radius) + 1):
            if i == j or enriched[j].is_stop or enriched[j].lemma != want:
                continue
            start = max(0, min(i, j) - PASSAGE_CONTEXT)
            end = min(n, max(i, j) + PASSAGE_CONTEXT + 1)
            if any(start < e and s < end for s, e in taken):
                continue
            taken.append((start, end))
            passages.append([
                PassageToken(
                    surface=t.surface,
                    lemma=t.lemma,
                    is_stop=t.is_stop,
                    highlighted=t.lemma in (word_a, word_b),
                )
                for t in enriched[start:end]
            ])
            if len(passages) >= MAX_PASSAGES:
                return passages
    return passages
