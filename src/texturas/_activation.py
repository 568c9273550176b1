"""Spreading activation and synset distance over the synset graph.

All traversals are breadth-first with an explicit frontier and a visited
set per traversal, so one seed never reaches the same node twice while
contributions from different seeds accumulate.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ._resources import pos_of, resource_call
from ._types import Flow, RelationKind, ResourceState

if TYPE_CHECKING:
    from ._resources import LexicalResources
    from ._types import Relations

FLOW_RELATIONS: dict[Flow, tuple[RelationKind, ...]] = {
    Flow.UP: (RelationKind.HYPERNYM,),
    Flow.DOWN: (RelationKind.HYPONYM,),
    Flow.BIDIRECTIONAL: (
        RelationKind.HYPERNYM, RelationKind.HYPONYM, RelationKind.MERONYM,
    ),
}

ALL_RELATIONS = FLOW_RELATIONS[Flow.BIDIRECTIONAL]


def _targets(rel: Relations, kinds: tuple[RelationKind, ...]) -> list[str]:
    out: list[str] = []
    for kind in kinds:
        if kind is RelationKind.HYPERNYM:
            out.extend(rel.hypernyms)
        elif kind is RelationKind.HYPONYM:
            out.extend(rel.hyponyms)
        elif kind is RelationKind.MERONYM:
            out.extend(rel.meronyms)
    return out


def neighbours(
    resources: LexicalResources, word: str, pos: str, flow: Flow,
) -> list[str]:
    """Synset-graph neighbours of ``word#pos`` along ``flow``."""
    with resource_call("synsets"):
        rel = resources.synsets.relations(word, pos)
    return _targets(rel, FLOW_RELATIONS[Flow(flow)])


def _propagate(
    resources: LexicalResources,
    seed: str,
    corpus: set[str] | dict[str, int],
    depth: int,
    decay: float,
    flow: Flow,
    energy: float,
    scores: dict[str, float],
) -> None:
    """BFS from one seed, adding ``energy * decay**h`` to corpus members."""
    frontier = [(seed, pos_of(resources, seed))]
    visited = {seed}
    for h in range(1, depth + 1):
        amount = energy * decay ** h
        next_frontier: list[tuple[str, str]] = []
        for word, pos in frontier:
            for target in neighbours(resources, word, pos, flow):
                if target in visited:
                    continue
                visited.add(target)
                if target in corpus:
                    scores[target] = scores.get(target, 0.0) + amount
                next_frontier.append((target, pos_of(resources, target)))
        if not next_frontier:
            break
        frontier = next_frontier


def spread_activation(
    freq_map: dict[str, int],
    resources: LexicalResources,
    depth: int,
    decay: float,
    flow: Flow = Flow.BIDIRECTIONAL,
) -> dict[str, float]:
    """Corpus-wide relevance.

    Every corpus lemma starts at 1 (not its frequency). Without a synset
    graph nothing propagates and the baseline is returned as is.
    """
    scores: dict[str, float] = {lemma: 1.0 for lemma in freq_map}
    if resources.synsets.state is not ResourceState.READY:
        return scores

    for lemma, count in freq_map.items():
        if not count:
            continue
        _propagate(resources, lemma, freq_map, depth, decay, flow, 1.0, scores)
    return scores


def pair_activation(
    seed: str,
    freq_map: dict[str, int],
    resources: LexicalResources,
    depth: int,
    decay: float,
    flow: Flow = Flow.BIDIRECTIONAL,
) -> dict[str, float]:
    """Activation reaching each corpus word from ``seed`` alone.

    Energy is the seed's frequency. Empty when the seed is not in the
    corpus or the synset graph is unavailable.
    """
    if resources.synsets.state is not ResourceState.READY or not freq_map.get(seed):
        return {}
    scores: dict[str, float] = {}
    _propagate(resources, seed, freq_map, depth, decay, flow, float(freq_map[seed]), scores)
    return scores


def synset_distance(
    a: str,
    b: str,
    resources: LexicalResources,
    max_hops: int,
) -> int:
    """Hop count from ``a`` to ``b`` over all relation kinds.

    0 when the words are equal, -1 when unreachable within ``max_hops`` or
    when the synset graph is unavailable.
    """
    if a == b:
        return 0
    if resources.synsets.state is not ResourceState.READY:
        return -1

    frontier = [(a, pos_of(resources, a))]
    visited = {a}
    for h in range(1, max_hops + 1):
        next_frontier: list[tuple[str, str]] = []
        for word, pos in frontier:
            for target in neighbours(resources, word, pos, Flow.BIDIRECTIONAL):
                if target == b:
                    return h
                if target in visited:
                    continue
                visited.add(target)
                next_frontier.append((target, pos_of(resources, target)))
        if not next_frontier:
            break
        frontier = next_frontier
    return -1
