"""Single-level Louvain community detection over the co-occurrence graph."""

from __future__ import annotations

MAX_PASSES = 20


def louvain(
    words: list[str],
    cooccurrence: dict[str, dict[str, int]],
    max_passes: int = MAX_PASSES,
) -> dict[str, int]:
    """Greedy local-move modularity optimization.

    Every word starts in its own community. Each pass visits words in order
    and moves a word to the neighbouring community with the largest
    strictly positive modularity gain. Stops after ``max_passes`` or on the
    first pass without a move. No coarsening phase.

    Returns word -> community id, renumbered densely from 0 in order of
    first appearance.
    """
    n = len(words)
    if n == 0:
        return {}

    adj: list[dict[int, float]] = [{} for _ in range(n)]
    total_w = 0.0
    for i in range(n):
        row = cooccurrence.get(words[i], {})
        for j in range(i + 1, n):
            w = row.get(words[j], 0)
            if w > 0:
                adj[i][j] = w
                adj[j][i] = w
                total_w += 2 * w

    if total_w == 0:
        return {w: 0 for w in words}

    deg = [sum(nbrs.values()) for nbrs in adj]
    comm = list(range(n))
    m2 = total_w

    for _ in range(max_passes):
        moved = False
        for i in range(n):
            ci = comm[i]
            ki = deg[i]

            # Weight from i into each neighbouring community
            neigh_comm: dict[int, float] = {}
            for j, w in adj[i].items():
                cj = comm[j]
                neigh_comm[cj] = neigh_comm.get(cj, 0.0) + w

            sum_tot_ci = sum(deg[j] for j in range(n) if comm[j] == ci and j != i)
            remove_cost = neigh_comm.get(ci, 0.0) / m2 - (sum_tot_ci * ki) / (m2 * m2)

            best_comm = ci
            best_dq = 0.0
            for c in sorted(neigh_comm):
                if c == ci:
                    continue
                sum_tot_c = sum(deg[j] for j in range(n) if comm[j] == c)
                add_cost = neigh_comm[c] / m2 - (sum_tot_c * ki) / (m2 * m2)
                dq = add_cost - remove_cost
                if dq > best_dq:
                    best_dq = dq
                    best_comm = c

            if best_comm != ci:
                comm[i] = best_comm
                moved = True
        if not moved:
            break

    dense: dict[int, int] = {}
    for c in comm:
        if c not in dense:
            dense[c] = len(dense)
    return {words[i]: dense[comm[i]] for i in range(n)}


def modularity(
    communities: dict[str, int],
    cooccurrence: dict[str, dict[str, int]],
) -> float:
    """Newman modularity of a partition over the co-occurrence graph."""
    words = list(communities)
    m2 = 0.0
    deg: dict[str, float] = {}
    for a in words:
        row = cooccurrence.get(a, {})
        d = sum(row.get(b, 0) for b in words if b != a)
        deg[a] = d
        m2 += d
    if m2 == 0:
        return 0.0

    q = 0.0
    for a in words:
        row = cooccurrence.get(a, {})
        for b in words:
            if communities[a] != communities[b]:
                continue
            a_ab = row.get(b, 0) if a != b else 0
            q += a_ab - deg[a] * deg[b] / m2
    return q / m2
