# ride_match/domain/paths.py
"""
Shortest-path and path-containment queries over a RoadGraph.

Dijkstra here keys its priority queue on (cost, push_seq), so places with
equal tentative cost are finalized in the order they were pushed. Callers
should depend on total costs only, never on which of several equal-cost
paths is returned. Queries never mutate the graph.
"""

import heapq
from collections.abc import Sequence
from dataclasses import dataclass

from ride_match.domain.entities.geography import Place
from ride_match.domain.errors import PathTooLong
from ride_match.domain.road_graph import MAX_COST

UNREACHABLE = MAX_COST  # int32 max sentinel


def guarded_add(a: int, b: int) -> int:
    """a + b saturating at UNREACHABLE."""
    if a >= UNREACHABLE or b >= UNREACHABLE:
        return UNREACHABLE
    s = a + b
    return s if s < UNREACHABLE else UNREACHABLE


def is_sub_path(outer: Sequence, inner: Sequence) -> bool:
    """True iff `inner` occurs as a contiguous run inside `outer`."""
    n, m = len(outer), len(inner)
    if m == 0:
        return True
    if m > n:
        return False
    for i in range(n - m + 1):
        if all(outer[i + j] is inner[j] for j in range(m)):
            return True
    return False


@dataclass(frozen=True)
class ShortestPath:
    places: tuple[Place, ...]
    total_cost: int

    @property
    def names(self) -> list[str]:
        return [p.name for p in self.places]

    def __len__(self) -> int:
        return len(self.places)


class PathEngine:
    def __init__(self, max_path_length: int | None = None):
        self.max_path_length = max_path_length

    def reachable_within_cost(self, source: Place, bound: int) -> list[tuple[Place, int]]:
        """Places whose best cost from `source` is <= bound, in finalization order."""
        if bound < 0:
            return []
        dist: dict[Place, int] = {source: 0}
        done: set[Place] = set()
        seq = 0
        pq: list[tuple[int, int, Place]] = [(0, seq, source)]
        out: list[tuple[Place, int]] = []
        while pq:
            d, _, u = heapq.heappop(pq)
            if u in done or d > dist[u]:
                continue  # stale entry
            if d > bound:
                break
            done.add(u)
            out.append((u, d))
            for v, cost in u.neighbours():
                nd = guarded_add(d, cost)
                if nd <= bound and nd < dist.get(v, UNREACHABLE):
                    dist[v] = nd
                    seq += 1
                    heapq.heappush(pq, (nd, seq, v))
        return out

    def shortest_path(self, source: Place, target: Place) -> ShortestPath | None:
        """Dijkstra from source, stopping on the first pop of target. None if unreachable."""
        dist: dict[Place, int] = {source: 0}
        parent: dict[Place, Place] = {}
        done: set[Place] = set()
        seq = 0
        pq: list[tuple[int, int, Place]] = [(0, seq, source)]
        while pq:
            d, _, u = heapq.heappop(pq)
            if u in done or d > dist[u]:
                continue
            done.add(u)
            if u is target:
                break
            for v, cost in u.neighbours():
                nd = guarded_add(d, cost)
                if nd < dist.get(v, UNREACHABLE):
                    dist[v] = nd
                    parent[v] = u
                    seq += 1
                    heapq.heappush(pq, (nd, seq, v))

        if target not in done:
            return None

        rev = [target]
        cur = target
        while cur is not source:
            cur = parent[cur]
            rev.append(cur)
            if self.max_path_length is not None and len(rev) > self.max_path_length:
                raise PathTooLong(
                    f"path {source.name!r} -> {target.name!r} exceeds {self.max_path_length} places"
                )
        rev.reverse()
        return ShortestPath(tuple(rev), dist[target])
