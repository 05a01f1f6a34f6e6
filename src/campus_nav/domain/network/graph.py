from collections.abc import Iterable, Iterator

import numpy as np

from campus_nav.domain.entities.geography import (
    KEY_PRECISION,
    LatLng,
    RoadSegment,
    haversine_m,
)


class WalkwayGraph:
    """
    Undirected weighted adjacency-list graph over walkway vertices.

    Nodes are identified by their fixed-precision coordinate key and kept in
    insertion order; edge weights are haversine meters.
    """

    def __init__(self, precision: int = KEY_PRECISION):
        self.precision = precision
        self._nodes: dict[str, LatLng] = {}
        self._adj: dict[str, dict[str, float]] = {}
        self._coords: tuple[list[str], np.ndarray] | None = None

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, key: str) -> bool:
        return key in self._nodes

    # ---------------- construction ----------------

    def add_node(self, p: LatLng) -> str:
        k = p.key(self.precision)
        if k not in self._nodes:
            self._nodes[k] = p
            self._adj[k] = {}
            self._coords = None
        return k

    def add_edge(self, u: str, v: str, weight_m: float) -> None:
        if u == v:
            return
        prev = self.weight(u, v)
        w = weight_m if prev is None else min(prev, weight_m)
        self._adj[u][v] = w
        self._adj[v][u] = w

    def copy(self) -> "WalkwayGraph":
        g = WalkwayGraph(self.precision)
        g._nodes = dict(self._nodes)
        g._adj = {k: dict(nbrs) for k, nbrs in self._adj.items()}
        return g

    def split_edge(self, u: str, v: str, p: LatLng) -> tuple["WalkwayGraph", str]:
        """Return a copy with ``p`` injected between ``u`` and ``v``."""
        g = self.copy()
        k = g.add_node(p)
        if k in (u, v):
            return g, k
        g._adj[u].pop(v, None)
        g._adj[v].pop(u, None)
        g.add_edge(u, k, haversine_m(g._nodes[u], p))
        g.add_edge(k, v, haversine_m(p, g._nodes[v]))
        return g, k

    # ---------------- queries ----------------

    def node_point(self, key: str) -> LatLng:
        return self._nodes[key]

    def nodes(self) -> Iterator[str]:
        return iter(self._nodes)

    def neighbors(self, key: str) -> Iterable[tuple[str, float]]:
        return self._adj.get(key, {}).items()

    def weight(self, u: str, v: str) -> float | None:
        return self._adj.get(u, {}).get(v)

    def iter_edges(self) -> Iterator[tuple[str, str, float]]:
        """Yield each undirected edge once, as (u, v, weight_m)."""
        seen: set[str] = set()
        for u, nbrs in self._adj.items():
            seen.add(u)
            for v, w in nbrs.items():
                if v not in seen:
                    yield u, v, w

    def edge_count(self) -> int:
        return sum(len(n) for n in self._adj.values()) // 2

    def coords(self) -> tuple[list[str], np.ndarray]:
        """Node keys and an (n, 2) array of [lat, lng] in the same order."""
        if self._coords is None:
            keys = list(self._nodes)
            arr = np.array(
                [(self._nodes[k].lat, self._nodes[k].lng) for k in keys], dtype=float
            ).reshape(-1, 2)
            self._coords = (keys, arr)
        return self._coords


def build_graph(
    segments: Iterable[RoadSegment], *, precision: int = KEY_PRECISION
) -> WalkwayGraph:
    g = WalkwayGraph(precision)
    for seg in segments:
        pts = seg.points
        if len(pts) < 2:
            continue
        for a, b in zip(pts, pts[1:]):
            u, v = g.add_node(a), g.add_node(b)
            g.add_edge(u, v, haversine_m(a, b))
    return g
