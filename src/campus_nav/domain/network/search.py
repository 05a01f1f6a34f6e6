import heapq
import itertools

from campus_nav.domain.entities.geography import LatLng
from campus_nav.domain.network.graph import WalkwayGraph


def reconstruct_path(came_from: dict[str, str], current: str) -> list[str]:
    """Walk predecessor links back from ``current``; returns start..current."""
    path = [current]
    while current in came_from:
        current = came_from[current]
        path.append(current)
    path.reverse()
    return path


def dijkstra(graph: WalkwayGraph, start: str, end: str) -> list[str]:
    """
    Uniform-cost search over node keys.

    Returns the node sequence start..end, or [] when either node is unknown or
    the two lie in different components.
    """
    if start not in graph or end not in graph:
        return []
    dist = {start: 0.0}
    came_from: dict[str, str] = {}
    done: set[str] = set()
    counter = itertools.count()
    heap = [(0.0, next(counter), start)]
    while heap:
        d, _, u = heapq.heappop(heap)
        if u in done:
            continue
        done.add(u)
        if u == end:
            return reconstruct_path(came_from, u)
        for v, w in graph.neighbors(u):
            nd = d + w
            if v not in done and nd < dist.get(v, float("inf")):
                dist[v] = nd
                came_from[v] = u
                heapq.heappush(heap, (nd, next(counter), v))
    return []


def find_path(graph: WalkwayGraph, start: str, end: str) -> list[LatLng]:
    return [graph.node_point(k) for k in dijkstra(graph, start, end)]
