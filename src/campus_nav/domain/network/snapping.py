import numpy as np

from campus_nav.app.protocols import Snapper
from campus_nav.domain.entities.geography import EARTH_RADIUS_M, LatLng
from campus_nav.domain.network.graph import WalkwayGraph


def haversine_many_m(p: LatLng, latlng: np.ndarray) -> np.ndarray:
    """Haversine meters from ``p`` to every row of an (n, 2) [lat, lng] array."""
    lat = np.radians(latlng[:, 0])
    lng = np.radians(latlng[:, 1])
    phi = np.radians(p.lat)
    h = (
        np.sin((lat - phi) / 2) ** 2
        + np.cos(phi) * np.cos(lat) * np.sin((lng - np.radians(p.lng)) / 2) ** 2
    )
    return 2 * EARTH_RADIUS_M * np.arcsin(np.minimum(1.0, np.sqrt(h)))


def nearest_node(p: LatLng, graph: WalkwayGraph) -> str | None:
    """Closest existing vertex; the first one wins on exact ties."""
    keys, arr = graph.coords()
    if not keys:
        return None
    return keys[int(np.argmin(haversine_many_m(p, arr)))]


class VertexSnapper(Snapper):
    def snap(self, p: LatLng, graph: WalkwayGraph):
        k = nearest_node(p, graph)
        return None if k is None else (graph, k)


class EdgeSnapper(Snapper):
    """
    Projects onto the nearest edge interior and injects a synthetic node there.

    Projection uses a local equirectangular plane centred on ``p``, which is
    accurate to well under a meter at campus scale.
    """

    def snap(self, p: LatLng, graph: WalkwayGraph):
        edges = list(graph.iter_edges())
        if not edges:
            return VertexSnapper().snap(p, graph)

        kx = np.radians(1.0) * EARTH_RADIUS_M * np.cos(np.radians(p.lat))
        ky = np.radians(1.0) * EARTH_RADIUS_M
        a = np.array([_xy(graph.node_point(u), p, kx, ky) for u, _, _ in edges])
        b = np.array([_xy(graph.node_point(v), p, kx, ky) for _, v, _ in edges])

        ab = b - a
        denom = np.einsum("ij,ij->i", ab, ab)
        t = np.where(denom > 0, -np.einsum("ij,ij->i", a, ab) / np.where(denom > 0, denom, 1), 0)
        t = np.clip(t, 0.0, 1.0)
        proj = a + ab * t[:, None]
        i = int(np.argmin(np.einsum("ij,ij->i", proj, proj)))

        u, v, _ = edges[i]
        if t[i] <= 0.0:
            return graph, u
        if t[i] >= 1.0:
            return graph, v
        q = LatLng(p.lat + proj[i, 1] / ky, p.lng + proj[i, 0] / kx)
        return graph.split_edge(u, v, q)


def _xy(q: LatLng, origin: LatLng, kx: float, ky: float) -> tuple[float, float]:
    return ((q.lng - origin.lng) * kx, (q.lat - origin.lat) * ky)
