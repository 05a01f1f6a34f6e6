from campus_nav.app.protocols import RoutePlanner, Snapper
from campus_nav.domain.entities.geography import LatLng, Route
from campus_nav.domain.network.graph import WalkwayGraph
from campus_nav.domain.network.search import find_path
from campus_nav.domain.network.snapping import VertexSnapper


class NetworkRoutePlanner(RoutePlanner):
    """Snap both ends onto a prebuilt walkway graph and search between them."""

    def __init__(self, graph: WalkwayGraph, snapper: Snapper | None = None):
        self.G, self.snapper = graph, snapper or VertexSnapper()

    def route(self, a: LatLng, b: LatLng) -> Route:
        sa = self.snapper.snap(a, self.G)
        if sa is None:
            return Route()
        g, start = sa
        # the origin snap may have handed back a copy, so snap the destination onto that
        sb = self.snapper.snap(b, g)
        if sb is None:
            return Route()
        g, end = sb
        return Route.through(find_path(g, start, end))

    def distance_m(self, a: LatLng, b: LatLng) -> float:
        return self.route(a, b).total_length_m
