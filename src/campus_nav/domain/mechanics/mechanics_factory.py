# campus_nav/domain/mechanics/mechanics_factory.py
import logging

from campus_nav.config.models import NavigationModel, NetworkUnion
from campus_nav.domain.mechanics.mechanics_core import Mechanics
from campus_nav.domain.mechanics.mechanics_pace import WalkingPace
from campus_nav.domain.mechanics.mechanics_routers import NetworkRoutePlanner
from campus_nav.domain.network.graph import build_graph
from campus_nav.runtime.registries import make_snapper, resolve_network

log = logging.getLogger("campus_nav.mechanics")


def build_mechanics(network: NetworkUnion, nav: NavigationModel) -> Mechanics:
    segments = resolve_network(network)
    graph = build_graph(segments, precision=network.key_precision)
    skipped = sum(1 for s in segments if len(s.points) < 2)
    log.info(
        "walkway graph built",
        extra={
            "extra": {
                "segments": len(segments),
                "skipped": skipped,
                "nodes": len(graph),
                "edges": graph.edge_count(),
            }
        },
    )
    return Mechanics(
        route_planner=NetworkRoutePlanner(graph, make_snapper(nav.snap)),
        pace=WalkingPace(nav.walking_speed_m_per_min),
    )
