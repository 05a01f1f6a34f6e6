# campus_nav/domain/mechanics/mechanics_core.py
from dataclasses import dataclass

from campus_nav.app.protocols import RoutePlanner
from campus_nav.domain.entities.geography import LatLng, Route
from campus_nav.domain.mechanics.mechanics_pace import WalkingPace, round_half_up


@dataclass
class Mechanics:
    route_planner: RoutePlanner
    pace: WalkingPace

    def route(self, a: LatLng, b: LatLng) -> Route:
        return self.route_planner.route(a, b)

    def distance_m(self, route: Route) -> int:
        return round_half_up(route.total_length_m)

    def eta_min(self, distance_m: int) -> int:
        return self.pace.eta_min(distance_m)

    def walk(self, a: LatLng, b: LatLng, t0: float, step_s: float = 1.0):
        yield from self.pace.checkpoints(self.route(a, b), t0, step_s)
