# campus_nav/policy/recompute.py
from dataclasses import dataclass

from campus_nav.app.protocols import RecomputePolicy
from campus_nav.domain.entities.geography import LatLng, haversine_m


class EveryFixPolicy(RecomputePolicy):
    def should_recompute(self, fix: LatLng, last: LatLng | None) -> bool:
        return True


@dataclass
class MinMovementPolicy(RecomputePolicy):
    min_move_m: float = 5.0

    def should_recompute(self, fix: LatLng, last: LatLng | None) -> bool:
        return last is None or haversine_m(fix, last) >= self.min_move_m
