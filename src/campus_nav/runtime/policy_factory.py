from campus_nav.app.protocols import RecomputePolicy, WaypointPolicy
from campus_nav.config.models import (
    RecomputeEveryFixModel,
    RecomputeMinMovementModel,
    RecomputeUnion,
)
from campus_nav.policy.recompute import EveryFixPolicy, MinMovementPolicy
from campus_nav.policy.waypoint import LastWaypointPolicy, NearestWaypointPolicy


def make_recompute_policy(cfg: RecomputeUnion) -> RecomputePolicy:
    if isinstance(cfg, RecomputeEveryFixModel):
        return EveryFixPolicy()
    elif isinstance(cfg, RecomputeMinMovementModel):
        return MinMovementPolicy(min_move_m=cfg.min_move_m)
    else:
        raise TypeError(cfg)


def make_waypoint_policy(kind: str) -> WaypointPolicy:
    if kind == "nearest":
        return NearestWaypointPolicy()
    elif kind == "last":
        return LastWaypointPolicy()
    else:
        raise ValueError(f"Unknown waypoint policy {kind!r}")
