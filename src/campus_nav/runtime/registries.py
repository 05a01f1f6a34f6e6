# runtime/registries.py
from collections.abc import Callable
from typing import Any

from campus_nav.app.events import PositionFix
from campus_nav.app.protocols import LocationProvider, Snapper
from campus_nav.config.models import (
    LocationReplayModel,
    LocationSimulatedWalkModel,
    LocationUnavailableModel,
    LocationUnion,
    NetworkByPathModel,
    NetworkInlineModel,
    NetworkUnion,
    PanoramaModel,
)
from campus_nav.domain.entities.geography import LatLng, RoadSegment
from campus_nav.domain.network.snapping import EdgeSnapper, VertexSnapper
from campus_nav.domain.panorama import PanoramaCatalog
from campus_nav.runtime.resources import load_panorama_table, load_road_network, load_track
from campus_nav.services.location import (
    ReplayLocationProvider,
    SimulatedWalkProvider,
    UnavailableLocationProvider,
)

SnapperFactory = Callable[[], Snapper]
LocationFactory = Callable[[Any, dict], LocationProvider]

_snapper_registry: dict[str, SnapperFactory] = {}
_location_registry: dict[str, LocationFactory] = {}


# ------------------- Snappers ---------------------------


def register_snapper(kind: str):
    def deco(fn: SnapperFactory):
        _snapper_registry[kind] = fn
        return fn

    return deco


def make_snapper(kind: str) -> Snapper:
    try:
        return _snapper_registry[kind]()
    except KeyError:
        raise ValueError(f"Unknown snap kind {kind!r}") from None


register_snapper("vertex")(VertexSnapper)
register_snapper("edge")(EdgeSnapper)


# ------------------- Road network & panoramas ---------------------------


def resolve_network(cfg: NetworkUnion) -> tuple[RoadSegment, ...]:
    if isinstance(cfg, NetworkInlineModel):
        return tuple(RoadSegment.from_pairs(s.name, s.points) for s in cfg.segments)
    if isinstance(cfg, NetworkByPathModel):
        return load_road_network(cfg.file, cfg.fmt)
    raise TypeError(cfg)


def make_panoramas(cfg: PanoramaModel) -> PanoramaCatalog:
    remote = load_panorama_table(cfg.remote_file) if cfg.remote_file else {}
    local = load_panorama_table(cfg.local_file) if cfg.local_file else {}
    return PanoramaCatalog.merged({**remote, **cfg.remote}, {**local, **cfg.local})


# ----- Location providers --------------------------


def register_location(kind: str):
    def deco(fn: LocationFactory):
        _location_registry[kind] = fn
        return fn

    return deco


def make_location_provider(cfg: LocationUnion, *, deps: dict) -> LocationProvider:
    """
    deps can include:
      - 'mechanics': Mechanics          # needed by simulated_walk
      - 'destination': Destination      # needed by simulated_walk
      - 'rng': RNGRegistry
    """
    try:
        factory = _location_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown location kind {cfg.kind!r}") from None
    return factory(cfg, deps)


@register_location("replay")
def _make_replay(cfg: LocationReplayModel, deps):
    if cfg.file:
        return ReplayLocationProvider(load_track(cfg.file), lost_after=cfg.lost_after)
    return ReplayLocationProvider(
        (PositionFix(t=f.t, lat=f.lat, lng=f.lng, accuracy_m=f.accuracy_m) for f in cfg.fixes),
        lost_after=cfg.lost_after,
    )


@register_location("simulated_walk")
def _make_simulated_walk(cfg: LocationSimulatedWalkModel, deps):
    dest = deps.get("destination")
    if dest is None:
        raise ValueError("simulated_walk needs a destination")
    return SimulatedWalkProvider(
        deps["mechanics"],
        LatLng(*cfg.origin),
        dest.point,
        rng=deps["rng"].substream("gps_noise", dest.id),
        t0=cfg.t0,
        step_s=cfg.step_s,
        noise_m=cfg.noise_m,
    )


@register_location("unavailable")
def _make_unavailable(cfg: LocationUnavailableModel, deps):
    return UnavailableLocationProvider(cfg.reason)
