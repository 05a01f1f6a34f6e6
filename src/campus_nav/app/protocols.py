from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from campus_nav.domain.entities.geography import LatLng, Route

if TYPE_CHECKING:
    from campus_nav.app.events import PositionFix
    from campus_nav.domain.network.graph import WalkwayGraph


# ------------- Network --------------------
@runtime_checkable
class Snapper(Protocol):
    """
    Responsibilities:
    • Map a free point onto the routable graph.
    • Return the graph to search (possibly a copy carrying an injected node)
      together with the snapped node key, or None for an empty graph.
    """

    def snap(self, p: LatLng, graph: "WalkwayGraph") -> tuple["WalkwayGraph", str] | None: ...


@runtime_checkable
class RoutePlanner(Protocol):
    """
    Responsibilities:
      • Compute a walkable route between two free points.
      • Compute the walking distance between them.
    Units: degrees for coordinates, meters for distances.
    """

    def route(self, a: LatLng, b: LatLng) -> Route: ...
    def distance_m(self, a: LatLng, b: LatLng) -> float: ...


@runtime_checkable
class Pace(Protocol):
    """Walking pace used to turn meters into minutes and to pace simulated walks."""

    m_per_min: float

    def eta_min(self, distance_m: int) -> int: ...


# ------------- Location --------------------
class LocationUnavailable(RuntimeError):
    """No location provider, or the user denied permission."""


FixCallback = Callable[["PositionFix"], None]
ErrorCallback = Callable[[LocationUnavailable], None]


@runtime_checkable
class LocationProvider(Protocol):
    """
    Platform geolocation seam.
    • current_fix(): one-shot fix, or None when nothing is known yet.
    • watch(cb, on_error): start continuous high-accuracy delivery; returns a handle.
    • clear_watch(handle): release a subscription; idempotent.
    Providers raise LocationUnavailable from watch() when tracking cannot start,
    and pass one to on_error (dropping the subscription) when it is lost later.
    """

    def current_fix(self) -> "PositionFix | None": ...
    def watch(self, callback: FixCallback, on_error: ErrorCallback | None = None) -> int: ...
    def clear_watch(self, handle: int) -> None: ...


# --------------- Policies -------------------------


@runtime_checkable
class WaypointPolicy(Protocol):
    def choose(self, matches: list[tuple[str, float]]) -> str | None:
        """Pick one binding key from (key, distance_m) matches in table order."""


@runtime_checkable
class RecomputePolicy(Protocol):
    def should_recompute(self, fix: LatLng, last: LatLng | None) -> bool: ...
