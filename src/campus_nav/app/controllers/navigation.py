# campus_nav/app/controllers/navigation.py
from collections.abc import Callable

from campus_nav.app.events import (
    DestinationSet,
    NavigationUpdated,
    PositionFix,
    SessionStarted,
    TrackingStopped,
    TrackingUnavailable,
)
from campus_nav.app.protocols import RecomputePolicy, WaypointPolicy
from campus_nav.domain.entities.geography import LatLng
from campus_nav.domain.entities.navigation import (
    CenterOn,
    Destination,
    FitBounds,
    NavigationState,
)
from campus_nav.domain.mechanics.mechanics_core import Mechanics
from campus_nav.domain.panorama import WAYPOINT_RADIUS_M, PanoramaCatalog
from campus_nav.io.business_events import (
    PanoramaOfferedBiz,
    RouteComputedBiz,
    RouteUnavailableBiz,
    TrackingStartedBiz,
    TrackingStoppedBiz,
    TrackingUnavailableBiz,
)
from campus_nav.policy.recompute import EveryFixPolicy
from campus_nav.policy.waypoint import NearestWaypointPolicy


class NavigationHandler:
    """
    Live navigation: every accepted fix recomputes the whole pipeline.

    The road network and panorama catalog are read-only here. State is only
    the destination, the last fix seen and the last state produced.
    """

    def __init__(
        self,
        mechanics: Mechanics,
        panoramas: PanoramaCatalog,
        *,
        destination: Destination | None = None,
        waypoint_radius_m: float = WAYPOINT_RADIUS_M,
        waypoint_policy: WaypointPolicy | None = None,
        recompute: RecomputePolicy | None = None,
        padding: tuple[int, int] = (50, 50),
        zoom: int = 18,
        biz: Callable[[object], None] | None = None,
        run_id: str = "local",
    ):
        self.mechanics = mechanics
        self.panoramas = panoramas
        self.destination = destination
        self.waypoint_radius_m = waypoint_radius_m
        self.waypoint_policy = waypoint_policy or NearestWaypointPolicy()
        self.recompute = recompute or EveryFixPolicy()
        self.padding, self.zoom = padding, zoom
        self.biz = biz or (lambda _ev: None)
        self.run_id = run_id

        self.last_fix: LatLng | None = None
        self.last_computed: LatLng | None = None
        self.state: NavigationState | None = None
        self._started = False

    def reset(self) -> None:
        """Forget everything learned from a previous session's fixes."""
        self.last_fix = None
        self.last_computed = None
        self.state = None
        self._started = False

    # ---------------- event handlers ----------------

    def on_session_started(self, ev: SessionStarted):
        self.reset()
        return []

    def on_position_fix(self, ev: PositionFix):
        fix = ev.point
        self.last_fix = fix
        if self.destination is None:
            return []
        if not self._started:
            self._started = True
            self.biz(TrackingStartedBiz(self.run_id, ev.t, "TrackingStarted", self.destination.id))
        if not self.recompute.should_recompute(fix, self.last_computed):
            return []
        return [NavigationUpdated(t=ev.t, state=self._update(fix, ev.t))]

    def on_destination_set(self, ev: DestinationSet):
        self.destination = ev.destination
        if self.last_fix is None:
            return []
        return [NavigationUpdated(t=ev.t, state=self._update(self.last_fix, ev.t))]

    def on_tracking_unavailable(self, ev: TrackingUnavailable):
        self.biz(TrackingUnavailableBiz(self.run_id, ev.t, "TrackingUnavailable", reason=ev.reason))
        return []

    def on_tracking_stopped(self, ev: TrackingStopped):
        dest_id = self.destination.id if self.destination else ""
        self.biz(TrackingStoppedBiz(self.run_id, ev.t, "TrackingStopped", dest_id, ev.fixes))
        return []

    # ---------------- pipeline ----------------

    def compute(self, fix: LatLng) -> NavigationState:
        """Pure recompute for ``fix`` against the current destination."""
        dest = self.destination
        route = self.mechanics.route(fix, dest.point)
        distance_m = self.mechanics.distance_m(route)
        if route.empty:
            viewport = CenterOn(fix, self.zoom)
        else:
            viewport = FitBounds.around(route.points, self.padding)
        return NavigationState(
            fix=fix,
            destination=dest,
            route=route,
            distance_m=distance_m,
            eta_min=self.mechanics.eta_min(distance_m),
            destination_panorama=self.panoramas.resolve_destination(dest),
            waypoint_panorama=self.panoramas.resolve_waypoint(
                fix, radius_m=self.waypoint_radius_m, policy=self.waypoint_policy
            ),
            viewport=viewport,
        )

    def _update(self, fix: LatLng, t: float) -> NavigationState:
        state = self.compute(fix)
        self._report(state, t)
        self.state, self.last_computed = state, fix
        return state

    def _report(self, state: NavigationState, t: float) -> None:
        origin = (state.fix.lat, state.fix.lng)
        dest_id = state.destination.id
        if state.has_route:
            self.biz(
                RouteComputedBiz(
                    self.run_id,
                    t,
                    "RouteComputed",
                    destination_id=dest_id,
                    origin=origin,
                    nodes=len(state.route.points),
                    distance_m=state.distance_m,
                    eta_min=state.eta_min,
                )
            )
        else:
            self.biz(RouteUnavailableBiz(self.run_id, t, "RouteUnavailable", dest_id, origin))

        prev = self.state
        for offer, before in (
            (state.destination_panorama, prev.destination_panorama if prev else None),
            (state.waypoint_panorama, prev.waypoint_panorama if prev else None),
        ):
            # only report an offer when it first appears or changes
            if offer is not None and offer != before:
                self.biz(
                    PanoramaOfferedBiz(
                        self.run_id, t, "PanoramaOffered", offer.kind, offer.key, offer.image_url
                    )
                )
