from collections.abc import Mapping

from campus_nav.app.protocols import WaypointPolicy
from campus_nav.domain.entities.geography import LatLng, haversine_m, parse_key
from campus_nav.domain.entities.navigation import Destination, PanoramaOffer
from campus_nav.policy.waypoint import NearestWaypointPolicy

WAYPOINT_RADIUS_M = 70.0


class PanoramaCatalog:
    """
    Read-only key -> image URL table.

    Keys are entity ids (events, staff, locations) or ``"lat,lng"`` strings.
    Coordinate keys are parsed once so waypoint scans stay cheap per fix.
    """

    def __init__(self, bindings: Mapping[str, str] | None = None):
        self._bindings = dict(bindings or {})
        self._waypoints: list[tuple[str, LatLng]] = []
        for k in self._bindings:
            p = parse_key(k) if "," in k else None
            if p is not None:
                self._waypoints.append((k, p))

    @classmethod
    def merged(cls, remote: Mapping[str, str], local: Mapping[str, str]) -> "PanoramaCatalog":
        """Local overrides win key by key."""
        return cls({**remote, **local})

    def __len__(self) -> int:
        return len(self._bindings)

    def get(self, key: str | None) -> str | None:
        return self._bindings.get(key) if key else None

    def resolve_destination(self, dest: Destination) -> PanoramaOffer | None:
        # event > staff > location
        for key in (dest.related_event_id, dest.related_staff_id, dest.id):
            url = self.get(key)
            if url:
                return PanoramaOffer("destination", key, url, f"Inside: {dest.name}")
        return None

    def waypoints_near(self, fix: LatLng, radius_m: float = WAYPOINT_RADIUS_M) -> list[tuple[str, float]]:
        out = []
        for k, p in self._waypoints:
            d = haversine_m(fix, p)
            if d < radius_m:
                out.append((k, d))
        return out

    def resolve_waypoint(
        self,
        fix: LatLng,
        *,
        radius_m: float = WAYPOINT_RADIUS_M,
        policy: WaypointPolicy | None = None,
    ) -> PanoramaOffer | None:
        policy = policy or NearestWaypointPolicy()
        key = policy.choose(self.waypoints_near(fix, radius_m))
        if key is None:
            return None
        return PanoramaOffer("waypoint", key, self._bindings[key], "Street View")
