# campus_nav/policy/waypoint.py
from campus_nav.app.protocols import WaypointPolicy


class NearestWaypointPolicy(WaypointPolicy):
    def choose(self, matches: list[tuple[str, float]]) -> str | None:
        if not matches:
            return None
        # min() keeps the first of equal distances
        return min(matches, key=lambda m: m[1])[0]


class LastWaypointPolicy(WaypointPolicy):
    """Last match in table order."""

    def choose(self, matches: list[tuple[str, float]]) -> str | None:
        return matches[-1][0] if matches else None
