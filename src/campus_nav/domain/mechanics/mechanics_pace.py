import math
from collections.abc import Iterator

from campus_nav.app.protocols import Pace
from campus_nav.domain.entities.geography import LatLng, Route, haversine_m

WALKING_M_PER_MIN = 80.0


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


class WalkingPace(Pace):
    def __init__(self, m_per_min: float = WALKING_M_PER_MIN):
        if m_per_min <= 0:
            raise ValueError("m_per_min must be > 0")
        self.m_per_min = m_per_min

    @property
    def mps(self) -> float:
        return self.m_per_min / 60.0

    def eta_min(self, distance_m: int) -> int:
        return math.ceil(distance_m / self.m_per_min)

    def checkpoints(self, route: Route, t0: float, step_s: float = 1.0) -> Iterator[tuple[float, LatLng]]:
        """Yield (t, position) every ``step_s`` seconds while walking ``route``."""
        pts = route.points
        if not pts:
            return
        yield (t0, pts[0])
        step_m = max(self.mps * step_s, 1e-6)
        t, carried = t0, 0.0
        for a, b in zip(pts, pts[1:]):
            seg_m = haversine_m(a, b)
            if seg_m <= 0:
                continue
            dm = step_m - carried
            while dm <= seg_m:
                s = dm / seg_m
                t += step_s
                yield (t, LatLng(a.lat + s * (b.lat - a.lat), a.lng + s * (b.lng - a.lng)))
                dm += step_m
            carried = seg_m - (dm - step_m)
        if carried > 1e-9:
            yield (t + carried / self.mps, pts[-1])
