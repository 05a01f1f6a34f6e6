import math
from dataclasses import dataclass, field

EARTH_RADIUS_M = 6_371_000.0
KEY_PRECISION = 7  # ~1 cm at the equator


# Core geometry types used by the network and the controller
@dataclass(frozen=True)
class LatLng:
    lat: float  # degrees
    lng: float

    def key(self, precision: int = KEY_PRECISION) -> str:
        return node_key(self.lat, self.lng, precision)


@dataclass(frozen=True)
class RoadSegment:
    name: str
    points: tuple[LatLng, ...]

    @classmethod
    def from_pairs(cls, name: str, pairs) -> "RoadSegment":
        return cls(name, tuple(LatLng(float(p[0]), float(p[1])) for p in pairs))


@dataclass
class Route:
    points: list[LatLng] = field(default_factory=list)
    total_length_m: float = 0.0

    @property
    def empty(self) -> bool:
        return not self.points

    @classmethod
    def through(cls, points: list[LatLng]) -> "Route":
        return cls(list(points), route_length_m(points))


def node_key(lat: float, lng: float, precision: int = KEY_PRECISION) -> str:
    # -0.0 would otherwise produce a distinct key from 0.0
    lat, lng = round(lat, precision) + 0.0, round(lng, precision) + 0.0
    return f"{lat:.{precision}f},{lng:.{precision}f}"


def parse_key(key: str) -> LatLng | None:
    """Parse a ``"lat,lng"`` key; anything else returns None."""
    parts = key.split(",")
    if len(parts) != 2:
        return None
    try:
        return LatLng(float(parts[0]), float(parts[1]))
    except ValueError:
        return None


def haversine_m(a: LatLng, b: LatLng) -> float:
    phi1, phi2 = math.radians(a.lat), math.radians(b.lat)
    dphi = phi2 - phi1
    dlmb = math.radians(b.lng - a.lng)
    h = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(h)))


def route_length_m(points: list[LatLng]) -> float:
    return sum(haversine_m(p, q) for p, q in zip(points, points[1:]))
