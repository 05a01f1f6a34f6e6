from dataclasses import dataclass, field
from typing import Literal

from campus_nav.domain.entities.geography import LatLng, Route

PanoramaKind = Literal["destination", "waypoint"]


@dataclass(frozen=True)
class Destination:
    id: str
    name: str
    lat: float
    lng: float
    related_event_id: str | None = None
    related_staff_id: str | None = None

    @property
    def point(self) -> LatLng:
        return LatLng(self.lat, self.lng)


@dataclass(frozen=True)
class PanoramaOffer:
    kind: PanoramaKind
    key: str  # binding key that matched
    image_url: str
    title: str


# Viewport hints for the map renderer
@dataclass(frozen=True)
class FitBounds:
    south: float
    west: float
    north: float
    east: float
    padding: tuple[int, int] = (50, 50)

    @classmethod
    def around(cls, points: list[LatLng], padding: tuple[int, int] = (50, 50)) -> "FitBounds":
        lats = [p.lat for p in points]
        lngs = [p.lng for p in points]
        return cls(min(lats), min(lngs), max(lats), max(lngs), padding)


@dataclass(frozen=True)
class CenterOn:
    center: LatLng
    zoom: int = 18


Viewport = FitBounds | CenterOn


@dataclass
class NavigationState:
    fix: LatLng
    destination: Destination
    route: Route = field(default_factory=Route)
    distance_m: int = 0
    eta_min: int = 0
    destination_panorama: PanoramaOffer | None = None
    waypoint_panorama: PanoramaOffer | None = None
    viewport: Viewport | None = None

    @property
    def has_route(self) -> bool:
        return not self.route.empty
