# app/events.py
from dataclasses import dataclass, field

from campus_nav.domain.entities.geography import LatLng
from campus_nav.domain.entities.navigation import Destination, NavigationState
from campus_nav.sim.event import BaseEvent


# Inputs
@dataclass(order=True)
class SessionStarted(BaseEvent):
    destination_id: str = ""


@dataclass(order=True)
class PositionFix(BaseEvent):
    lat: float
    lng: float
    accuracy_m: float | None = None

    @property
    def point(self) -> LatLng:
        return LatLng(self.lat, self.lng)


@dataclass(order=True)
class DestinationSet(BaseEvent):
    destination: Destination = field(compare=False)


@dataclass(order=True)
class TrackingUnavailable(BaseEvent):
    reason: str = "no_provider"


# Outputs
@dataclass(order=True)
class NavigationUpdated(BaseEvent):
    state: NavigationState = field(compare=False)


@dataclass(order=True)
class TrackingStopped(BaseEvent):
    fixes: int = 0
