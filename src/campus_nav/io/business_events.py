# campus_nav/io/business_events.py

from dataclasses import dataclass
from typing import Literal


# Base type for analytics events (not scheduled in the kernel!)
@dataclass
class BizEvent:
    run_id: str
    t: float  # fix time, epoch seconds
    name: str  # stable event name


@dataclass
class TrackingStartedBiz(BizEvent):
    destination_id: str


@dataclass
class TrackingStoppedBiz(BizEvent):
    destination_id: str
    fixes: int


@dataclass
class TrackingUnavailableBiz(BizEvent):
    reason: str


@dataclass
class RouteComputedBiz(BizEvent):
    destination_id: str
    origin: tuple[float, float]
    nodes: int
    distance_m: int
    eta_min: int


@dataclass
class RouteUnavailableBiz(BizEvent):
    destination_id: str
    origin: tuple[float, float]


@dataclass
class PanoramaOfferedBiz(BizEvent):
    kind: Literal["destination", "waypoint"]
    key: str
    image_url: str
