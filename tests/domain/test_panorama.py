# tests/domain/test_panorama.py
import math

from campus_nav.domain.entities.geography import EARTH_RADIUS_M, LatLng, node_key
from campus_nav.domain.entities.navigation import Destination
from campus_nav.domain.panorama import PanoramaCatalog
from campus_nav.policy.waypoint import LastWaypointPolicy, NearestWaypointPolicy


def north_of(p: LatLng, meters: float) -> LatLng:
    return LatLng(p.lat + math.degrees(meters / EARTH_RADIUS_M), p.lng)


DEST = Destination(
    id="loc-lib",
    name="Library",
    lat=7.52,
    lng=4.52,
    related_event_id="evt-9",
    related_staff_id="stf-3",
)


def test_event_binding_beats_location_binding():
    cat = PanoramaCatalog({"evt-9": "event.jpg", "loc-lib": "lib.jpg"})
    offer = cat.resolve_destination(DEST)
    assert offer.image_url == "event.jpg"
    assert offer.key == "evt-9"
    assert offer.title == "Inside: Library"


def test_staff_then_location_fallback():
    assert PanoramaCatalog({"stf-3": "s.jpg", "loc-lib": "l.jpg"}).resolve_destination(DEST).key == "stf-3"
    assert PanoramaCatalog({"loc-lib": "l.jpg"}).resolve_destination(DEST).key == "loc-lib"
    assert PanoramaCatalog({"other": "o.jpg"}).resolve_destination(DEST) is None


def test_local_overrides_remote():
    cat = PanoramaCatalog.merged({"loc-lib": "remote.jpg", "a": "a.jpg"}, {"loc-lib": "local.jpg"})
    assert cat.get("loc-lib") == "local.jpg"
    assert cat.get("a") == "a.jpg"
    assert len(cat) == 2


def test_waypoint_offered_inside_radius_only():
    corner = LatLng(7.5210, 4.5195)
    cat = PanoramaCatalog({node_key(corner.lat, corner.lng): "corner.jpg"})
    offer = cat.resolve_waypoint(north_of(corner, 69.0))
    assert offer is not None and offer.image_url == "corner.jpg"
    assert offer.kind == "waypoint"
    assert cat.resolve_waypoint(north_of(corner, 71.0)) is None


def test_waypoint_tie_break_policies():
    fix = LatLng(7.5210, 4.5195)
    near, far = north_of(fix, 10.0), north_of(fix, 50.0)
    cat = PanoramaCatalog(
        {
            f"{near.lat},{near.lng}": "near.jpg",
            f"{far.lat},{far.lng}": "far.jpg",
        }
    )
    assert cat.resolve_waypoint(fix, policy=NearestWaypointPolicy()).image_url == "near.jpg"
    assert cat.resolve_waypoint(fix, policy=LastWaypointPolicy()).image_url == "far.jpg"


def test_non_coordinate_keys_with_commas_are_ignored():
    cat = PanoramaCatalog({"hall,annex": "x.jpg", "1,2,3": "y.jpg"})
    assert cat.waypoints_near(LatLng(1.0, 2.0), 1e9) == []
