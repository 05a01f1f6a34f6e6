# tests/app/test_session.py
import pytest

from campus_nav.app.build import build
from campus_nav.app.events import PositionFix
from campus_nav.domain.entities.navigation import Destination
from campus_nav.services.location import ReplayLocationProvider, UnavailableLocationProvider


def scenario(**over):
    cfg = {
        "name": "session-test",
        "run_id": "s-1",
        "log": {"record": "memory"},
        "network": {"by": "inline", "segments": [{"name": "a", "points": [(0.0, 0.0), (0.0, 0.001)]}]},
        "destination": {"id": "loc-1", "name": "Gate", "lat": 0.0, "lng": 0.001},
        "location": {
            "kind": "replay",
            "fixes": [
                {"t": 10.0, "lat": 0.0, "lng": 0.0},
                {"t": 11.0, "lat": 0.0, "lng": 0.0007},
            ],
        },
    }
    cfg.update(over)
    return cfg


@pytest.fixture
def rendered():
    return []


def test_fixes_flow_to_renderer(rendered):
    app = build(scenario(), render=rendered.append, use_logging=False)
    with app.session():
        assert app.location.play() == 2
    assert [ev.t for ev in rendered] == [10.0, 11.0]
    assert [ev.state.distance_m for ev in rendered] == [111, 0]
    assert [ev.state.eta_min for ev in rendered] == [2, 0]


def test_subscription_released_on_exit(rendered):
    app = build(scenario(), render=rendered.append, use_logging=False)
    with app.session() as s:
        assert s.tracking
        app.location.play(limit=1)
    assert not s.tracking
    assert not app.location.active
    assert app.location.play() == 0
    assert len(rendered) == 1


def test_subscription_released_when_body_raises():
    app = build(scenario(), use_logging=False)
    with pytest.raises(RuntimeError):
        with app.session():
            raise RuntimeError("screen crashed")
    assert not app.location.active


def test_callback_after_exit_is_ignored(rendered):
    app = build(scenario(), render=rendered.append, use_logging=False)
    session = app.session()
    with session:
        pass
    session._on_fix(PositionFix(t=99.0, lat=0.0, lng=0.0))
    assert rendered == []


def test_unavailable_location_is_degraded_not_fatal(rendered):
    app = build(
        scenario(location={"kind": "unavailable", "reason": "permission_denied"}),
        render=rendered.append,
        use_logging=False,
    )
    assert isinstance(app.location, UnavailableLocationProvider)
    with app.session() as s:
        assert not s.tracking
    assert rendered == []
    assert app.navigation.state is None
    names = app.recorder.sinks[0].names()
    assert names == ["TrackingUnavailable", "TrackingStopped"]
    assert app.recorder.sinks[0].events[0].reason == "permission_denied"


def test_out_of_order_fixes_are_handled_in_delivery_order(rendered):
    app = build(
        scenario(
            location={
                "kind": "replay",
                "fixes": [
                    {"t": 20.0, "lat": 0.0, "lng": 0.0},
                    {"t": 15.0, "lat": 0.0, "lng": 0.0007},
                    {"t": 20.0, "lat": 0.0, "lng": 0.0},
                ],
            }
        ),
        render=rendered.append,
        use_logging=False,
    )
    with app.session():
        app.location.play()
    assert [ev.t for ev in rendered] == [20.0, 15.0, 20.0]
    assert [ev.state.distance_m for ev in rendered] == [111, 0, 111]


def test_session_with_explicit_destination(rendered):
    app = build(scenario(), render=rendered.append, use_logging=False)
    other = Destination(id="loc-0", name="Hall", lat=0.0, lng=0.0)
    with app.session(other):
        app.location.play()
    assert all(ev.state.destination is other for ev in rendered)


def test_session_needs_a_destination():
    cfg = scenario()
    del cfg["destination"]
    app = build(cfg, use_logging=False)
    with pytest.raises(ValueError):
        app.session()


def test_replay_provider_tracks_current_fix():
    fixes = [PositionFix(t=1.0, lat=0.0, lng=0.0), PositionFix(t=2.0, lat=0.0, lng=0.0001)]
    p = ReplayLocationProvider(fixes)
    assert p.current_fix() is None
    seen = []
    h = p.watch(seen.append)
    p.play()
    assert seen == fixes
    assert p.current_fix() is fixes[-1]
    p.clear_watch(h)
    p.clear_watch(h)  # idempotent


def test_second_session_starts_from_scratch(rendered):
    app = build(scenario(), render=rendered.append, use_logging=False)
    with app.session():
        app.location.play(limit=1)
    assert len(rendered) == 1

    other = Destination(id="loc-0", name="Hall", lat=0.0, lng=0.0)
    with app.session(other):
        pass  # no fix delivered in this session
    assert len(rendered) == 1
    assert app.navigation.last_fix is None
    assert app.navigation.state is None

    with app.session(other):
        app.location.play()
    assert rendered[-1].state.destination is other
    names = app.recorder.sinks[0].names()
    assert names.count("TrackingStarted") == 2


def test_panorama_offered_again_in_new_session():
    app = build(
        scenario(panoramas={"remote": {"loc-1": "gate.jpg"}}),
        use_logging=False,
    )
    for _ in range(2):
        with app.session():
            app.location.play(limit=1)
    assert app.recorder.sinks[0].names().count("PanoramaOffered") == 2


def test_permission_lost_mid_session(rendered):
    cfg = scenario()
    cfg["location"]["lost_after"] = 1
    app = build(cfg, render=rendered.append, use_logging=False)
    with app.session() as s:
        assert app.location.play() == 1
        assert not s.tracking
    assert len(rendered) == 1
    assert not app.location.active
    names = app.recorder.sinks[0].names()
    assert names == [
        "TrackingStarted",
        "RouteComputed",
        "TrackingUnavailable",
        "TrackingStopped",
    ]
    assert app.recorder.sinks[0].events[2].reason == "permission_denied"


def test_provider_error_without_callback_just_drops_watchers():
    p = ReplayLocationProvider([PositionFix(t=1.0, lat=0.0, lng=0.0)])
    p.watch(lambda fix: None)
    p.fail()
    assert not p.active
    assert p.play() == 0


def test_millisecond_timestamps_do_not_break_logging(rendered):
    cfg = scenario(
        location={"kind": "replay", "fixes": [{"t": 1700000000000.0, "lat": 0.0, "lng": 0.0}]}
    )
    app = build(cfg, render=rendered.append)
    with app.session():
        assert app.location.play() == 1
    assert [ev.state.distance_m for ev in rendered] == [111]
