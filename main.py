# main.py
import argparse
import json
import sys

from campus_nav.app.build import build
from campus_nav.app.events import NavigationUpdated
from campus_nav.domain.entities.navigation import FitBounds
from campus_nav.io.config import load_scenario
from campus_nav.services.location import ReplayLocationProvider


def state_row(ev: NavigationUpdated) -> dict:
    s = ev.state
    vp = s.viewport
    return {
        "t": ev.t,
        "fix": [s.fix.lat, s.fix.lng],
        "route": [[p.lat, p.lng] for p in s.route.points],
        "distance_m": s.distance_m,
        "eta_min": s.eta_min,
        "destination_panorama": s.destination_panorama.image_url if s.destination_panorama else None,
        "waypoint_panorama": s.waypoint_panorama.image_url if s.waypoint_panorama else None,
        "viewport": (
            {"fit": [vp.south, vp.west, vp.north, vp.east], "padding": list(vp.padding)}
            if isinstance(vp, FitBounds)
            else {"center": [vp.center.lat, vp.center.lng], "zoom": vp.zoom}
        ),
    }


def run(config_path: str, out=None, err=None) -> int:
    """Print one JSON row per navigation update to ``out``; logs go to ``err``.

    Returns 0 when at least one fix was delivered, 1 otherwise.
    """
    out = sys.stdout if out is None else out
    err = sys.stderr if err is None else err
    model = load_scenario(config_path)
    app = build(model, render=lambda ev: out.write(json.dumps(state_row(ev)) + "\n"), stream=err)
    delivered = 0
    with app.session():
        if isinstance(app.location, ReplayLocationProvider):
            delivered = app.location.play()
    return 0 if delivered else 1


if __name__ == "__main__":
    p = argparse.ArgumentParser(description="Replay a location track through the navigation engine")
    p.add_argument("config", help="scenario JSON file")
    args = p.parse_args()
    sys.exit(run(args.config))
