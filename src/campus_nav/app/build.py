# campus_nav/app/build.py
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from campus_nav.app.controllers.navigation import NavigationHandler
from campus_nav.app.events import NavigationUpdated
from campus_nav.app.protocols import LocationProvider
from campus_nav.app.session import NavigationSession
from campus_nav.app.wiring import wire
from campus_nav.config.models import DestinationModel, ScenarioModel
from campus_nav.domain.entities.navigation import Destination
from campus_nav.domain.mechanics.mechanics_core import Mechanics
from campus_nav.domain.mechanics.mechanics_factory import build_mechanics
from campus_nav.domain.panorama import PanoramaCatalog
from campus_nav.io.kernel_logging import KernelLogging  # JSON logs
from campus_nav.io.recorder import JsonlSink, MemorySink, Recorder
from campus_nav.runtime.policy_factory import make_recompute_policy, make_waypoint_policy
from campus_nav.runtime.registries import make_location_provider, make_panoramas
from campus_nav.sim.hooks import NoopHooks
from campus_nav.sim.kernel import Kernel
from campus_nav.sim.rng import RNGRegistry


@dataclass
class App:
    kernel: Kernel
    mechanics: Mechanics
    panoramas: PanoramaCatalog
    navigation: NavigationHandler
    location: LocationProvider
    destination: Destination | None
    recorder: Recorder | None = None

    def session(self, destination: Destination | None = None) -> NavigationSession:
        dest = destination or self.destination
        if dest is None:
            raise ValueError("no destination given")
        return NavigationSession(self.kernel, self.location, dest)


def to_destination(m: DestinationModel) -> Destination:
    return Destination(
        id=m.id,
        name=m.name or m.id,
        lat=m.lat,
        lng=m.lng,
        related_event_id=m.related_event_id,
        related_staff_id=m.related_staff_id,
    )


def build(
    cfg: ScenarioModel | Mapping,
    *,
    render: Callable[[NavigationUpdated], None] | None = None,
    use_logging: bool = True,
    stream=None,
) -> App:
    """``stream`` receives JSON logs and recorded business events (stdout by default)."""
    # 0) Validate config
    model = cfg if isinstance(cfg, ScenarioModel) else ScenarioModel.model_validate(cfg)

    # 1) Recorder & kernel hooks
    recorder = None
    if model.log.record == "jsonl":
        recorder = Recorder(JsonlSink(stream))
    elif model.log.record == "memory":
        recorder = Recorder(MemorySink())

    hooks = (
        KernelLogging(
            run_id=model.run_id,
            recorder=recorder,
            level=model.log.level,
            debug=model.log.debug,
            sample_every=model.log.sample_every,
            stream=stream,
        )
        if use_logging
        else NoopHooks()
    )
    kernel = Kernel(hooks=hooks)

    # 2) Road network, panoramas (read once per mount)
    mechanics = build_mechanics(model.network, model.navigation)
    panoramas = make_panoramas(model.panoramas)
    destination = to_destination(model.destination) if model.destination else None

    # 3) Handler (inject deps explicitly)
    nav = model.navigation
    navigation = NavigationHandler(
        mechanics,
        panoramas,
        destination=destination,
        waypoint_radius_m=nav.waypoint_radius_m,
        waypoint_policy=make_waypoint_policy(nav.waypoint_policy),
        recompute=make_recompute_policy(nav.recompute),
        padding=nav.viewport_padding_px,
        zoom=nav.zoom,
        biz=recorder.emit if (recorder and not use_logging) else hooks.biz,
        run_id=model.run_id,
    )

    # 4) Location provider
    location = make_location_provider(
        model.location,
        deps={
            "mechanics": mechanics,
            "destination": destination,
            "rng": RNGRegistry(getattr(model.location, "seed", 0), session=model.name),
        },
    )

    # 5) Wiring
    wire(kernel, navigation=navigation, render=render)

    return App(kernel, mechanics, panoramas, navigation, location, destination, recorder)
