# campus_nav/app/wiring.py
from collections.abc import Callable

from campus_nav.app.controllers.navigation import NavigationHandler
from campus_nav.app.events import (
    DestinationSet,
    NavigationUpdated,
    PositionFix,
    SessionStarted,
    TrackingStopped,
    TrackingUnavailable,
)
from campus_nav.sim.kernel import Kernel


def wire(
    kernel: Kernel,
    *,
    navigation: NavigationHandler,
    render: Callable[[NavigationUpdated], None] | None = None,
) -> None:
    k = kernel

    # inputs
    k.on(SessionStarted, navigation.on_session_started)
    k.on(DestinationSet, navigation.on_destination_set)
    k.on(PositionFix, navigation.on_position_fix)
    k.on(TrackingUnavailable, navigation.on_tracking_unavailable)
    k.on(TrackingStopped, navigation.on_tracking_stopped)

    # outputs → map view
    if render:
        k.on(NavigationUpdated, render)
