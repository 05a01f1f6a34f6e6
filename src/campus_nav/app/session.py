# campus_nav/app/session.py
import logging

from campus_nav.app.events import (
    DestinationSet,
    PositionFix,
    SessionStarted,
    TrackingStopped,
    TrackingUnavailable,
)
from campus_nav.app.protocols import LocationProvider, LocationUnavailable
from campus_nav.domain.entities.navigation import Destination
from campus_nav.sim.kernel import Kernel

log = logging.getLogger("campus_nav.session")


class NavigationSession:
    """
    Scoped location subscription for one navigation screen.

    Entering resets the navigation state, subscribes to the provider and posts
    the destination; every delivered fix is posted to the kernel and drained
    before the callback returns. Exiting always releases the subscription,
    after which late deliveries are ignored.
    """

    def __init__(self, kernel: Kernel, provider: LocationProvider | None, destination: Destination):
        self.kernel = kernel
        self.provider = provider
        self.destination = destination
        self.handle: int | None = None
        self.fixes = 0
        self._open = False

    @property
    def tracking(self) -> bool:
        return self.handle is not None

    def __enter__(self) -> "NavigationSession":
        self._open = True
        now = self.kernel.now
        self.kernel.post(SessionStarted(t=now, destination_id=self.destination.id))
        self.kernel.post(DestinationSet(t=now, destination=self.destination))
        if self.provider is None:
            self.kernel.post(TrackingUnavailable(t=now, reason="no_provider"))
        else:
            try:
                self.handle = self.provider.watch(self._on_fix, self._on_error)
            except LocationUnavailable as exc:
                log.info("location tracking unavailable: %s", exc)
                self.kernel.post(TrackingUnavailable(t=now, reason=str(exc) or "unavailable"))
        self.kernel.run()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._open = False
        if self.handle is not None:
            handle, self.handle = self.handle, None
            self.provider.clear_watch(handle)
        self.kernel.post(TrackingStopped(t=self.kernel.now, fixes=self.fixes))
        self.kernel.run()

    def _on_fix(self, fix: PositionFix) -> None:
        if not self._open:
            return
        self.fixes += 1
        self.kernel.post(fix)
        self.kernel.run()

    def _on_error(self, exc: LocationUnavailable) -> None:
        # the provider has already dropped the subscription
        if not self._open or self.handle is None:
            return
        self.handle = None
        log.info("location tracking lost: %s", exc)
        self.kernel.post(TrackingUnavailable(t=self.kernel.now, reason=str(exc) or "unavailable"))
        self.kernel.run()
