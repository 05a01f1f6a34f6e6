# campus_nav/services/location.py
import itertools
import math
from collections.abc import Iterable

import numpy as np

from campus_nav.app.events import PositionFix
from campus_nav.app.protocols import (
    ErrorCallback,
    FixCallback,
    LocationProvider,
    LocationUnavailable,
)
from campus_nav.domain.entities.geography import EARTH_RADIUS_M, LatLng
from campus_nav.domain.mechanics.mechanics_core import Mechanics


class ReplayLocationProvider(LocationProvider):
    """
    Delivers a recorded sequence of fixes to the active watchers.

    Delivery is pull-driven: play() pushes fixes synchronously, stopping as
    soon as no watcher is left. With ``lost_after`` set, permission is revoked
    once that many fixes have been delivered.
    """

    def __init__(self, fixes: Iterable[PositionFix], *, lost_after: int | None = None):
        self.fixes = list(fixes)
        self.lost_after = lost_after
        self._watchers: dict[int, tuple[FixCallback, ErrorCallback | None]] = {}
        self._handles = itertools.count(1)
        self._cursor = 0
        self._last: PositionFix | None = None

    @property
    def active(self) -> bool:
        return bool(self._watchers)

    def current_fix(self) -> PositionFix | None:
        return self._last

    def watch(self, callback: FixCallback, on_error: ErrorCallback | None = None) -> int:
        h = next(self._handles)
        self._watchers[h] = (callback, on_error)
        return h

    def clear_watch(self, handle: int) -> None:
        self._watchers.pop(handle, None)

    def fail(self, reason: str = "permission_denied") -> None:
        """Drop every subscription and report ``reason`` to their error callbacks."""
        watchers, self._watchers = self._watchers, {}
        for _cb, on_error in watchers.values():
            if on_error is not None:
                on_error(LocationUnavailable(reason))

    def play(self, limit: int | None = None) -> int:
        delivered = 0
        while self._watchers and self._cursor < len(self.fixes):
            if limit is not None and delivered >= limit:
                break
            fix = self.fixes[self._cursor]
            self._cursor += 1
            self._last = fix
            for cb, _on_error in list(self._watchers.values()):
                cb(fix)
            delivered += 1
            if self.lost_after is not None and self._cursor >= self.lost_after:
                self.fail()
        return delivered


class SimulatedWalkProvider(ReplayLocationProvider):
    """A walker following the network route at walking pace, with GPS noise."""

    def __init__(
        self,
        mechanics: Mechanics,
        origin: LatLng,
        destination: LatLng,
        *,
        rng: np.random.Generator,
        t0: float = 0.0,
        step_s: float = 1.0,
        noise_m: float = 0.0,
    ):
        fixes = []
        for t, p in mechanics.walk(origin, destination, t0, step_s):
            dn, de = rng.normal(0.0, noise_m, size=2) if noise_m > 0 else (0.0, 0.0)
            fixes.append(
                PositionFix(
                    t=t,
                    lat=p.lat + math.degrees(dn / EARTH_RADIUS_M),
                    lng=p.lng + math.degrees(de / (EARTH_RADIUS_M * math.cos(math.radians(p.lat)))),
                    accuracy_m=noise_m or None,
                )
            )
        super().__init__(fixes)


class UnavailableLocationProvider(LocationProvider):
    def __init__(self, reason: str = "no_provider"):
        self.reason = reason

    def current_fix(self) -> PositionFix | None:
        return None

    def watch(self, callback: FixCallback, on_error: ErrorCallback | None = None) -> int:
        raise LocationUnavailable(self.reason)

    def clear_watch(self, handle: int) -> None:
        pass
