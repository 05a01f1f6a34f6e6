# io/kernel_logging.py
import json
import logging
import sys
from dataclasses import asdict, is_dataclass
from datetime import UTC, datetime

from campus_nav.app.events import NavigationUpdated
from campus_nav.io.recorder import Recorder
from campus_nav.sim.hooks import NoopHooks


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)
        return json.dumps(payload, default=str)


def default_json_logger(name="campus_nav", level="INFO", stream=None):
    logger = logging.getLogger(name)
    ours = [h for h in logger.handlers if isinstance(h.formatter, JsonFormatter)]
    if not ours:
        h = logging.StreamHandler(stream or sys.stdout)
        h.setFormatter(JsonFormatter())
        logger.addHandler(h)
    elif stream is not None:
        for h in ours:
            if isinstance(h, logging.StreamHandler):
                h.setStream(stream)
    logger.setLevel(level)
    return logger


class KernelLogging(NoopHooks):
    """
    One place to shape and emit structured logs for both engine and business events.
    """

    BUSINESS = {
        "SessionStarted",
        "PositionFix",
        "DestinationSet",
        "NavigationUpdated",
        "TrackingUnavailable",
        "TrackingStopped",
    }

    def __init__(
        self,
        run_id: str = "local",
        level: str = "INFO",
        debug: bool = False,
        sample_every: int = 1,
        logger: logging.Logger | None = None,
        recorder: Recorder | None = None,
        stream=None,
    ):
        self.run_id, self.debug, self.sample_every = run_id, debug, max(1, sample_every)
        self.recorder = recorder
        self.log = logger or default_json_logger(level=level, stream=stream)
        self._dispatched = 0

    # --------------- Helpers -----------------------------

    def _emit(self, level: str, msg: str, **extra):
        payload = {"run_id": self.run_id}
        t = extra.get("t")
        if isinstance(t, (int, float)):
            try:
                payload["wall"] = datetime.fromtimestamp(t, UTC).isoformat()
            except (OverflowError, OSError, ValueError):
                pass  # not epoch seconds; t is still logged
        self.log.log(getattr(logging, level), msg, extra={"extra": {**payload, **extra}})

    def _shape_event(self, ev) -> dict:
        base = {"t": getattr(ev, "t", None)}
        if isinstance(ev, NavigationUpdated):
            s = ev.state
            base.update(
                destination_id=s.destination.id,
                nodes=len(s.route.points),
                distance_m=s.distance_m,
                eta_min=s.eta_min,
                destination_panorama=s.destination_panorama is not None,
                waypoint_panorama=s.waypoint_panorama is not None,
            )
            return base
        if is_dataclass(ev):
            evd = asdict(ev)
            evd.pop("t", None)
            base.update(evd)
        return base

    # --------------------------------------------------------

    # engine lifecycle

    def run_start(self, *, until, max_events, qsize):
        if self.debug:
            self._emit("DEBUG", "run_start", until=until, max_events=max_events, qsize=qsize)

    def run_end(self, *, processed: int, **extra):
        if self.debug:
            self._emit("DEBUG", "run_end", processed=processed, **extra)

    def schedule(self, ev, *, now: float, qsize: int):
        if self.debug and (qsize % self.sample_every) == 0:
            self._emit("DEBUG", "schedule", event=type(ev).__name__, now=now, qsize=qsize)

    def late_input(self, ev, *, now: float, lag_s: float):
        self._emit("WARNING", "late_input", event=type(ev).__name__, now=now, lag_s=lag_s)

    def dispatch_start(self, ev, *, seq: int, qsize: int, handlers: int):
        self._dispatched += 1
        name = type(ev).__name__
        level = "INFO" if name in self.BUSINESS else ("DEBUG" if self.debug else None)
        if level and (self._dispatched % self.sample_every) == 0:
            self._emit(level, name, **self._shape_event(ev), seq=seq, handlers=handlers)

    def dispatch_end(self, ev, *, out_events: int, ms: float):
        if self.debug:
            self._emit("DEBUG", "dispatch_done", event=type(ev).__name__, out_events=out_events, ms=ms)

    def error(self, ev, *, reason: str, **extra):
        self._emit("ERROR", "kernel_error", event=type(ev).__name__, reason=reason, **extra)

    # ------------- Business Event Reporting --------------------------

    def biz(self, ev):
        if self.recorder:
            self.recorder.emit(ev)
