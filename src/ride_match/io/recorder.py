# ride_match/io/recorder.py
import json
import logging
import sys
from dataclasses import asdict
from typing import IO, Protocol

from ride_match.io.business_events import BizEvent

log = logging.getLogger(__name__)


class Sink(Protocol):
    def write(self, ev: BizEvent) -> None: ...


class JsonlSink:
    """One JSON object per line; stdout unless a text stream is given."""

    def __init__(self, fp: IO[str] | None = None):
        self.fp = fp if fp is not None else sys.stdout

    def write(self, ev: BizEvent) -> None:
        self.fp.write(json.dumps(asdict(ev), sort_keys=True) + "\n")


class MemorySink:
    def __init__(self):
        self.events: list[BizEvent] = []

    def write(self, ev: BizEvent) -> None:
        self.events.append(ev)

    def names(self) -> list[str]:
        return [e.name for e in self.events]

    def of(self, name: str) -> list[BizEvent]:
        return [e for e in self.events if e.name == name]


class Recorder:
    """Fans business events out to every sink. A sink that raises is logged and skipped."""

    def __init__(self, *sinks: Sink):
        self.sinks: tuple[Sink, ...] = sinks or (JsonlSink(),)
        self.failures = 0

    def emit(self, ev: BizEvent) -> None:
        for s in self.sinks:
            try:
                s.write(ev)
            except Exception:
                self.failures += 1
                log.exception("sink %s failed on %s", type(s).__name__, ev.name)
