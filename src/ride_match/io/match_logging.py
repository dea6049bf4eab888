# ride_match/io/match_logging.py
import json
import logging
import sys

from ride_match.io.business_events import (
    OfferPostedBiz,
    RequestRequeuedBiz,
    RideMatchedBiz,
    RideRequestedBiz,
)
from ride_match.io.recorder import Recorder
from ride_match.sim.hooks import NoopHooks


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def default_json_logger(name="ride_match", level="INFO"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(_JsonFormatter())
        logger.addHandler(h)
    logger.setLevel(level)
    return logger


class MatchLogging(NoopHooks):
    """
    Structured logs for the matching lifecycle, plus business events for the recorder.
    """

    def __init__(
        self,
        run_id: str = "local",
        level: str = "INFO",
        debug: bool = False,
        logger: logging.Logger | None = None,
        recorder: Recorder | None = None,
    ):
        self.run_id, self.debug = run_id, debug
        self.recorder = recorder
        self.log = logger or default_json_logger(level=level)
        self._seq = 0

    # --------------- Helpers -----------------------------

    def _emit(self, level: str, msg: str, **extra):
        payload = {"run_id": self.run_id, **extra}
        self.log.log(getattr(logging, level), msg, extra={"extra": payload})

    def _biz(self, cls, name: str, **fields):
        if self.recorder is None:
            return
        self._seq += 1
        self.recorder.emit(cls(run_id=self.run_id, seq=self._seq, name=name, **fields))

    # --------------------------------------------------------

    def offer_created(self, offer):
        fields = dict(
            offer_id=offer.offer_id,
            driver_id=offer.driver_id,
            start=offer.start_place.name,
            end=offer.end_place.name,
            depart_time=offer.depart_time,
            capacity=offer.capacity,
        )
        self._emit("INFO", "offer_created", **fields)
        self._biz(OfferPostedBiz, "OfferPosted", **fields)

    def request_queued(self, req, *, qsize):
        fields = dict(
            request_id=req.request_id,
            passenger_id=req.passenger_id,
            origin=req.from_place.name,
            dest=req.to_place.name,
            earliest=req.earliest,
            latest=req.latest,
        )
        self._emit("INFO", "request_queued", **fields, qsize=qsize)
        self._biz(RideRequestedBiz, "RideRequested", **fields)

    def offer_rejected(self, req, offer, *, reason):
        if self.debug:
            self._emit(
                "DEBUG",
                "offer_rejected",
                request_id=req.request_id,
                offer_id=offer.offer_id,
                reason=reason,
            )

    def matched(self, req, offer, *, qsize, scanned):
        fields = dict(
            request_id=req.request_id,
            passenger_id=req.passenger_id,
            offer_id=offer.offer_id,
            driver_id=offer.driver_id,
            depart_time=offer.depart_time,
            seats_left=offer.seats_left,
        )
        self._emit("INFO", "matched", **fields, offers_scanned=scanned, qsize=qsize)
        self._biz(RideMatchedBiz, "RideMatched", **fields, offers_scanned=scanned)

    def requeued(self, req, *, qsize, scanned):
        fields = dict(
            request_id=req.request_id, passenger_id=req.passenger_id, earliest=req.earliest
        )
        self._emit("INFO", "requeued", **fields, offers_scanned=scanned, qsize=qsize)
        self._biz(RequestRequeuedBiz, "RequestRequeued", **fields, offers_scanned=scanned)

    def error(self, op, *, exc, **extra):
        code = getattr(exc, "code", None)
        self._emit("WARNING", "operation_failed", op=op, code=code, error=str(exc), **extra)
