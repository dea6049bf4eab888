# tests/io/test_recorder.py
import io
import json
import logging

from ride_match.domain.state import WorldState
from ride_match.io.business_events import RequestRequeuedBiz
from ride_match.io.match_logging import MatchLogging
from ride_match.io.recorder import JsonlSink, MemorySink, Recorder


class BrokenSink:
    def write(self, ev):
        raise RuntimeError("disk full")


def requeued(seq=1):
    return RequestRequeuedBiz(
        run_id="r",
        seq=seq,
        name="RequestRequeued",
        request_id=4,
        passenger_id=9,
        earliest=3,
        offers_scanned=2,
    )


def test_jsonl_sink_writes_one_line_per_event():
    buf = io.StringIO()
    rec = Recorder(JsonlSink(buf))
    rec.emit(requeued(1))
    rec.emit(requeued(2))
    lines = buf.getvalue().splitlines()
    assert len(lines) == 2
    assert json.loads(lines[1])["seq"] == 2
    assert json.loads(lines[0])["offers_scanned"] == 2


def test_broken_sink_does_not_stop_the_others(caplog):
    mem = MemorySink()
    rec = Recorder(BrokenSink(), mem)
    with caplog.at_level(logging.ERROR, logger="ride_match"):
        rec.emit(requeued())
    assert mem.names() == ["RequestRequeued"]
    assert rec.failures == 1
    assert any("BrokenSink" in r.getMessage() for r in caplog.records)


def test_rejections_are_logged_only_in_debug(caplog):
    w = WorldState()
    w.users.register(1, "d", "driver")
    w.users.register(2, "p", "passenger")
    offer = w.offers.create_offer(1, 1, "A", "B", 0, 1)
    req = w.requests.create_request(1, 2, "A", "B", 5, 5)

    quiet = MatchLogging(run_id="q", level="DEBUG", recorder=Recorder(MemorySink()))
    loud = MatchLogging(run_id="l", level="DEBUG", debug=True, recorder=Recorder(MemorySink()))
    with caplog.at_level(logging.DEBUG, logger="ride_match"):
        quiet.offer_rejected(req, offer, reason="outside_window")
        loud.offer_rejected(req, offer, reason="outside_window")
    hits = [r for r in caplog.records if r.getMessage() == "offer_rejected"]
    assert [r.extra["run_id"] for r in hits] == ["l"]
    assert hits[0].extra["reason"] == "outside_window"
