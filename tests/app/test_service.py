# tests/app/test_service.py
import pytest

from ride_match.app.build import build
from ride_match.domain.errors import (
    InvalidCapacity,
    InvalidInput,
    NoPath,
    NotFound,
    QueueFull,
    UnknownDriver,
    UnknownPassenger,
)
from ride_match.sim.hooks import NoopHooks


class ErrorHooks(NoopHooks):
    def __init__(self):
        self.errors = []

    def error(self, op, *, exc, **kw):
        self.errors.append((op, exc.code if hasattr(exc, "code") else None))


@pytest.fixture
def app():
    a = build({"name": "svc", "queue": {"max_requests": 2}}, use_logging=False)
    hooks = ErrorHooks()
    a.service.hooks = hooks
    svc = a.service
    for x, y, c in [("A", "B", 5), ("A", "C", 10), ("B", "C", 3), ("C", "D", 4), ("B", "D", 8)]:
        a.world.graph.add_road(x, y, c)
    svc.register_user({"userId": 101, "name": "Ayesha", "role": "driver"})
    svc.register_user({"userId": 201, "name": "Sara", "role": "passenger"})
    svc.register_user({"userId": 202, "name": "Usman", "role": "passenger"})
    return a


def offer(oid=1, driver=101, start="A", end="D", depart=10, cap=2):
    return {
        "offerId": oid,
        "driverId": driver,
        "start": start,
        "end": end,
        "departTime": depart,
        "capacity": cap,
    }


def request(rid=1, pid=201, src="A", dst="D", lo=9, hi=11):
    return {
        "requestId": rid,
        "passengerId": pid,
        "from": src,
        "to": dst,
        "earliest": lo,
        "latest": hi,
    }


def test_offer_listing_shape(app):
    svc = app.service
    assert svc.create_offer(offer()) == {"ok": True}
    assert svc.create_offer(offer(oid=2, end="C", depart=12, cap=1)) == {"ok": True}
    assert svc.list_offers() == {
        "offers": [
            {
                "offerId": 2,
                "driverId": 101,
                "start": "A",
                "end": "C",
                "departTime": 12,
                "capacity": 1,
                "seatsLeft": 1,
            },
            {
                "offerId": 1,
                "driverId": 101,
                "start": "A",
                "end": "D",
                "departTime": 10,
                "capacity": 2,
                "seatsLeft": 2,
            },
        ]
    }


def test_match_next_then_history_and_top_drivers(app):
    svc = app.service
    svc.create_offer(offer())
    svc.create_request(request())
    assert svc.match_next() == {
        "matched": True,
        "driverId": 101,
        "driverName": "Ayesha",
        "offerId": 1,
        "start": "A",
        "end": "D",
        "departTime": 10,
    }
    assert svc.match_next() == {"matched": False}
    assert svc.history(201) == {
        "history": [{"offerId": 1, "from": "A", "to": "D", "departTime": 10}]
    }
    assert svc.history(999) == {"history": []}
    assert svc.top_drivers(5) == {
        "drivers": [{"userId": 101, "name": "Ayesha", "rating": 0, "completedRides": 1}]
    }


@pytest.mark.parametrize(
    "payload, exc, code",
    [
        (offer(driver=201), UnknownDriver, "unknown_driver"),
        (offer(driver=999), UnknownDriver, "unknown_driver"),
        (offer(cap=0), InvalidCapacity, "invalid_capacity"),
        ({"offerId": 1, "driverId": 101}, InvalidInput, "invalid_body"),
        ({**offer(), "departTime": "soon"}, InvalidInput, "invalid_body"),
    ],
)
def test_create_offer_errors(app, payload, exc, code):
    with pytest.raises(exc) as ei:
        app.service.create_offer(payload)
    assert ei.value.code == code
    assert app.service.hooks.errors == [("create_offer", code)]
    assert app.service.list_offers() == {"offers": []}


def test_unknown_driver_wins_over_bad_capacity(app):
    with pytest.raises(UnknownDriver):
        app.service.create_offer(offer(driver=201, cap=0))


@pytest.mark.parametrize(
    "payload, exc",
    [
        (request(pid=101), UnknownPassenger),
        (request(pid=999), UnknownPassenger),
        (request(lo=5, hi=4), InvalidInput),
        ({"requestId": 1, "passengerId": 201, "to": "D", "earliest": 0, "latest": 1}, InvalidInput),
    ],
)
def test_create_request_errors(app, payload, exc):
    with pytest.raises(exc):
        app.service.create_request(payload)
    assert len(app.world.requests) == 0


def test_queue_full_surfaces_code(app):
    svc = app.service
    svc.create_request(request(rid=1))
    svc.create_request(request(rid=2, pid=202))
    with pytest.raises(QueueFull):
        svc.create_request(request(rid=3))
    assert svc.hooks.errors == [("create_request", "queue_full")]


def test_register_and_rating_validation(app):
    svc = app.service
    with pytest.raises(InvalidInput):
        svc.register_user({"userId": 5, "name": "X", "role": "pilot"})
    with pytest.raises(InvalidInput):
        svc.register_user({"userId": 5, "role": "driver"})
    with pytest.raises(InvalidInput):
        svc.set_rating({"userId": 101, "rating": -2})
    with pytest.raises(NotFound):
        svc.set_rating({"userId": 5, "rating": 4})
    assert svc.set_rating({"userId": 101, "rating": 4}) == {"ok": True}
    assert app.world.users.lookup(101).rating == 4


def test_graph_listing(app):
    g = app.service.graph()
    assert g["places"] == ["A", "B", "C", "D"]
    assert g["roads"][0] == {"from": "A", "to": "B", "cost": 5}
    assert len(g["roads"]) == 5


def test_reachable(app):
    svc = app.service
    svc.create_offer(offer())
    assert svc.reachable({"offerId": 1, "costBound": 8}) == {
        "reachable": [
            {"place": "A", "cost": 0},
            {"place": "B", "cost": 5},
            {"place": "C", "cost": 8},
        ]
    }
    assert svc.reachable({"offerId": 1, "costBound": -1}) == {"reachable": []}
    with pytest.raises(NotFound):
        svc.reachable({"offerId": 42, "costBound": 8})
    with pytest.raises(InvalidInput):
        svc.reachable({"offerId": 1})


def test_route(app):
    svc = app.service
    assert svc.route({"from": "A", "to": "D"}) == {"path": ["A", "B", "C", "D"], "totalCost": 12}
    with pytest.raises(NoPath) as ei:
        svc.route({"from": "D", "to": "A"})
    assert ei.value.code == "no_path"
    with pytest.raises(NotFound):
        svc.route({"from": "A", "to": "Nowhere"})
    assert "Nowhere" not in app.world.graph
    assert [op for op, _ in svc.hooks.errors] == ["route", "route"]
