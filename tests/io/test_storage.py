# tests/io/test_storage.py
import json

import pytest

from ride_match.app.build import build
from ride_match.domain.errors import InvalidInput, UnknownDriver
from ride_match.io import storage
from ride_match.io.storage import OFFERS, RIDES, USERS, load_world, save_world


@pytest.fixture
def app():
    a = build({"name": "store"}, use_logging=False)
    svc = a.service
    for x, y, c in [("A", "B", 5), ("B", "C", 3), ("C", "D", 4)]:
        a.world.graph.add_road(x, y, c)
    a.world.graph.get_or_create_place("Island")
    svc.register_user({"userId": 101, "name": "Ayesha", "role": "driver"})
    svc.register_user({"userId": 102, "name": "Bilal", "role": "driver"})
    svc.register_user({"userId": 201, "name": "Sara", "role": "passenger"})
    svc.register_user({"userId": 202, "name": "Usman", "role": "passenger"})
    svc.set_rating({"userId": 102, "rating": 4})
    for oid, driver, depart in [(1, 101, 10), (2, 102, 30)]:
        svc.create_offer(
            {
                "offerId": oid,
                "driverId": driver,
                "start": "A",
                "end": "D",
                "departTime": depart,
                "capacity": 2,
            }
        )
    for rid, pid, lo in [(1, 201, 9), (2, 202, 50), (3, 201, 20)]:
        svc.create_request(
            {
                "requestId": rid,
                "passengerId": pid,
                "from": "A",
                "to": "C",
                "earliest": lo,
                "latest": lo + 2,
            }
        )
    assert svc.match_next()["matched"] is True  # request 1 onto offer 1
    return a


def test_round_trip_preserves_every_store(app, tmp_path):
    save_world(app.world, tmp_path)
    w = load_world(tmp_path, max_requests=app.world.max_requests)
    old = app.world

    assert [(u.user_id, u.name, u.role, u.rating, u.completed_rides) for u in w.users] == [
        (u.user_id, u.name, u.role, u.rating, u.completed_rides) for u in old.users
    ]
    assert [p.name for p in w.graph.enumerate_places()] == [
        p.name for p in old.graph.enumerate_places()
    ]
    assert "Island" in w.graph
    assert [(e.source.name, e.to.name, e.cost) for e in w.graph.iter_edges()] == [
        (e.source.name, e.to.name, e.cost) for e in old.graph.iter_edges()
    ]
    assert [(o.offer_id, o.seats_left) for o in w.offers] == [(2, 2), (1, 1)]
    assert [r.request_id for r in w.requests.ordered()] == [3, 2]
    assert w.history.for_user(101) == old.history.for_user(101)
    assert w.users.lookup(101).completed_rides == 1

    # places are shared, not copied per store
    assert w.offers.get(1).start_place is w.graph.find_place("A")
    assert w.requests.get(3).to_place is w.graph.find_place("C")


def test_saved_files_are_plain_json(app, tmp_path):
    save_world(app.world, tmp_path)
    users = json.loads((tmp_path / USERS).read_text())
    assert users[0] == {
        "user_id": 101,
        "name": "Ayesha",
        "is_driver": True,
        "rating": 0,
        "completed_rides": 1,
    }
    assert [o["offer_id"] for o in json.loads((tmp_path / OFFERS).read_text())] == [2, 1]


def test_service_reload_replaces_world(app, tmp_path):
    svc = app.service
    assert svc.save_world(tmp_path) == {"ok": True}
    svc.create_request(
        {"requestId": 9, "passengerId": 202, "from": "A", "to": "B", "earliest": 0, "latest": 99}
    )
    assert svc.load_world(tmp_path) == {"ok": True}
    assert 9 not in app.world.requests
    # the matcher sees the reloaded stores
    svc.create_offer(
        {"offerId": 3, "driverId": 101, "start": "A", "end": "D", "departTime": 21, "capacity": 1}
    )
    res = svc.match_next()
    assert res["matched"] is True and res["offerId"] == 3
    assert len(app.world.requests) == 1


def test_failed_load_keeps_current_world(app, tmp_path):
    svc = app.service
    assert svc.load_world(tmp_path / "empty") == {"ok": False}
    assert len(app.world.offers) == 2

    save_world(app.world, tmp_path)
    (tmp_path / RIDES).write_text("[{not json")
    before = app.world.requests
    assert svc.load_world(tmp_path) == {"ok": False}
    assert app.world.requests is before


def test_dangling_reference_fails_load(app, tmp_path):
    save_world(app.world, tmp_path)
    users = [u for u in json.loads((tmp_path / USERS).read_text()) if u["user_id"] != 102]
    (tmp_path / USERS).write_text(json.dumps(users))
    with pytest.raises(UnknownDriver):
        load_world(tmp_path)
    assert app.service.load_world(tmp_path) == {"ok": False}


def test_overfull_offer_record_is_rejected(app, tmp_path):
    save_world(app.world, tmp_path)
    offers = json.loads((tmp_path / OFFERS).read_text())
    offers[0]["seats_left"] = offers[0]["capacity"] + 1
    (tmp_path / OFFERS).write_text(json.dumps(offers))
    with pytest.raises(ValueError):
        load_world(tmp_path)


def test_role_change_cannot_orphan_saved_offers(app, tmp_path):
    svc = app.service
    with pytest.raises(InvalidInput):
        svc.register_user({"userId": 101, "name": "Ayesha", "role": "passenger"})
    with pytest.raises(InvalidInput):
        svc.register_user({"userId": 202, "name": "Usman", "role": "driver"})
    assert svc.save_world(tmp_path) == {"ok": True}
    assert svc.load_world(tmp_path) == {"ok": True}
    assert app.world.users.driver_exists(101)
    assert [o.offer_id for o in app.world.offers] == [2, 1]
    assert app.world.requests.get(2).passenger_id == 202


def test_failed_save_keeps_previous_snapshot(app, tmp_path, monkeypatch):
    svc = app.service
    assert svc.save_world(tmp_path) == {"ok": True}
    before = {p.name: p.read_text() for p in tmp_path.iterdir()}

    svc.create_offer(
        {"offerId": 3, "driverId": 101, "start": "B", "end": "D", "departTime": 40, "capacity": 1}
    )
    real_write = storage._write

    def flaky_write(path, payload):
        if path.name == f"{RIDES}.tmp":
            raise OSError("disk full")
        real_write(path, payload)

    monkeypatch.setattr(storage, "_write", flaky_write)
    assert svc.save_world(tmp_path) == {"ok": False}

    assert {p.name: p.read_text() for p in tmp_path.iterdir()} == before
    monkeypatch.undo()
    assert [o.offer_id for o in load_world(tmp_path).offers] == [2, 1]
