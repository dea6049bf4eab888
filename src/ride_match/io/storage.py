# ride_match/io/storage.py
"""
World persistence as one JSON file per store.

Saves are staged as `.tmp` files and renamed into place only after every file
was written, so a failed save leaves the previous snapshot intact.

Load order is fixed: users, then places and roads, then offers, then queued
requests, then history. Each later store validates references against the
earlier ones, so a load either yields a consistent world or raises.
"""

import json
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator

from ride_match.domain.entities.ride import HistoryEntry, RideOffer
from ride_match.domain.entities.user import User
from ride_match.domain.errors import UnknownDriver
from ride_match.domain.state import WorldState

log = logging.getLogger(__name__)

USERS, ROADS, OFFERS, RIDES, HISTORY = (
    "users.json",
    "roads.json",
    "offers.json",
    "rides.json",
    "history.json",
)


class _Record(BaseModel):
    model_config = ConfigDict(extra="forbid")


class UserRecord(_Record):
    user_id: int
    name: str
    is_driver: bool
    rating: int = 0
    completed_rides: int = Field(default=0, ge=0)


class RoadRecord(_Record):
    source: str
    to: str
    cost: int = Field(ge=0)


class RoadsRecord(_Record):
    places: list[str] = Field(default_factory=list)
    roads: list[RoadRecord] = Field(default_factory=list)


class OfferRecord(_Record):
    offer_id: int
    driver_id: int
    start: str
    end: str
    depart_time: int
    capacity: int = Field(ge=1)
    seats_left: int = Field(ge=0)

    @model_validator(mode="after")
    def _seats_within_capacity(self):
        if self.seats_left > self.capacity:
            raise ValueError(f"seats_left ({self.seats_left}) exceeds capacity ({self.capacity})")
        return self


class RequestRecord(_Record):
    request_id: int
    passenger_id: int
    origin: str
    dest: str
    earliest: int
    latest: int


class HistoryRecord(_Record):
    user_id: int
    offer_id: int
    from_name: str
    to_name: str
    depart_time: int


def _write(path: Path, payload) -> None:
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")


def _read(path: Path, adapter: TypeAdapter):
    return adapter.validate_json(path.read_text(encoding="utf-8"))


def _commit(base: Path, payloads: dict[str, object]) -> None:
    """Write every file under a `.tmp` name first, then rename them all into place."""
    staged: list[tuple[Path, Path]] = []
    try:
        for name, payload in payloads.items():
            tmp = base / f"{name}.tmp"
            staged.append((tmp, base / name))
            _write(tmp, payload)
    except Exception:
        for tmp, _ in staged:
            tmp.unlink(missing_ok=True)
        raise
    for tmp, final in staged:
        tmp.replace(final)


# ------------------------- save -----------------------------


def save_world(world: WorldState, base_dir: str | Path = ".") -> None:
    base = Path(base_dir)
    base.mkdir(parents=True, exist_ok=True)
    payloads: dict[str, object] = {}

    payloads[USERS] = [
        UserRecord(
            user_id=u.user_id,
            name=u.name,
            is_driver=u.is_driver,
            rating=u.rating,
            completed_rides=u.completed_rides,
        ).model_dump()
        for u in world.users
    ]
    g = world.graph
    payloads[ROADS] = RoadsRecord(
        places=[p.name for p in g.enumerate_places()],
        roads=[
            RoadRecord(source=e.source.name, to=e.to.name, cost=e.cost)
            for e in g.iter_edges()
        ],
    ).model_dump()
    payloads[OFFERS] = [
        OfferRecord(
            offer_id=o.offer_id,
            driver_id=o.driver_id,
            start=o.start_place.name,
            end=o.end_place.name,
            depart_time=o.depart_time,
            capacity=o.capacity,
            seats_left=o.seats_left,
        ).model_dump()
        for o in world.offers  # scan order
    ]
    payloads[RIDES] = [
        RequestRecord(
            request_id=r.request_id,
            passenger_id=r.passenger_id,
            origin=r.from_place.name,
            dest=r.to_place.name,
            earliest=r.earliest,
            latest=r.latest,
        ).model_dump()
        for r in world.requests.ordered()
    ]
    payloads[HISTORY] = [
        HistoryRecord(
            user_id=uid,
            offer_id=e.offer_id,
            from_name=e.from_name,
            to_name=e.to_name,
            depart_time=e.depart_time,
        ).model_dump()
        for uid, entries in world.history
        for e in entries
    ]
    _commit(base, payloads)
    log.info("saved world to %s", base)


# ------------------------- load -----------------------------


def load_world(base_dir: str | Path = ".", *, max_requests: int = 1000) -> WorldState:
    base = Path(base_dir)
    world = WorldState(max_requests=max_requests)

    for rec in _read(base / USERS, TypeAdapter(list[UserRecord])):
        world.users.restore(
            User(
                user_id=rec.user_id,
                name=rec.name,
                is_driver=rec.is_driver,
                rating=rec.rating,
                completed_rides=rec.completed_rides,
            )
        )

    roads = _read(base / ROADS, TypeAdapter(RoadsRecord))
    for name in roads.places:
        world.graph.get_or_create_place(name)
    for r in roads.roads:
        world.graph.add_road(r.source, r.to, r.cost)

    # stored newest-first; insert oldest-first so the scan order comes back unchanged
    for rec in reversed(_read(base / OFFERS, TypeAdapter(list[OfferRecord]))):
        if not world.users.driver_exists(rec.driver_id):
            raise UnknownDriver(f"offer {rec.offer_id}: user {rec.driver_id} is not a driver")
        world.offers.add(
            RideOffer(
                offer_id=rec.offer_id,
                driver_id=rec.driver_id,
                start_place=world.graph.get_or_create_place(rec.start),
                end_place=world.graph.get_or_create_place(rec.end),
                depart_time=rec.depart_time,
                capacity=rec.capacity,
                seats_left=rec.seats_left,
            )
        )

    for rec in _read(base / RIDES, TypeAdapter(list[RequestRecord])):
        world.requests.create_request(
            rec.request_id, rec.passenger_id, rec.origin, rec.dest, rec.earliest, rec.latest
        )

    for rec in _read(base / HISTORY, TypeAdapter(list[HistoryRecord])):
        world.history.restore(
            rec.user_id,
            HistoryEntry(
                user_id=rec.user_id,
                offer_id=rec.offer_id,
                from_name=rec.from_name,
                to_name=rec.to_name,
                depart_time=rec.depart_time,
            ),
        )
    log.info(
        "loaded world from %s: %d users, %d places, %d offers, %d queued requests",
        base,
        len(world.users),
        len(world.graph),
        len(world.offers),
        len(world.requests),
    )
    return world
