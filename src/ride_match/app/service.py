# ride_match/app/service.py
import logging
from collections.abc import Mapping
from contextlib import contextmanager
from pathlib import Path

from pydantic import BaseModel, ValidationError

from ride_match.app.controllers.matcher import Matcher
from ride_match.app.schemas import (
    CreateOfferIn,
    CreateRequestIn,
    ReachableIn,
    RegisterUserIn,
    RouteIn,
    SetRatingIn,
)
from ride_match.domain.errors import InvalidInput, NoPath, NotFound, RideMatchError
from ride_match.domain.paths import PathEngine
from ride_match.domain.state import WorldState
from ride_match.io.storage import load_world, save_world
from ride_match.sim.hooks import MatchHooks, NoopHooks

log = logging.getLogger(__name__)


def _parse(schema: type[BaseModel], payload: Mapping):
    try:
        return schema.model_validate(payload)
    except ValidationError as exc:
        detail = "; ".join(
            f"{'.'.join(str(p) for p in e['loc']) or '<body>'}: {e['msg']}" for e in exc.errors()
        )
        raise InvalidInput(detail) from exc


class RideShareService:
    """
    Operations surface over one world. Takes JSON-like mappings with camelCase
    keys and returns plain dicts, so an HTTP host only has to move bytes.
    Caller errors surface as RideMatchError subclasses carrying a `code`.
    """

    def __init__(
        self,
        world: WorldState,
        matcher: Matcher,
        paths: PathEngine,
        hooks: MatchHooks | None = None,
    ):
        self.world = world
        self.matcher = matcher
        self.paths = paths
        self.hooks = hooks or NoopHooks()

    @contextmanager
    def _op(self, name: str):
        try:
            yield
        except RideMatchError as exc:
            self.hooks.error(name, exc=exc)
            raise

    # ------------------------- users -----------------------------

    def register_user(self, payload: Mapping) -> dict:
        with self._op("register_user"):
            body = _parse(RegisterUserIn, payload)
            self.world.register_user(body.user_id, body.name, body.role)
        return {"ok": True}

    def set_rating(self, payload: Mapping) -> dict:
        with self._op("set_rating"):
            body = _parse(SetRatingIn, payload)
            self.world.users.set_rating(body.user_id, body.rating)
        return {"ok": True}

    def top_drivers(self, k: int = 10) -> dict:
        return {
            "drivers": [
                {
                    "userId": u.user_id,
                    "name": u.name,
                    "rating": u.rating,
                    "completedRides": u.completed_rides,
                }
                for u in self.world.users.top_drivers(k)
            ]
        }

    def history(self, user_id: int) -> dict:
        return {
            "history": [
                {
                    "offerId": e.offer_id,
                    "from": e.from_name,
                    "to": e.to_name,
                    "departTime": e.depart_time,
                }
                for e in self.world.history.for_user(user_id)
            ]
        }

    # ------------------------- rides -----------------------------

    def create_offer(self, payload: Mapping) -> dict:
        with self._op("create_offer"):
            body = _parse(CreateOfferIn, payload)
            offer = self.world.offers.create_offer(
                body.offer_id,
                body.driver_id,
                body.start,
                body.end,
                body.depart_time,
                body.capacity,
            )
        self.hooks.offer_created(offer)
        return {"ok": True}

    def create_request(self, payload: Mapping) -> dict:
        with self._op("create_request"):
            body = _parse(CreateRequestIn, payload)
            req = self.world.requests.create_request(
                body.request_id,
                body.passenger_id,
                body.from_,
                body.to,
                body.earliest,
                body.latest,
            )
        self.hooks.request_queued(req, qsize=len(self.world.requests))
        return {"ok": True}

    def list_offers(self) -> dict:
        return {
            "offers": [
                {
                    "offerId": o.offer_id,
                    "driverId": o.driver_id,
                    "start": o.start_place.name,
                    "end": o.end_place.name,
                    "departTime": o.depart_time,
                    "capacity": o.capacity,
                    "seatsLeft": o.seats_left,
                }
                for o in self.world.offers
            ]
        }

    def match_next(self) -> dict:
        return self.matcher.match_next().to_dict()

    # ------------------------- graph -----------------------------

    def graph(self) -> dict:
        g = self.world.graph
        return {
            "places": [p.name for p in g.enumerate_places()],
            "roads": [
                {"from": e.source.name, "to": e.to.name, "cost": e.cost} for e in g.iter_edges()
            ],
        }

    def reachable(self, payload: Mapping) -> dict:
        with self._op("reachable"):
            body = _parse(ReachableIn, payload)
            offer = self.world.offers.get(body.offer_id)
            if offer is None:
                raise NotFound(f"offer {body.offer_id} not found")
            hits = self.paths.reachable_within_cost(offer.start_place, body.cost_bound)
        return {"reachable": [{"place": p.name, "cost": c} for p, c in hits]}

    def route(self, payload: Mapping) -> dict:
        with self._op("route"):
            body = _parse(RouteIn, payload)
            start = self.world.graph.find_place(body.from_)
            end = self.world.graph.find_place(body.to)
            for name, place in ((body.from_, start), (body.to, end)):
                if place is None:
                    raise NotFound(f"place {name!r} not found")
            sp = self.paths.shortest_path(start, end)
            if sp is None:
                raise NoPath(f"no path from {body.from_!r} to {body.to!r}")
        return {"path": sp.names, "totalCost": sp.total_cost}

    # ------------------------- storage -----------------------------

    def save_world(self, base_dir: str | Path = ".") -> dict:
        try:
            save_world(self.world, base_dir)
        except (OSError, ValueError) as exc:
            log.exception("save to %s failed", base_dir)
            self.hooks.error("save_world", exc=exc, base_dir=str(base_dir))
            return {"ok": False}
        return {"ok": True}

    def load_world(self, base_dir: str | Path = ".") -> dict:
        # a failed load keeps the current world untouched
        try:
            loaded = load_world(base_dir, max_requests=self.world.max_requests)
        except (OSError, ValueError, RideMatchError) as exc:
            log.exception("load from %s failed", base_dir)
            self.hooks.error("load_world", exc=exc, base_dir=str(base_dir))
            return {"ok": False}
        self.world.adopt(loaded)
        return {"ok": True}
