# ride_match/app/controllers/matcher.py
from dataclasses import dataclass

from ride_match.app.protocols import MatchingPolicy
from ride_match.domain.entities.ride import HistoryEntry, RideOffer, RideRequest
from ride_match.domain.state import WorldState
from ride_match.sim.hooks import MatchHooks, NoopHooks


@dataclass(frozen=True)
class MatchResult:
    matched: bool
    request_id: int | None = None
    passenger_id: int | None = None
    driver_id: int | None = None
    driver_name: str | None = None
    offer_id: int | None = None
    start: str | None = None
    end: str | None = None
    depart_time: int | None = None
    seats_left: int | None = None

    def to_dict(self) -> dict:
        if not self.matched:
            return {"matched": False}
        return {
            "matched": True,
            "driverId": self.driver_id,
            "driverName": self.driver_name,
            "offerId": self.offer_id,
            "start": self.start,
            "end": self.end,
            "departTime": self.depart_time,
        }


NOT_MATCHED = MatchResult(matched=False)


class Matcher:
    """
    Pairs the earliest queued request with the first admissible offer in scan
    order. The only code path that changes seat counts.
    """

    def __init__(self, world: WorldState, policy: MatchingPolicy, hooks: MatchHooks | None = None):
        self.world = world
        self.policy = policy
        self.hooks = hooks or NoopHooks()

    def match_next(self) -> MatchResult:
        queue = self.world.requests
        req = queue.extract_min()
        if req is None:
            return NOT_MATCHED

        rejection = self.policy.screen(req)
        scanned = 0
        for offer in self.world.offers:
            scanned += 1
            reason = rejection(offer)
            if reason is not None:
                self.hooks.offer_rejected(req, offer, reason=reason)
                continue
            result = self._complete(req, offer)
            self.hooks.matched(req, offer, qsize=len(queue), scanned=scanned)
            return result

        # same object goes back; it sorts behind peers that share its `earliest`
        queue.requeue(req)
        self.hooks.requeued(req, qsize=len(queue), scanned=scanned)
        return MatchResult(matched=False, request_id=req.request_id, passenger_id=req.passenger_id)

    def _complete(self, req: RideRequest, offer: RideOffer) -> MatchResult:
        seats_left = self.world.offers.decrement_seats(offer)
        from_name, to_name = req.from_place.name, req.to_place.name
        history = self.world.history
        for uid in (offer.driver_id, req.passenger_id):
            history.append(
                uid,
                HistoryEntry(
                    user_id=uid,
                    offer_id=offer.offer_id,
                    from_name=from_name,
                    to_name=to_name,
                    depart_time=offer.depart_time,
                ),
            )
        driver = self.world.users.lookup(offer.driver_id)
        return MatchResult(
            matched=True,
            request_id=req.request_id,
            passenger_id=req.passenger_id,
            driver_id=offer.driver_id,
            driver_name=driver.name if driver else "",
            offer_id=offer.offer_id,
            start=offer.start_place.name,
            end=offer.end_place.name,
            depart_time=offer.depart_time,
            seats_left=seats_left,
        )
