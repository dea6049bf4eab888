# ride_match/sim/hooks.py
from typing import Protocol

from ride_match.domain.entities.ride import RideOffer, RideRequest


class MatchHooks(Protocol):
    def offer_created(self, offer: RideOffer): ...
    def request_queued(self, req: RideRequest, *, qsize): ...
    def offer_rejected(self, req: RideRequest, offer: RideOffer, *, reason: str): ...
    def matched(self, req: RideRequest, offer: RideOffer, *, qsize, scanned): ...
    def requeued(self, req: RideRequest, *, qsize, scanned): ...
    def error(self, op: str, *, exc: BaseException, **kw): ...


class NoopHooks:
    def offer_created(self, *_, **__):
        pass

    def request_queued(self, *_, **__):
        pass

    def offer_rejected(self, *_, **__):
        pass

    def matched(self, *_, **__):
        pass

    def requeued(self, *_, **__):
        pass

    def error(self, *_, **__):
        pass
