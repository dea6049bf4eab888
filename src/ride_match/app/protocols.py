from collections.abc import Callable
from typing import Protocol, runtime_checkable

from ride_match.domain.entities.geography import Place
from ride_match.domain.entities.ride import RideOffer, RideRequest
from ride_match.domain.paths import ShortestPath

# offer -> rejection reason, or None when the offer can serve the request
OfferScreen = Callable[[RideOffer], str | None]


@runtime_checkable
class PathFinder(Protocol):
    """
    Responsibilities:
      • Shortest path between two places (None when unreachable).
      • Places reachable from a source within a cost bound.
    Must be side-effect free.
    """

    def shortest_path(self, source: Place, target: Place) -> ShortestPath | None: ...
    def reachable_within_cost(self, source: Place, bound: int) -> list[tuple[Place, int]]: ...


@runtime_checkable
class MatchingPolicy(Protocol):
    """
    Decides whether an offer can serve a request. `screen` is called once per
    match attempt so per-request work (e.g. the passenger's path) can be shared
    across every offer scanned in that attempt.
    """

    def screen(self, request: RideRequest) -> OfferScreen: ...
