# ride_match/policy/matching.py
from ride_match.app.protocols import MatchingPolicy, OfferScreen, PathFinder
from ride_match.domain.entities.geography import Place
from ride_match.domain.entities.ride import RideOffer, RideRequest
from ride_match.domain.errors import PathTooLong
from ride_match.domain.paths import ShortestPath, is_sub_path


class SubPathFirstFitPolicy(MatchingPolicy):
    """Seats, time window, both routes exist, passenger route inside driver route."""

    def __init__(self, paths: PathFinder):
        self.paths = paths

    def _route(self, a: Place, b: Place) -> ShortestPath | None:
        try:
            return self.paths.shortest_path(a, b)
        except PathTooLong:
            return None

    def screen(self, request: RideRequest) -> OfferScreen:
        cache: list[ShortestPath | None] = []

        def passenger_route() -> ShortestPath | None:
            if not cache:
                cache.append(self._route(request.from_place, request.to_place))
            return cache[0]

        def rejection(offer: RideOffer) -> str | None:
            if offer.expired:
                return "no_seats"
            if not request.accepts(offer.depart_time):
                return "outside_window"
            driver = self._route(offer.start_place, offer.end_place)
            if driver is None:
                return "no_driver_path"
            passenger = passenger_route()
            if passenger is None:
                return "no_passenger_path"
            if not is_sub_path(driver.places, passenger.places):
                return "not_subpath"
            return None

        return rejection


class ExactEndpointsPolicy(MatchingPolicy):
    """Offer must start and end exactly where the request does. No routing involved."""

    def screen(self, request: RideRequest) -> OfferScreen:
        def rejection(offer: RideOffer) -> str | None:
            if offer.expired:
                return "no_seats"
            if not request.accepts(offer.depart_time):
                return "outside_window"
            same_start = offer.start_place is request.from_place
            if not same_start or offer.end_place is not request.to_place:
                return "endpoints_differ"
            return None

        return rejection
