# ride_match/domain/offers.py
from collections import deque
from collections.abc import Iterator

from ride_match.domain.entities.ride import RideOffer
from ride_match.domain.errors import InvalidCapacity, InvalidInput, UnknownDriver
from ride_match.domain.road_graph import RoadGraph
from ride_match.domain.users import UserRegistry


class OfferBook:
    """
    Outstanding ride offers. New offers go to the front, so iteration
    (the matcher's scan order) is newest-first. Offers with no seats left
    stay in the book; the matcher skips them.
    """

    def __init__(self, graph: RoadGraph, users: UserRegistry):
        self.graph = graph
        self.users = users
        self._offers: deque[RideOffer] = deque()
        self._by_id: dict[int, RideOffer] = {}

    def __len__(self) -> int:
        return len(self._offers)

    def __iter__(self) -> Iterator[RideOffer]:
        return iter(self._offers)

    def __contains__(self, offer_id: int) -> bool:
        return offer_id in self._by_id

    def enumerate(self) -> list[RideOffer]:
        return list(self._offers)

    def get(self, offer_id: int) -> RideOffer | None:
        return self._by_id.get(offer_id)

    def has_driver(self, driver_id: int) -> bool:
        return any(o.driver_id == driver_id for o in self._offers)

    def create_offer(
        self,
        offer_id: int,
        driver_id: int,
        start_name: str,
        end_name: str,
        depart_time: int,
        capacity: int,
    ) -> RideOffer:
        if not self.users.driver_exists(driver_id):
            raise UnknownDriver(f"user {driver_id} is not a registered driver")
        if capacity < 1:
            raise InvalidCapacity(f"capacity must be >= 1, got {capacity}")
        if offer_id in self._by_id:
            raise InvalidInput(f"offer {offer_id} already exists")
        o = RideOffer(
            offer_id=offer_id,
            driver_id=driver_id,
            start_place=self.graph.get_or_create_place(start_name),
            end_place=self.graph.get_or_create_place(end_name),
            depart_time=depart_time,
            capacity=capacity,
        )
        self.add(o)
        return o

    def add(self, offer: RideOffer) -> None:
        """Insert an already-built offer at the head of the scan order."""
        self._offers.appendleft(offer)
        self._by_id[offer.offer_id] = offer

    def decrement_seats(self, offer: RideOffer) -> int:
        if offer.seats_left <= 0:
            raise ValueError(f"offer {offer.offer_id} has no seats left")
        offer.seats_left -= 1
        return offer.seats_left
