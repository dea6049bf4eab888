# ride_match/domain/entities/ride.py
from dataclasses import dataclass, field

from ride_match.domain.entities.geography import Place


@dataclass(eq=False)
class RideOffer:
    offer_id: int
    driver_id: int
    start_place: Place
    end_place: Place
    depart_time: int
    capacity: int
    seats_left: int = -1  # -1 => full capacity

    def __post_init__(self):
        if self.seats_left < 0:
            self.seats_left = self.capacity

    @property
    def expired(self) -> bool:
        return self.seats_left <= 0


@dataclass(eq=False)
class RideRequest:
    request_id: int
    passenger_id: int
    from_place: Place
    to_place: Place
    earliest: int
    latest: int
    # queue bookkeeping; only meaningful while the request is queued
    heap_index: int = field(default=-1, repr=False)
    seq: int = field(default=0, repr=False)

    def accepts(self, depart_time: int) -> bool:
        return self.earliest <= depart_time <= self.latest


@dataclass(frozen=True)
class HistoryEntry:
    user_id: int
    offer_id: int
    from_name: str
    to_name: str
    depart_time: int
