# ride_match/domain/requests.py
from collections.abc import Iterator

from ride_match.domain.entities.ride import RideRequest
from ride_match.domain.errors import InvalidInput, NotFound, QueueFull, UnknownPassenger
from ride_match.domain.road_graph import RoadGraph
from ride_match.domain.users import UserRegistry


class RequestQueue:
    """
    Binary min-heap of ride requests keyed by (earliest, seq).

    `seq` is a monotonically increasing insertion counter, so requests with
    the same `earliest` leave in arrival order. Every request's `heap_index`
    mirrors its slot in `_heap`; `_by_id` maps request ids to live requests
    for O(log n) remove/update.
    """

    def __init__(self, graph: RoadGraph, users: UserRegistry, max_requests: int = 1000):
        self.graph = graph
        self.users = users
        self.max_requests = max_requests
        self._heap: list[RideRequest] = []
        self._by_id: dict[int, RideRequest] = {}
        self._seq = 0

    def __len__(self) -> int:
        return len(self._heap)

    def __contains__(self, request_id: int) -> bool:
        return request_id in self._by_id

    def __iter__(self) -> Iterator[RideRequest]:
        # heap order, not priority order
        return iter(list(self._heap))

    def ordered(self) -> list[RideRequest]:
        return sorted(self._heap, key=self._key)

    def get(self, request_id: int) -> RideRequest | None:
        return self._by_id.get(request_id)

    def has_passenger(self, passenger_id: int) -> bool:
        return any(r.passenger_id == passenger_id for r in self._heap)

    # --------------- public API ---------------------

    def create_request(
        self,
        request_id: int,
        passenger_id: int,
        from_name: str,
        to_name: str,
        earliest: int,
        latest: int,
    ) -> RideRequest:
        self._admit(request_id, passenger_id, earliest, latest)
        r = RideRequest(
            request_id=request_id,
            passenger_id=passenger_id,
            from_place=self.graph.get_or_create_place(from_name),
            to_place=self.graph.get_or_create_place(to_name),
            earliest=earliest,
            latest=latest,
        )
        self._push(r)
        return r

    def enqueue(self, request: RideRequest) -> None:
        self._admit(request.request_id, request.passenger_id, request.earliest, request.latest)
        self._push(request)

    def requeue(self, request: RideRequest) -> None:
        """Put back a request that was just extracted. Skips passenger validation."""
        if len(self._heap) >= self.max_requests:
            raise QueueFull(f"request queue full ({self.max_requests})")
        self._push(request)

    def peek(self) -> RideRequest | None:
        return self._heap[0] if self._heap else None

    def extract_min(self) -> RideRequest | None:
        if not self._heap:
            return None
        return self._remove_at(0)

    def remove(self, request_id: int) -> RideRequest:
        r = self._by_id.get(request_id)
        if r is None:
            raise NotFound(f"request {request_id} is not queued")
        assert self._heap[r.heap_index] is r, "heap index out of sync"
        return self._remove_at(r.heap_index)

    def update_window(self, request_id: int, earliest: int, latest: int) -> RideRequest:
        r = self._by_id.get(request_id)
        if r is None:
            raise NotFound(f"request {request_id} is not queued")
        if earliest > latest:
            raise InvalidInput(f"earliest ({earliest}) must be <= latest ({latest})")
        old = r.earliest
        r.earliest, r.latest = earliest, latest
        if earliest < old:
            self._sift_up(r.heap_index)
        elif earliest > old:
            self._sift_down(r.heap_index)
        return r

    # --------------- heap internals ---------------------

    @staticmethod
    def _key(r: RideRequest) -> tuple[int, int]:
        return (r.earliest, r.seq)

    def _admit(self, request_id: int, passenger_id: int, earliest: int, latest: int) -> None:
        if not self.users.passenger_exists(passenger_id):
            raise UnknownPassenger(f"user {passenger_id} is not a registered passenger")
        if earliest > latest:
            raise InvalidInput(f"earliest ({earliest}) must be <= latest ({latest})")
        if request_id in self._by_id:
            raise InvalidInput(f"request {request_id} is already queued")
        if len(self._heap) >= self.max_requests:
            raise QueueFull(f"request queue full ({self.max_requests})")

    def _push(self, r: RideRequest) -> None:
        self._seq += 1
        r.seq = self._seq
        r.heap_index = len(self._heap)
        self._heap.append(r)
        self._by_id[r.request_id] = r
        self._sift_up(r.heap_index)

    def _remove_at(self, i: int) -> RideRequest:
        h = self._heap
        r = h[i]
        last = h.pop()
        if last is not r:
            h[i] = last
            last.heap_index = i
            # the moved element may need to go either way
            self._sift_up(i)
            self._sift_down(last.heap_index)
        del self._by_id[r.request_id]
        r.heap_index = -1
        return r

    def _swap(self, i: int, j: int) -> None:
        h = self._heap
        h[i], h[j] = h[j], h[i]
        h[i].heap_index = i
        h[j].heap_index = j

    def _sift_up(self, i: int) -> None:
        h = self._heap
        while i > 0:
            parent = (i - 1) // 2
            if self._key(h[parent]) <= self._key(h[i]):
                break
            self._swap(parent, i)
            i = parent

    def _sift_down(self, i: int) -> None:
        h = self._heap
        n = len(h)
        while True:
            left, right, smallest = 2 * i + 1, 2 * i + 2, i
            if left < n and self._key(h[left]) < self._key(h[smallest]):
                smallest = left
            if right < n and self._key(h[right]) < self._key(h[smallest]):
                smallest = right
            if smallest == i:
                return
            self._swap(i, smallest)
            i = smallest
