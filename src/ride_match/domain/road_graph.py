# ride_match/domain/road_graph.py
import logging
from collections.abc import Iterable, Iterator

from ride_match.domain.entities.geography import Place, RoadLink
from ride_match.domain.errors import InvalidInput

MAX_COST = 2**31 - 1

log = logging.getLogger(__name__)


class RoadGraph:
    """
    Directed weighted graph of named places.

    Places are created lazily and never removed. Both the place table and each
    place's outgoing list keep insertion order, which is what listings and
    Dijkstra tie-breaking observe.
    """

    def __init__(self):
        self._places: dict[str, Place] = {}
        self._edge_count = 0

    def __len__(self) -> int:
        return len(self._places)

    def __contains__(self, name: str) -> bool:
        return name in self._places

    @property
    def edge_count(self) -> int:
        return self._edge_count

    def get_or_create_place(self, name: str) -> Place:
        p = self._places.get(name)
        if p is None:
            p = Place(name)
            self._places[name] = p
        return p

    def find_place(self, name: str) -> Place | None:
        return self._places.get(name)

    def add_road(self, from_name: str, to_name: str, cost: int) -> RoadLink:
        # duplicates and self-loops are accepted as-is
        if isinstance(cost, bool) or not isinstance(cost, int):
            raise InvalidInput(f"road cost must be an integer, got {cost!r}")
        if not 0 <= cost < MAX_COST:
            raise InvalidInput(f"road cost must be in [0, {MAX_COST}), got {cost}")
        src = self.get_or_create_place(from_name)
        dst = self.get_or_create_place(to_name)
        link = RoadLink(src, dst, cost)
        src.outgoing.append(link)
        self._edge_count += 1
        return link

    def enumerate_places(self) -> Iterator[Place]:
        yield from self._places.values()

    def enumerate_edges(self, place: Place) -> Iterator[RoadLink]:
        yield from place.outgoing

    def iter_edges(self) -> Iterator[RoadLink]:
        for p in self._places.values():
            yield from p.outgoing

    def load_from_stream(self, lines: Iterable[str]) -> int:
        """Add one edge per `from to cost` line. Malformed lines are logged and skipped."""
        added = 0
        for lineno, raw in enumerate(lines, start=1):
            parts = raw.split()
            if not parts:
                continue
            if len(parts) != 3:
                log.warning("skipping road line %d: expected 3 fields, got %r", lineno, raw)
                continue
            src, dst, cost_s = parts
            try:
                self.add_road(src, dst, int(cost_s))
            except ValueError as exc:  # includes InvalidInput
                log.warning("skipping road line %d: %s", lineno, exc)
                continue
            added += 1
        return added
