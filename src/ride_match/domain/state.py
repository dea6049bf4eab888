# ride_match/domain/state.py
from dataclasses import dataclass, field

from ride_match.domain.entities.user import Role, User
from ride_match.domain.errors import InvalidInput
from ride_match.domain.history import HistoryStore
from ride_match.domain.offers import OfferBook
from ride_match.domain.requests import RequestQueue
from ride_match.domain.road_graph import RoadGraph
from ride_match.domain.users import UserRegistry


@dataclass
class WorldState:
    """Owns every store. Build one per process (or per test) and pass it around."""

    max_requests: int = 1000
    graph: RoadGraph = field(default_factory=RoadGraph)
    users: UserRegistry = field(default_factory=UserRegistry)
    offers: OfferBook = field(init=False)
    requests: RequestQueue = field(init=False)
    history: HistoryStore = field(init=False)

    def __post_init__(self):
        self.offers = OfferBook(self.graph, self.users)
        self.requests = RequestQueue(self.graph, self.users, max_requests=self.max_requests)
        self.history = HistoryStore(self.users)

    def register_user(self, user_id: int, name: str, role: Role) -> User:
        """
        Register or update a user. A role change is refused while the user still
        owns offers in the book (as driver) or queued requests (as passenger).
        """
        current = self.users.lookup(user_id)
        if current is not None and current.role != role:
            if current.is_driver and self.offers.has_driver(user_id):
                raise InvalidInput(f"user {user_id} still has ride offers; cannot become {role}")
            if not current.is_driver and self.requests.has_passenger(user_id):
                raise InvalidInput(
                    f"user {user_id} still has queued requests; cannot become {role}"
                )
        return self.users.register(user_id, name, role)

    def adopt(self, other: "WorldState") -> None:
        """Take over every store of `other` (used after loading from disk)."""
        self.max_requests = other.max_requests
        self.graph = other.graph
        self.users = other.users
        self.offers = other.offers
        self.requests = other.requests
        self.history = other.history
