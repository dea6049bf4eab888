# ride_match/domain/users.py
from collections.abc import Iterator

from ride_match.domain.entities.user import Role, User
from ride_match.domain.errors import InvalidInput, NotFound

ROLES: tuple[Role, ...] = ("driver", "passenger")


class UserRegistry:
    """Users keyed by id. Iteration is ascending by id."""

    def __init__(self):
        self._users: dict[int, User] = {}

    def __len__(self) -> int:
        return len(self._users)

    def __contains__(self, user_id: int) -> bool:
        return user_id in self._users

    def __iter__(self) -> Iterator[User]:
        for uid in sorted(self._users):
            yield self._users[uid]

    def register(self, user_id: int, name: str, role: Role) -> User:
        # re-registering replaces name/role but keeps rating and ride count
        if role not in ROLES:
            raise InvalidInput(f"role must be one of {ROLES}, got {role!r}")
        u = self._users.get(user_id)
        if u is None:
            u = User(user_id=user_id, name=name, is_driver=role == "driver")
            self._users[user_id] = u
        else:
            u.name = name
            u.is_driver = role == "driver"
        return u

    def restore(self, user: User) -> None:
        self._users[user.user_id] = user

    def lookup(self, user_id: int) -> User | None:
        return self._users.get(user_id)

    def passenger_exists(self, user_id: int) -> bool:
        u = self._users.get(user_id)
        return u is not None and not u.is_driver

    def driver_exists(self, user_id: int) -> bool:
        u = self._users.get(user_id)
        return u is not None and u.is_driver

    def set_rating(self, user_id: int, rating: int) -> User:
        u = self._users.get(user_id)
        if u is None:
            raise NotFound(f"user {user_id} not found")
        if rating < 0:
            raise InvalidInput(f"rating must be >= 0, got {rating}")
        u.rating = rating
        return u

    def drivers(self) -> list[User]:
        return [u for u in self if u.is_driver]

    def top_drivers(self, k: int) -> list[User]:
        """Up to k drivers by completed rides desc, rating desc, then id asc."""
        ranked = sorted(self.drivers(), key=lambda u: (-u.completed_rides, -u.rating, u.user_id))
        k = max(0, min(k, len(ranked)))
        return ranked[:k]
