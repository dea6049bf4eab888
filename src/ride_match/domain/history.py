# ride_match/domain/history.py
from collections import defaultdict
from collections.abc import Iterator

from ride_match.domain.entities.ride import HistoryEntry
from ride_match.domain.users import UserRegistry


class HistoryStore:
    """Append-only ride log per user. Appends also bump the user's completed-ride count."""

    def __init__(self, users: UserRegistry):
        self.users = users
        self._by_user: dict[int, list[HistoryEntry]] = defaultdict(list)

    def append(self, user_id: int, entry: HistoryEntry) -> None:
        self._by_user[user_id].append(entry)
        u = self.users.lookup(user_id)
        if u is not None:
            u.completed_rides += 1

    def restore(self, user_id: int, entry: HistoryEntry) -> None:
        # loading from disk: counts were persisted with the user
        self._by_user[user_id].append(entry)

    def for_user(self, user_id: int) -> list[HistoryEntry]:
        return list(self._by_user.get(user_id, ()))

    def __iter__(self) -> Iterator[tuple[int, list[HistoryEntry]]]:
        for uid, entries in self._by_user.items():
            yield uid, list(entries)

    def __len__(self) -> int:
        return sum(len(v) for v in self._by_user.values())
