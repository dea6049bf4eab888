# ride_match/domain/entities/user.py
from dataclasses import dataclass
from typing import Literal

Role = Literal["driver", "passenger"]


@dataclass
class User:
    user_id: int
    name: str
    is_driver: bool
    rating: int = 0
    completed_rides: int = 0

    @property
    def role(self) -> Role:
        return "driver" if self.is_driver else "passenger"
