# ride_match/domain/entities/geography.py
from dataclasses import dataclass, field


# identity equality: a Place equals only itself and hashes by id
@dataclass(eq=False)
class Place:
    name: str
    outgoing: list["RoadLink"] = field(default_factory=list, repr=False)

    def neighbours(self):
        for link in self.outgoing:
            yield link.to, link.cost


@dataclass(frozen=True, eq=False)
class RoadLink:
    source: Place
    to: Place
    cost: int
