# ride_match/sim/rng.py
"""
Seeded numpy Generators for synthetic worlds.

`stream(name)` is a shared sequential stream (the road network draws from
one). `for_entity(kind, id)` seeds a fresh Generator from (seed, scenario,
kind, id) alone, so an offer's or request's draws do not depend on how many
other entities were generated before it.
"""

from functools import cache
from zlib import crc32

import numpy as np


def _fold(part: int | str) -> int:
    if isinstance(part, str):
        return crc32(part.encode("utf-8"))
    return int(part) & 0xFFFFFFFF


class RNGRegistry:
    def __init__(self, master_seed: int, *, scenario: str | int = 0):
        self.master_seed = _fold(master_seed)
        self.scenario = _fold(str(scenario))

    def _seed(self, *parts: int | str) -> np.random.SeedSequence:
        return np.random.SeedSequence([self.master_seed, self.scenario, *map(_fold, parts)])

    @cache
    def stream(self, name: str) -> np.random.Generator:
        return np.random.default_rng(self._seed(name))

    def for_entity(self, kind: str, entity_id: int) -> np.random.Generator:
        return np.random.default_rng(self._seed(kind, entity_id))
