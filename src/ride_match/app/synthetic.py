# ride_match/app/synthetic.py
"""Seeded random road networks and demand, for demos, benchmarks and property tests."""

import numpy as np

from ride_match.domain.road_graph import RoadGraph
from ride_match.domain.state import WorldState
from ride_match.sim.rng import RNGRegistry


def random_road_network(
    graph: RoadGraph,
    rng: np.random.Generator,
    *,
    places: int = 10,
    edge_prob: float = 0.3,
    min_cost: int = 1,
    max_cost: int = 10,
    prefix: str = "P",
) -> list[str]:
    if places < 1:
        raise ValueError(f"places must be >= 1, got {places}")
    if max_cost < min_cost:
        raise ValueError("max_cost must be >= min_cost")
    names = [f"{prefix}{i}" for i in range(places)]
    for n in names:
        graph.get_or_create_place(n)
    # draw the full matrix up front so the result depends only on (seed, places)
    keep = rng.random((places, places)) < edge_prob
    costs = rng.integers(min_cost, max_cost + 1, size=(places, places))
    for i in range(places):
        for j in range(places):
            if i != j and keep[i, j]:
                graph.add_road(names[i], names[j], int(costs[i, j]))
    return names


def random_demand(
    world: WorldState,
    rng: RNGRegistry,
    *,
    drivers: int = 3,
    passengers: int = 5,
    offers: int = 3,
    requests: int = 5,
    horizon: int = 100,
    max_capacity: int = 3,
    first_id: int = 1,
) -> None:
    """
    Register users and post offers/requests between existing places.

    Each offer and request draws from its own `for_entity` generator, so
    asking for more entities extends a world without reshuffling the ones
    already generated.
    """
    names = [p.name for p in world.graph.enumerate_places()]
    if len(names) < 2:
        raise ValueError("need at least two places to generate demand")
    if drivers < 1 or passengers < 1:
        raise ValueError("need at least one driver and one passenger")

    driver_ids = list(range(first_id, first_id + drivers))
    passenger_ids = list(range(first_id + drivers, first_id + drivers + passengers))
    for uid in driver_ids:
        world.register_user(uid, f"driver-{uid}", "driver")
    for uid in passenger_ids:
        world.register_user(uid, f"passenger-{uid}", "passenger")

    def od(g: np.random.Generator) -> tuple[str, str]:
        a, b = g.choice(len(names), size=2, replace=False)
        return names[int(a)], names[int(b)]

    for offer_id in range(first_id, first_id + offers):
        g = rng.for_entity("offer", offer_id)
        start, end = od(g)
        world.offers.create_offer(
            offer_id=offer_id,
            driver_id=driver_ids[int(g.integers(0, len(driver_ids)))],
            start_name=start,
            end_name=end,
            depart_time=int(g.integers(0, horizon)),
            capacity=int(g.integers(1, max_capacity + 1)),
        )
    for request_id in range(first_id, first_id + requests):
        g = rng.for_entity("request", request_id)
        origin, dest = od(g)
        earliest = int(g.integers(0, horizon))
        world.requests.create_request(
            request_id=request_id,
            passenger_id=passenger_ids[int(g.integers(0, len(passenger_ids)))],
            from_name=origin,
            to_name=dest,
            earliest=earliest,
            latest=earliest + int(g.integers(0, horizon // 4 + 1)),
        )
