# ride_match/app/build.py
from collections.abc import Mapping
from dataclasses import dataclass

from ride_match.app.controllers.matcher import Matcher
from ride_match.app.service import RideShareService
from ride_match.app.synthetic import random_demand, random_road_network
from ride_match.config.models import ScenarioModel
from ride_match.domain.paths import PathEngine
from ride_match.domain.state import WorldState
from ride_match.io.match_logging import MatchLogging
from ride_match.io.recorder import JsonlSink, Recorder, Sink
from ride_match.io.roads import load_road_file
from ride_match.runtime.policy_factory import make_matching_policy
from ride_match.sim.hooks import MatchHooks, NoopHooks
from ride_match.sim.rng import RNGRegistry


@dataclass
class App:
    config: ScenarioModel
    rng: RNGRegistry
    world: WorldState
    paths: PathEngine
    matcher: Matcher
    service: RideShareService
    hooks: MatchHooks


def build(
    cfg: ScenarioModel | Mapping,
    *,
    use_logging: bool = True,
    sinks: list[Sink] | None = None,
) -> App:
    # 0) Validate config
    model = cfg if isinstance(cfg, ScenarioModel) else ScenarioModel.model_validate(cfg)

    rng_registry = RNGRegistry(model.seed, scenario=model.name)

    # 1) Hooks: JSON logs + business events
    if use_logging:
        recorder = Recorder(*(sinks if sinks is not None else [JsonlSink()]))
        hooks: MatchHooks = MatchLogging(
            run_id=model.run_id,
            level=model.log.level,
            debug=model.log.debug,
            recorder=recorder,
        )
    else:
        hooks = NoopHooks()

    # 2) World
    world = WorldState(max_requests=model.queue.max_requests)
    if model.roads is not None:
        load_road_file(world.graph, model.roads.file, must_exist=model.roads.must_exist)
    if model.synthetic is not None:
        s = model.synthetic
        random_road_network(
            world.graph,
            rng_registry.stream("roads"),
            places=s.places,
            edge_prob=s.edge_prob,
            min_cost=s.min_cost,
            max_cost=s.max_cost,
        )
        if s.demand is not None:
            random_demand(world, rng_registry, **s.demand.model_dump())

    # 3) Path engine, policy, matcher
    paths = PathEngine(max_path_length=model.paths.max_path_length)
    policy = make_matching_policy(model.matching, paths=paths)
    matcher = Matcher(world, policy, hooks=hooks)

    # 4) Operations surface
    service = RideShareService(world, matcher, paths, hooks=hooks)

    return App(model, rng_registry, world, paths, matcher, service, hooks)
