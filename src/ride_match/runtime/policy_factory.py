from ride_match.app.protocols import MatchingPolicy, PathFinder
from ride_match.config.models import (
    MatchingPolicyExactEndpointsModel,
    MatchingPolicySubPathModel,
    MatchingPolicyUnion,
)
from ride_match.policy.matching import ExactEndpointsPolicy, SubPathFirstFitPolicy


def make_matching_policy(cfg: MatchingPolicyUnion, *, paths: PathFinder) -> MatchingPolicy:
    if isinstance(cfg, MatchingPolicySubPathModel):
        return SubPathFirstFitPolicy(paths)
    elif isinstance(cfg, MatchingPolicyExactEndpointsModel):
        return ExactEndpointsPolicy()
    else:
        raise TypeError(cfg)
