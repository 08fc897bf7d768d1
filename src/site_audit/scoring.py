"""Score helpers and the weighted health-score aggregator."""

import math
from typing import Mapping, Optional

from .models import ExtractorResult


HEALTH_WEIGHTS = {
    "performance": 0.30,
    "mobile": 0.20,
    "seo": 0.20,
    "local": 0.15,
    "conversion": 0.10,
    "technical": 0.05,
}

# (max seconds, score), checked in order
SPEED_BREAKPOINTS = [
    (2, 100),
    (3, 90),
    (4, 75),
    (5, 60),
    (7, 40),
    (10, 20),
]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    return max(0, min(100, round_half_up(value)))


def speed_score(load_time: float) -> int:
    """Map a load time in seconds to a 0-100 score."""
    for limit, score in SPEED_BREAKPOINTS:
        if load_time <= limit:
            return score
    return 0


def aggregate(results: Mapping[str, Optional[ExtractorResult]]) -> int:
    """Combine extractor sub-scores into one 0-100 health score.

    Missing or errored extractors drop out of both the numerator and the
    denominator, so the remaining weights are renormalized.
    """
    total = 0.0
    total_weight = 0.0
    for name, weight in HEALTH_WEIGHTS.items():
        result = results.get(name)
        if result is None or not result.available:
            continue
        total += result.score * weight
        total_weight += weight

    if total_weight == 0:
        return 0
    return clamp_score(total / total_weight)
