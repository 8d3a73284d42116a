# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Candidate weights for facilitator selection.

Fewer past facilitations and a longer gap since the last one both raise
the weight. Count counts double. A +/-20% jitter keeps repeated draws
with identical history from always ranking the same way.
"""

import random
from typing import Optional

NO_HISTORY_COUNT_WEIGHT = 100
COUNT_STEP = 10
COUNT_FACTOR = 2
MAX_DAYS = 365
JITTER_LOW = 0.8
JITTER_HIGH = 1.2


def base_weight(count: int, days_since_last: Optional[int], max_count: int) -> float:
    """Deterministic part of the weight, before jitter."""
    if max_count == 0:
        count_weight = NO_HISTORY_COUNT_WEIGHT
    else:
        count_weight = (max_count - count + 1) * COUNT_STEP

    if days_since_last is None:
        time_weight = MAX_DAYS
    else:
        # sessions dated after today count as zero days ago
        time_weight = min(max(days_since_last, 0), MAX_DAYS)

    return float(count_weight * COUNT_FACTOR + time_weight)


def compute_weight(
    count: int,
    days_since_last: Optional[int],
    max_count: int,
    rng: Optional[random.Random] = None,
) -> float:
    """Base weight scaled by a uniform factor drawn from [0.8, 1.2]."""
    rng = rng or random
    return base_weight(count, days_since_last, max_count) * rng.uniform(
        JITTER_LOW, JITTER_HIGH
    )
