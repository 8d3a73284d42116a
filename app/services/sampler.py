# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Weighted random sampling without replacement.
"""

import random
from typing import Optional, Sequence

from app.models.domain import CandidateWeight


def weighted_sample(
    candidates: Sequence[CandidateWeight],
    k: int,
    rng: Optional[random.Random] = None,
) -> list[CandidateWeight]:
    """
    Draw up to k distinct candidates, each pick proportional to weight.
    Returns fewer than k only when the pool runs out.
    """
    rng = rng or random
    remaining = list(candidates)
    selected: list[CandidateWeight] = []

    while len(selected) < k and remaining:
        total = sum(c.weight for c in remaining)
        draw = rng.random() * total

        chosen = len(remaining) - 1  # float rounding can overshoot the walk
        running = 0.0
        for index, candidate in enumerate(remaining):
            running += candidate.weight
            if running > draw:
                chosen = index
                break

        selected.append(remaining.pop(chosen))

    return selected
