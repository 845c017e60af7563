"""Opportunity scoring for keyword clusters.

score = impression_score + position_score + product_bonus + ctr_potential,
clamped to [0, 100].
"""

from __future__ import annotations

import math

MAX_SCORE = 100.0
MIN_SCORE = 0.0

IMPRESSION_WEIGHT = 10.0
PRODUCT_BONUS = 15.0
CTR_POTENTIAL_BONUS = 10.0
CTR_POTENTIAL_MIN_POSITION = 3.0


def impression_score(total_impressions: int) -> float:
    """Logarithmic impressions component."""
    return IMPRESSION_WEIGHT * math.log10(max(total_impressions, 0) + 1)


def position_score(avg_position: float) -> float:
    """Reward positions with visibility but room to climb."""
    if 5 <= avg_position <= 15:
        return 30.0
    if 15 < avg_position <= 20:
        return 20.0
    if avg_position < 5:
        return 10.0
    return 0.0


def calculate_opportunity_score(
    total_impressions: int,
    avg_position: float,
    has_catalog_match: bool,
) -> float:
    """Compute the bounded opportunity score for one cluster."""
    product_bonus = PRODUCT_BONUS if has_catalog_match else 0.0
    ctr_potential = CTR_POTENTIAL_BONUS if avg_position > CTR_POTENTIAL_MIN_POSITION else 0.0

    raw = (
        impression_score(total_impressions)
        + position_score(avg_position)
        + product_bonus
        + ctr_potential
    )
    return max(MIN_SCORE, min(MAX_SCORE, raw))
