"""
Crop development calendar.

Plant tables describe the season as a sequence of development days
1..stage_total. A real season between seeding and harvest is mapped onto
this nominal calendar by stretching it proportionally.
"""

import logging
import math
from datetime import date
from typing import Optional

logger = logging.getLogger(__name__)


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero"""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def development_day(
    day: date,
    seed_date: date,
    harvest_date: date,
    stage_total: int,
) -> Optional[int]:
    """
    Development day of a calendar date.

    day = round(elapsed × stage_total / season_length), limited to
    [1, stage_total]; the seed date maps to 1 and the harvest date to
    stage_total.

    Args:
        day: Calendar date
        seed_date: Seeding date
        harvest_date: Harvest date
        stage_total: Number of development days of the plant table

    Returns:
        Development day, or None outside [seed_date, harvest_date]
    """
    if stage_total < 1 or day < seed_date or day > harvest_date:
        return None

    span = (harvest_date - seed_date).days
    if span <= 0:
        return stage_total

    elapsed = (day - seed_date).days
    value = round_half_away(elapsed * stage_total / span)
    return min(max(value, 1), stage_total)
