#!/usr/bin/env python3
"""
Analytics helper functions - numeric guards and date bucketing shared by calculators
"""
import math
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Sequence

import numpy as np


def finite_positive(value: Optional[float]) -> Optional[float]:
    """Return the value when it is a finite number above zero, else None"""
    if value is None:
        return None
    try:
        value = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


def percentile(values: Sequence[float], pct: float) -> Optional[float]:
    """
    Percentile with linear interpolation on rank p/100 * (n + 1)

    Ranks outside the sample are clamped to its first/last value.
    """
    if len(values) == 0:
        return None
    return float(np.percentile(np.asarray(values, dtype=float), pct, method="weibull"))


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up"""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def week_start(day: date) -> date:
    """Monday of the ISO week containing the day"""
    return day - timedelta(days=day.weekday())


def month_start(day: date) -> date:
    return day.replace(day=1)


def normalize_sport(sport_type: Optional[str]) -> str:
    """Collapse provider sport names into broad sport groups"""
    if not sport_type:
        return "Other"
    sport = sport_type.lower()
    if "run" in sport:
        return "Running"
    if "ride" in sport or "bike" in sport or "cycling" in sport:
        return "Cycling"
    if "swim" in sport:
        return "Swimming"
    if "walk" in sport or "hike" in sport:
        return "Walking"
    return sport_type
