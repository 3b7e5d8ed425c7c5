#!/usr/bin/env python3
"""
Zone classification and time-in-zone distribution

Boundary rule: adjacent zones share their boundary heart rate, and a value equal
to a shared boundary belongs to the lower-numbered zone. Zone 1 therefore covers
[min_hr, max_hr] and every higher zone covers (min_hr, max_hr].

Values below the first zone or above the last one are unclassified. Unclassified
samples are left out of the distribution entirely, both from the zone times and
from the base the percentages are computed on.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from .interface import ZoneModelType
from .heart_rate_zones import Zone, ZoneModel
from .helper import finite_positive


@dataclass(frozen=True)
class HeartRateSample:
    """Heart rate held for a duration in seconds"""
    heart_rate: Optional[float]
    duration: float


@dataclass
class ZoneTime:
    """Time spent in one zone"""
    zone: Zone
    total_time: float
    percentage: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'zone': self.zone.to_dict(),
            'total_time': self.total_time,
            'percentage': round(self.percentage, 2),
        }


# Workout intent keyword -> zone number, per model
INTENT_ZONES: Dict[ZoneModelType, Dict[str, int]] = {
    ZoneModelType.FIVE_ZONE: {
        'recovery': 1,
        'easy': 2,
        'aerobic': 2,
        'base': 2,
        'endurance': 2,
        'long': 2,
        'tempo': 3,
        'threshold': 4,
        'interval': 5,
        'vo2max': 5,
        'anaerobic': 5,
        'sprint': 5,
    },
    ZoneModelType.THREE_ZONE: {
        'recovery': 1,
        'easy': 1,
        'aerobic': 1,
        'base': 1,
        'endurance': 1,
        'long': 1,
        'tempo': 2,
        'threshold': 2,
        'interval': 3,
        'vo2max': 3,
        'anaerobic': 3,
        'sprint': 3,
    },
    ZoneModelType.COGGAN: {
        'recovery': 1,
        'easy': 2,
        'aerobic': 2,
        'base': 2,
        'endurance': 2,
        'long': 2,
        'tempo': 3,
        'threshold': 4,
        'interval': 5,
        'vo2max': 5,
        'anaerobic': 5,
        'sprint': 5,
    },
}


def normalize_intent(intent: str) -> str:
    """'VO2 Max', 'vo2-max' and 'VO2_MAX' all become 'vo2max'"""
    return "".join(ch for ch in intent.lower() if ch not in " -_")


class ZoneClassifier:
    """Classifies heart rate values and sample series against one zone model"""

    def __init__(self, model: ZoneModel):
        self.model = model
        self.zones = sorted(model.zones, key=lambda z: z.number)

    def classify(self, heart_rate: Optional[float]) -> Optional[Zone]:
        value = finite_positive(heart_rate)
        if value is None or not self.zones:
            return None

        first = self.zones[0]
        if first.min_hr <= value <= first.max_hr:
            return first
        for zone in self.zones[1:]:
            if zone.min_hr < value <= zone.max_hr:
                return zone
        return None

    def distribution(self, samples: Iterable[HeartRateSample]) -> List[ZoneTime]:
        """Time and share per zone, over classified samples only"""
        if not self.zones:
            return []

        totals = {zone.number: 0.0 for zone in self.zones}
        for sample in samples:
            duration = finite_positive(sample.duration)
            if duration is None:
                continue
            zone = self.classify(sample.heart_rate)
            if zone is not None:
                totals[zone.number] += duration

        classified = sum(totals.values())
        return [
            ZoneTime(zone=zone,
                     total_time=totals[zone.number],
                     percentage=totals[zone.number] / classified * 100 if classified > 0 else 0.0)
            for zone in self.zones
        ]

    def unclassified_time(self, samples: Iterable[HeartRateSample]) -> float:
        """Total duration of samples that fall in no zone"""
        total = 0.0
        for sample in samples:
            duration = finite_positive(sample.duration)
            if duration is not None and self.classify(sample.heart_rate) is None:
                total += duration
        return total

    def recommend_zone_for(self, workout_intent: Optional[str]) -> Optional[Zone]:
        if not self.zones or not workout_intent:
            return None
        table = INTENT_ZONES.get(self.model.model_type, INTENT_ZONES[ZoneModelType.FIVE_ZONE])
        number = table.get(normalize_intent(workout_intent))
        if number is None:
            return None
        return self.model.zone(number)
