"""Distance units, task kinds and the per-unit interval tables."""

import math
from enum import Enum
from typing import Optional

KM_PER_MILE = 1.60934


class DistanceUnit(Enum):
    """Distance unit a vehicle's odometer and intervals are recorded in."""

    MILES = "miles"
    KM = "km"

    @classmethod
    def parse(cls, value) -> Optional["DistanceUnit"]:
        """
        Parse a stored unit value.

        Missing values default to kilometers. Unrecognised values return
        None, which disables default intervals and the approaching buffer.
        """
        if isinstance(value, DistanceUnit):
            return value
        if value is None or value == "":
            return cls.KM
        aliases = {
            "miles": cls.MILES,
            "mile": cls.MILES,
            "mi": cls.MILES,
            "km": cls.KM,
            "kilometers": cls.KM,
            "kilometres": cls.KM,
        }
        return aliases.get(str(value).strip().lower())


class TaskKind(Enum):
    """Maintenance items tracked per vehicle."""

    OIL = "oil"
    AIR_FILTER = "airFilter"
    FUEL_FILTER = "fuelFilter"
    DPF_CLEANING = "dpfCleaning"
    SAFETY_INSPECTION = "safetyInspection"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def is_recurring(self) -> bool:
        """True for the distance-based kinds backed by maintenance records."""
        return self in RECURRING_TASKS

    @property
    def interval_field(self) -> Optional[str]:
        """Name of the store field holding this kind's interval."""
        return INTERVAL_FIELDS.get(self)

    @classmethod
    def parse(cls, value) -> Optional["TaskKind"]:
        if isinstance(value, TaskKind):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


RECURRING_TASKS = (
    TaskKind.OIL,
    TaskKind.AIR_FILTER,
    TaskKind.FUEL_FILTER,
    TaskKind.DPF_CLEANING,
)

_LABELS = {
    TaskKind.OIL: "Oil Change",
    TaskKind.AIR_FILTER: "Air Filter",
    TaskKind.FUEL_FILTER: "Fuel Filter",
    TaskKind.DPF_CLEANING: "DPF Cleaning",
    TaskKind.SAFETY_INSPECTION: "Safety Inspection",
}

INTERVAL_FIELDS = {
    TaskKind.OIL: "oilChangeMileageInterval",
    TaskKind.AIR_FILTER: "airFilterMileageInterval",
    TaskKind.FUEL_FILTER: "fuelFilterMileageInterval",
    TaskKind.DPF_CLEANING: "dpfCleaningMileageInterval",
}

DEFAULT_INTERVALS = {
    DistanceUnit.MILES: {
        TaskKind.OIL: 5000,
        TaskKind.AIR_FILTER: 15000,
        TaskKind.FUEL_FILTER: 25000,
        TaskKind.DPF_CLEANING: 100000,
    },
    DistanceUnit.KM: {
        TaskKind.OIL: 8000,
        TaskKind.AIR_FILTER: 24000,
        TaskKind.FUEL_FILTER: 40000,
        TaskKind.DPF_CLEANING: 160000,
    },
}

# Comparable real-world buffers, not conversions of each other.
APPROACHING_THRESHOLDS = {
    DistanceUnit.MILES: 500,
    DistanceUnit.KM: 800,
}


def default_interval(task: TaskKind, unit: Optional[DistanceUnit]) -> int:
    """Default service interval for a task, 0 when there is none."""
    return DEFAULT_INTERVALS.get(unit, {}).get(task, 0)


def approaching_distance_threshold(unit: Optional[DistanceUnit]) -> int:
    """Distance before the due point at which a task counts as approaching."""
    return APPROACHING_THRESHOLDS.get(unit, 0)


def convert(value: float, from_unit: DistanceUnit, to_unit: DistanceUnit) -> int:
    """
    Convert a distance between units, rounded to the nearest integer.

    Each call rounds independently, so converting back and forth can drift
    by a unit. That drift is accepted.
    """
    if from_unit == to_unit:
        converted = value
    elif from_unit == DistanceUnit.MILES:
        converted = value * KM_PER_MILE
    else:
        converted = value / KM_PER_MILE
    # Halves round up, not to even
    return int(math.floor(converted + 0.5))
