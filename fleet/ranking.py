"""Sort policies for vehicles and maintenance items."""

from datetime import datetime
from enum import Enum
from typing import Iterable, List, Optional, Tuple, Union

from .calculations import parse_date
from .evaluator import evaluate_all, evaluate_safety_inspection, evaluate_task
from .task_due import TaskDue
from .units import TaskKind
from .urgency import DEFAULT_WEIGHTS, UrgencyWeights, task_urgency_score, urgency_score
from .vehicle import Vehicle


class SortMode(Enum):
    """How a vehicle list is ordered."""

    AGGREGATE = "aggregate"
    OIL = "oil"
    AIR_FILTER = "airFilter"
    FUEL_FILTER = "fuelFilter"
    DPF_CLEANING = "dpfCleaning"
    SAFETY_INSPECTION = "safetyInspection"

    @property
    def task(self) -> Optional[TaskKind]:
        """Task kind this mode ranks by, None for the aggregate mode."""
        if self == SortMode.AGGREGATE:
            return None
        return TaskKind(self.value)

    @property
    def label(self) -> str:
        if self == SortMode.AGGREGATE:
            return "Overall Urgency"
        return self.task.label

    @classmethod
    def parse(cls, value) -> "SortMode":
        if isinstance(value, SortMode):
            return value
        if isinstance(value, TaskKind):
            return cls(value.value)
        if value in (None, "", "all"):
            return cls.AGGREGATE
        return cls(value)


def rank_vehicles(
    vehicles: Iterable[Vehicle],
    mode: Union[SortMode, TaskKind, str],
    now: Union[datetime, str],
    weights: Optional[UrgencyWeights] = None,
) -> List[Vehicle]:
    """
    Order vehicles most urgent first.

    Aggregate mode sorts by descending urgency score. Single-task modes put
    overdue vehicles first, then sort by that task's score, how far overdue
    (or approaching before not), and finally by odometer. Safety inspection
    mode ranks by expiry dates. Sorting is stable, so full ties keep their
    input order.
    """
    mode = SortMode.parse(mode)
    weights = weights or DEFAULT_WEIGHTS

    if mode == SortMode.AGGREGATE:
        return sorted(vehicles, key=lambda v: -urgency_score(v, now, weights))
    if mode == SortMode.SAFETY_INSPECTION:
        return sorted(vehicles, key=lambda v: _inspection_sort_key(v, now, weights))
    return sorted(vehicles, key=lambda v: _task_sort_key(v, mode.task, now, weights))


def _model_year(vehicle: Vehicle) -> int:
    try:
        return int(vehicle.year or 0)
    except (TypeError, ValueError):
        return 0


def _task_sort_key(
    vehicle: Vehicle, task: TaskKind, now, weights: UrgencyWeights
) -> Tuple:
    result = evaluate_task(vehicle, task, now)
    score = task_urgency_score(vehicle, task, now, weights)
    odometer = vehicle.current_odometer or 0
    if result.is_due:
        return (0, -score, -result.overdue_distance, 0, -odometer)
    return (1, -score, 0, 0 if result.is_approaching else 1, -odometer)


def _inspection_sort_key(vehicle: Vehicle, now, weights: UrgencyWeights) -> Tuple:
    score = task_urgency_score(vehicle, TaskKind.SAFETY_INSPECTION, now, weights)
    expiry = parse_date(vehicle.safety_inspection_expiry_date)
    if expiry is None:
        # No inspection on file: first, newest model years leading
        return (0, -_model_year(vehicle), 0, datetime.min, -score)
    result = evaluate_safety_inspection(vehicle, now)
    if result.is_due:
        # Longest expired first
        return (1, 0, 0, expiry, -score)
    return (1, 1, 0 if result.is_approaching else 1, expiry, -score)


def rank_tasks(
    vehicle: Vehicle,
    now: Union[datetime, str],
    weights: Optional[UrgencyWeights] = None,
) -> List[TaskDue]:
    """All maintenance items of a vehicle, most urgent first."""
    weights = weights or DEFAULT_WEIGHTS
    return sorted(
        evaluate_all(vehicle, now),
        key=lambda r: (r.status.value, -weights.due.get(r.task, 0)),
    )


def attention_items(
    vehicle: Vehicle,
    now: Union[datetime, str],
    weights: Optional[UrgencyWeights] = None,
) -> List[TaskDue]:
    """Items that are due or approaching, most urgent first."""
    return [r for r in rank_tasks(vehicle, now, weights) if r.needs_attention]
