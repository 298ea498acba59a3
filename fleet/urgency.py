"""Urgency scoring used to order vehicles and maintenance items."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional, Union

from .calculations import Number
from .evaluator import evaluate_all, evaluate_task, fleet_inspection_status
from .status import Status
from .task_due import TaskDue
from .units import TaskKind
from .vehicle import Vehicle

DUE_WEIGHTS = {
    TaskKind.OIL: 100,
    TaskKind.AIR_FILTER: 90,
    TaskKind.FUEL_FILTER: 80,
    TaskKind.DPF_CLEANING: 70,
    TaskKind.SAFETY_INSPECTION: 110,
}

APPROACHING_WEIGHTS = {
    TaskKind.OIL: 50,
    TaskKind.AIR_FILTER: 45,
    TaskKind.FUEL_FILTER: 40,
    TaskKind.DPF_CLEANING: 35,
    TaskKind.SAFETY_INSPECTION: 55,
}

NO_HISTORY_BONUS = 60


@dataclass(frozen=True)
class UrgencyWeights:
    """Score contributed by each item when due or approaching."""

    due: Dict[TaskKind, int] = field(default_factory=lambda: dict(DUE_WEIGHTS))
    approaching: Dict[TaskKind, int] = field(
        default_factory=lambda: dict(APPROACHING_WEIGHTS)
    )
    no_history_bonus: int = NO_HISTORY_BONUS

    def weight(self, result: TaskDue) -> int:
        """Contribution of one evaluated item."""
        if result.status == Status.DUE:
            return self.due.get(result.task, 0)
        if result.status == Status.APPROACHING:
            return self.approaching.get(result.task, 0)
        return 0


DEFAULT_WEIGHTS = UrgencyWeights()


def urgency_score(
    vehicle: Vehicle,
    now: Union[datetime, str],
    weights: Optional[UrgencyWeights] = None,
) -> int:
    """
    Aggregate urgency of a vehicle (higher = more urgent).

    Sum of every due/approaching item's weight, plus a flat bonus when the
    vehicle has no maintenance history at all.
    """
    weights = weights or DEFAULT_WEIGHTS
    score = sum(weights.weight(result) for result in evaluate_all(vehicle, now))
    if not vehicle.has_history:
        score += weights.no_history_bonus
    return score


def task_urgency_score(
    vehicle: Vehicle,
    task: TaskKind,
    now: Union[datetime, str],
    weights: Optional[UrgencyWeights] = None,
) -> int:
    """
    Urgency of a single item, for ranking vehicles by that item.

    The no-history bonus also applies when the vehicle has history but none
    for this task kind. The safety inspection has no records, so for it only
    a completely empty history earns the bonus.
    """
    weights = weights or DEFAULT_WEIGHTS
    if task == TaskKind.SAFETY_INSPECTION:
        result = fleet_inspection_status(vehicle, now)
    else:
        result = evaluate_task(vehicle, task, now)

    score = weights.weight(result)
    if not vehicle.has_history:
        score += weights.no_history_bonus
    elif task.is_recurring and vehicle.get_record(task) is None:
        score += weights.no_history_bonus
    return score


def overdue_distance(vehicle: Vehicle, task: TaskKind, now: Union[datetime, str]) -> Number:
    """Distance past the due point for a recurring task, 0 if not overdue."""
    if not task.is_recurring:
        return 0
    return evaluate_task(vehicle, task, now).overdue_distance
