"""
Due-status evaluation for a single vehicle.

All functions are pure: they read a Vehicle snapshot and an explicit "now"
and never raise for missing or malformed data. Missing values switch off the
check that needs them instead:

- No interval (and no default for the unit): the task is UNKNOWN
- No record for the task: DUE, initial service owed
- No service odometer reading: no distance check
- No next-due date: no date check
"""

from datetime import datetime, timedelta
from typing import List, Union

from .calculations import (
    Number,
    calc_next_due_distance,
    calc_overdue_distance,
    check_date_status,
    check_distance_status,
    clean_distance,
    parse_date,
)
from .status import Status
from .task_due import TaskDue
from .units import (
    RECURRING_TASKS,
    TaskKind,
    approaching_distance_threshold,
    default_interval,
)
from .vehicle import Vehicle

TASK_APPROACHING_DAYS = 14
INSPECTION_APPROACHING_DAYS = 30


def resolve_interval(vehicle: Vehicle, task: TaskKind) -> Number:
    """Vehicle's interval for the task, or the unit default (0 if neither)."""
    explicit = vehicle.interval_for(task)
    if explicit is not None:
        return explicit
    return default_interval(task, vehicle.distance_unit)


def evaluate_task(vehicle: Vehicle, task: TaskKind, now: Union[datetime, str]) -> TaskDue:
    """
    Calculate the status of one maintenance task for a vehicle.

    Due by date when now is past the record's next date, due by distance
    when the odometer has reached the last service reading plus the
    interval, whichever comes first. Approaching means within 14 days or
    the unit's distance buffer of either due point.
    """
    if task == TaskKind.SAFETY_INSPECTION:
        return evaluate_safety_inspection(vehicle, now)

    interval = resolve_interval(vehicle, task)
    if interval <= 0:
        return TaskDue(task=task, status=Status.UNKNOWN)

    current = vehicle.current_odometer
    record = vehicle.get_record(task)
    if record is None:
        # Initial service owed, due immediately
        return TaskDue(task=task, status=Status.DUE, next_due_distance=current)

    current_time = parse_date(now)
    next_due_distance = calc_next_due_distance(clean_distance(record.mileage), interval)
    next_due_date = parse_date(record.next_date)

    distance_status = Status.OK
    if current is not None and next_due_distance is not None:
        distance_status = check_distance_status(
            current,
            next_due_distance,
            approaching_distance_threshold(vehicle.distance_unit),
        )

    date_status = Status.OK
    if current_time is not None and next_due_date is not None:
        date_status = check_date_status(current_time, next_due_date, TASK_APPROACHING_DAYS)

    # Whichever check is more urgent wins
    status = min(distance_status, date_status, key=lambda s: s.value)

    overdue = 0
    if distance_status == Status.DUE:
        overdue = calc_overdue_distance(current, next_due_distance)

    return TaskDue(
        task=task,
        status=status,
        next_due_distance=next_due_distance,
        overdue_distance=overdue,
        next_due_date=next_due_date,
        record=record,
    )


def evaluate_safety_inspection(vehicle: Vehicle, now: Union[datetime, str]) -> TaskDue:
    """
    Calculate the safety inspection status from its expiry date alone.

    UNKNOWN when neither the inspection date nor the expiry is set, DUE once
    expired, APPROACHING within 30 days of expiry, otherwise OK.
    """
    inspected = parse_date(vehicle.safety_inspection_date)
    expiry = parse_date(vehicle.safety_inspection_expiry_date)
    current_time = parse_date(now)

    if inspected is None and expiry is None:
        status = Status.UNKNOWN
    elif expiry is None or current_time is None:
        status = Status.OK
    elif current_time > expiry:
        status = Status.DUE
    elif expiry < current_time + timedelta(days=INSPECTION_APPROACHING_DAYS):
        status = Status.APPROACHING
    else:
        status = Status.OK

    return TaskDue(task=TaskKind.SAFETY_INSPECTION, status=status, next_due_date=expiry)


def has_inspection_record(vehicle: Vehicle) -> bool:
    return parse_date(vehicle.safety_inspection_expiry_date) is not None


def fleet_inspection_status(vehicle: Vehicle, now: Union[datetime, str]) -> TaskDue:
    """
    Safety inspection status as used for fleet-level checks and scoring.

    A vehicle with a model year but no inspection expiry on file is an
    onboarded vehicle that still needs its inspection, so it counts as DUE
    even though evaluate_safety_inspection reports UNKNOWN or OK.
    """
    if not has_inspection_record(vehicle) and vehicle.year:
        return TaskDue(task=TaskKind.SAFETY_INSPECTION, status=Status.DUE)
    return evaluate_safety_inspection(vehicle, now)


def evaluate_all(vehicle: Vehicle, now: Union[datetime, str]) -> List[TaskDue]:
    """Status of every recurring task plus the fleet-level inspection status."""
    results = [evaluate_task(vehicle, task, now) for task in RECURRING_TASKS]
    results.append(fleet_inspection_status(vehicle, now))
    return results


def vehicle_needs_attention(vehicle: Vehicle, now: Union[datetime, str]) -> bool:
    """True when any item is due or approaching (dashboard count)."""
    return any(result.needs_attention for result in evaluate_all(vehicle, now))


def has_overdue_maintenance(vehicle: Vehicle, now: Union[datetime, str]) -> bool:
    """True when any item is due, not merely approaching."""
    return any(result.is_due for result in evaluate_all(vehicle, now))
