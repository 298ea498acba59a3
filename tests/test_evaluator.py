#!/usr/bin/env python3
"""
Tests for the task and safety inspection evaluators.

Covers the complete due-status rules:
1. Untracked tasks (no interval, no default) are UNKNOWN
2. No record - initial service owed, due immediately
3. Due by distance (last service + interval) or by date, whichever first
4. Approaching within the unit's distance buffer or 14 days
5. Safety inspection by expiry date, with the fleet-level "no inspection" rule
"""

import pytest
from datetime import datetime, timedelta

from fleet import (
    RECURRING_TASKS,
    MaintenanceRecord,
    Status,
    TaskKind,
    Vehicle,
    evaluate_all,
    evaluate_safety_inspection,
    evaluate_task,
    fleet_inspection_status,
    has_overdue_maintenance,
    vehicle_needs_attention,
)

NOW = datetime(2025, 6, 1, 12, 0)


def oil_vehicle(current, mileage=34000, next_date=None, **kwargs):
    """Vehicle with a single oil record."""
    return Vehicle(
        "t1",
        current_distance=current,
        maintenance_history=[MaintenanceRecord("oil", "2025-01-10", mileage, next_date)],
        **kwargs,
    )


def fresh_vehicle(**kwargs):
    """Vehicle with every task recently serviced (all OK by distance)."""
    history = [
        MaintenanceRecord(kind.value, "2025-05-01", 40000) for kind in RECURRING_TASKS
    ]
    kwargs.setdefault("current_distance", 41000)
    return Vehicle("fresh", maintenance_history=history, **kwargs)


# =============================================================================
# Task Status Evaluator
# =============================================================================


class TestEvaluateTaskScenarios:
    """Worked scenarios for evaluate_task."""

    def test_due_exactly_at_next_due_distance(self):
        vehicle = oil_vehicle(42000, intervals={TaskKind.OIL: 8000})
        result = evaluate_task(vehicle, TaskKind.OIL, NOW)
        assert result.next_due_distance == 42000
        assert result.status == Status.DUE
        assert result.overdue_distance == 0

    def test_approaching_within_km_buffer(self):
        vehicle = oil_vehicle(41600, intervals={TaskKind.OIL: 8000})
        result = evaluate_task(vehicle, TaskKind.OIL, NOW)
        assert result.status == Status.APPROACHING
        assert result.next_due_distance == 42000

    def test_overdue_distance(self):
        vehicle = oil_vehicle(43250)
        result = evaluate_task(vehicle, TaskKind.OIL, NOW)
        assert result.status == Status.DUE
        assert result.overdue_distance == 1250

    def test_ok_outside_buffer(self):
        vehicle = oil_vehicle(41000)
        result = evaluate_task(vehicle, TaskKind.OIL, NOW)
        assert result.status == Status.OK
        assert result.overdue_distance == 0

    def test_miles_buffer(self):
        """Miles vehicles use the 500 mile buffer and 5000 mile default."""
        approaching = oil_vehicle(24500, mileage=20000, distance_unit="miles")
        ok = oil_vehicle(24499, mileage=20000, distance_unit="miles")
        assert evaluate_task(approaching, TaskKind.OIL, NOW).status == Status.APPROACHING
        assert evaluate_task(ok, TaskKind.OIL, NOW).status == Status.OK


class TestEvaluateTaskNoRecord:
    """A tracked task without a record is due for its initial service."""

    @pytest.mark.parametrize("task", RECURRING_TASKS)
    def test_due_at_current_odometer(self, task):
        vehicle = Vehicle("t1", current_distance=15800)
        result = evaluate_task(vehicle, task, NOW)
        assert result.status == Status.DUE
        assert result.next_due_distance == 15800
        assert result.overdue_distance == 0
        assert result.record is None

    def test_due_even_when_other_tasks_have_records(self):
        vehicle = oil_vehicle(35000)
        assert evaluate_task(vehicle, TaskKind.AIR_FILTER, NOW).status == Status.DUE

    def test_invalid_odometer_still_due(self):
        vehicle = Vehicle("t1", current_distance=-1)
        result = evaluate_task(vehicle, TaskKind.OIL, NOW)
        assert result.status == Status.DUE
        assert result.next_due_distance is None


class TestEvaluateTaskIntervals:
    """Interval resolution."""

    @pytest.mark.parametrize("task", RECURRING_TASKS)
    def test_untracked_is_unknown(self, task):
        """No explicit interval and no unit default: UNKNOWN."""
        vehicle = Vehicle("t1", distance_unit="leagues", current_distance=1000)
        result = evaluate_task(vehicle, task, NOW)
        assert result.status == Status.UNKNOWN
        assert result.next_due_distance is None

    def test_explicit_interval_overrides_default(self):
        vehicle = oil_vehicle(40000, intervals={TaskKind.OIL: 6000})
        result = evaluate_task(vehicle, TaskKind.OIL, NOW)
        assert result.next_due_distance == 40000
        assert result.status == Status.DUE

    def test_zero_interval_uses_default(self):
        vehicle = oil_vehicle(41000, intervals={TaskKind.OIL: 0})
        assert evaluate_task(vehicle, TaskKind.OIL, NOW).next_due_distance == 42000

    def test_negative_interval_treated_as_absent(self):
        vehicle = oil_vehicle(42000, intervals={TaskKind.OIL: -5})
        result = evaluate_task(vehicle, TaskKind.OIL, NOW)
        assert result.next_due_distance == 42000
        assert result.status == Status.DUE

    def test_unknown_unit_with_explicit_interval_has_no_buffer(self):
        vehicle = oil_vehicle(41600, distance_unit="leagues", intervals={TaskKind.OIL: 8000})
        assert evaluate_task(vehicle, TaskKind.OIL, NOW).status == Status.OK


class TestEvaluateTaskByDate:
    """Date-based checks against the record's next date."""

    def test_due_by_date(self):
        vehicle = oil_vehicle(35000, next_date="2025-05-01")
        result = evaluate_task(vehicle, TaskKind.OIL, NOW)
        assert result.status == Status.DUE
        assert result.overdue_distance == 0
        assert result.next_due_distance == 42000
        assert result.next_due_date == datetime(2025, 5, 1)

    def test_approaching_by_date(self):
        vehicle = oil_vehicle(35000, next_date="2025-06-10")
        assert evaluate_task(vehicle, TaskKind.OIL, NOW).status == Status.APPROACHING

    def test_ok_by_date(self):
        vehicle = oil_vehicle(35000, next_date="2025-12-01")
        assert evaluate_task(vehicle, TaskKind.OIL, NOW).status == Status.OK

    def test_distance_due_beats_date_ok(self):
        vehicle = oil_vehicle(42500, next_date="2025-12-01")
        result = evaluate_task(vehicle, TaskKind.OIL, NOW)
        assert result.status == Status.DUE
        assert result.overdue_distance == 500

    def test_now_as_date_string(self):
        vehicle = oil_vehicle(35000, next_date="2025-05-01")
        assert evaluate_task(vehicle, TaskKind.OIL, "2025-06-01").status == Status.DUE


class TestEvaluateTaskMissingData:
    """Missing values disable the check that needs them."""

    def test_no_service_mileage(self):
        vehicle = oil_vehicle(90000, mileage=None, next_date="2025-12-01")
        result = evaluate_task(vehicle, TaskKind.OIL, NOW)
        assert result.status == Status.OK
        assert result.next_due_distance is None

    def test_no_mileage_no_date(self):
        vehicle = oil_vehicle(90000, mileage=None)
        assert evaluate_task(vehicle, TaskKind.OIL, NOW).status == Status.OK

    def test_invalid_current_odometer(self):
        vehicle = oil_vehicle(float("nan"))
        result = evaluate_task(vehicle, TaskKind.OIL, NOW)
        assert result.status == Status.OK
        assert result.next_due_distance == 42000

    def test_unparseable_next_date(self):
        vehicle = oil_vehicle(35000, next_date="soon")
        assert evaluate_task(vehicle, TaskKind.OIL, NOW).status == Status.OK

    def test_latest_record_is_authoritative(self):
        vehicle = Vehicle(
            "t1",
            current_distance=35000,
            maintenance_history=[
                MaintenanceRecord("oil", "2024-06-01", 10000),
                MaintenanceRecord("oil", "2025-01-10", 34000),
            ],
        )
        result = evaluate_task(vehicle, TaskKind.OIL, NOW)
        assert result.status == Status.OK
        assert result.next_due_distance == 42000


class TestMonotonicity:
    """A rising odometer never makes a task less urgent."""

    def test_severity_never_decreases(self):
        values = []
        for current in range(30000, 46000, 100):
            vehicle = oil_vehicle(current, next_date="2025-12-01")
            values.append(evaluate_task(vehicle, TaskKind.OIL, NOW).status.value)
        assert values == sorted(values, reverse=True)
        assert values[0] == Status.OK.value
        assert values[-1] == Status.DUE.value
        assert Status.APPROACHING.value in values


# =============================================================================
# Safety Inspection Evaluator
# =============================================================================


class TestEvaluateSafetyInspection:
    """Tests for evaluate_safety_inspection."""

    def test_no_dates_unknown(self):
        result = evaluate_safety_inspection(Vehicle("t1", year=2020), NOW)
        assert result.status == Status.UNKNOWN
        assert result.task == TaskKind.SAFETY_INSPECTION

    def test_expired(self):
        vehicle = Vehicle("t1", safety_inspection_expiry_date="2025-05-31")
        result = evaluate_safety_inspection(vehicle, NOW)
        assert result.status == Status.DUE
        assert result.next_due_date == datetime(2025, 5, 31)

    def test_expiring_within_30_days(self):
        vehicle = Vehicle("t1", safety_inspection_expiry_date="2025-06-20")
        assert evaluate_safety_inspection(vehicle, NOW).status == Status.APPROACHING

    def test_expiring_later(self):
        vehicle = Vehicle("t1", safety_inspection_expiry_date="2025-12-01")
        assert evaluate_safety_inspection(vehicle, NOW).status == Status.OK

    def test_expiring_exactly_now_is_approaching(self):
        """Not expired until now is past the expiry."""
        vehicle = Vehicle("t1", safety_inspection_expiry_date=NOW)
        assert evaluate_safety_inspection(vehicle, NOW).status == Status.APPROACHING

    def test_expiring_exactly_30_days_out_is_ok(self):
        vehicle = Vehicle("t1", safety_inspection_expiry_date=NOW + timedelta(days=30))
        assert evaluate_safety_inspection(vehicle, NOW).status == Status.OK

    def test_expiring_just_inside_30_days(self):
        expiry = NOW + timedelta(days=30) - timedelta(minutes=1)
        vehicle = Vehicle("t1", safety_inspection_expiry_date=expiry)
        assert evaluate_safety_inspection(vehicle, NOW).status == Status.APPROACHING

    def test_inspection_date_without_expiry(self):
        vehicle = Vehicle("t1", safety_inspection_date="2025-01-01")
        assert evaluate_safety_inspection(vehicle, NOW).status == Status.OK

    def test_evaluate_task_delegates(self):
        vehicle = Vehicle("t1", safety_inspection_expiry_date="2025-05-31")
        result = evaluate_task(vehicle, TaskKind.SAFETY_INSPECTION, NOW)
        assert result.status == Status.DUE


class TestFleetInspectionStatus:
    """Tests for fleet_inspection_status."""

    def test_model_year_without_inspection_is_due(self):
        vehicle = Vehicle("t1", year=2020)
        assert evaluate_safety_inspection(vehicle, NOW).status == Status.UNKNOWN
        assert fleet_inspection_status(vehicle, NOW).status == Status.DUE

    def test_no_model_year_stays_unknown(self):
        assert fleet_inspection_status(Vehicle("t1"), NOW).status == Status.UNKNOWN

    def test_with_expiry_matches_raw_status(self):
        vehicle = Vehicle("t1", year=2020, safety_inspection_expiry_date="2025-06-20")
        assert fleet_inspection_status(vehicle, NOW).status == Status.APPROACHING


# =============================================================================
# Whole-vehicle checks
# =============================================================================


class TestVehicleChecks:
    """Tests for evaluate_all, vehicle_needs_attention, has_overdue_maintenance."""

    def test_evaluate_all_order(self):
        results = evaluate_all(fresh_vehicle(), NOW)
        assert [r.task for r in results] == list(RECURRING_TASKS) + [
            TaskKind.SAFETY_INSPECTION
        ]

    def test_fresh_vehicle_needs_nothing(self):
        vehicle = fresh_vehicle(year=2020, safety_inspection_expiry_date="2025-12-01")
        assert not vehicle_needs_attention(vehicle, NOW)
        assert not has_overdue_maintenance(vehicle, NOW)

    def test_missing_inspection_with_model_year_needs_attention(self):
        vehicle = fresh_vehicle(year=2020)
        assert evaluate_safety_inspection(vehicle, NOW).status == Status.UNKNOWN
        assert vehicle_needs_attention(vehicle, NOW)

    def test_missing_inspection_without_model_year(self):
        assert not vehicle_needs_attention(fresh_vehicle(), NOW)

    def test_approaching_only(self):
        vehicle = fresh_vehicle(year=2020, safety_inspection_expiry_date="2025-06-20")
        assert vehicle_needs_attention(vehicle, NOW)
        assert not has_overdue_maintenance(vehicle, NOW)

    def test_no_history_is_overdue(self):
        vehicle = Vehicle("t1", current_distance=1000)
        assert has_overdue_maintenance(vehicle, NOW)
        assert vehicle_needs_attention(vehicle, NOW)
