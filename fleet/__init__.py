"""
Fleet maintenance due-status and urgency ranking.

This package provides the models and rules for tracking fleet maintenance:
- Status: Due-status levels (DUE, APPROACHING, OK, UNKNOWN)
- DistanceUnit / TaskKind: Units, maintenance items and default intervals
- MaintenanceRecord: Last service of a task kind
- Vehicle: Read-only vehicle snapshot
- TaskDue: Calculated status of one item
- evaluator / urgency / ranking: Status rules, scores and sort policies
- overview: Dashboard summaries
- loader: YAML fleet store
"""

from .status import Status
from .units import (
    DistanceUnit,
    TaskKind,
    RECURRING_TASKS,
    default_interval,
    approaching_distance_threshold,
    convert,
)
from .maintenance_record import MaintenanceRecord
from .vehicle import Vehicle
from .task_due import TaskDue
from .calculations import (
    clean_distance,
    clean_interval,
    parse_date,
    calc_next_due_distance,
    calc_overdue_distance,
    check_distance_status,
    check_date_status,
)
from .evaluator import (
    resolve_interval,
    evaluate_task,
    evaluate_safety_inspection,
    fleet_inspection_status,
    evaluate_all,
    vehicle_needs_attention,
    has_overdue_maintenance,
)
from .urgency import (
    UrgencyWeights,
    DEFAULT_WEIGHTS,
    urgency_score,
    task_urgency_score,
    overdue_distance,
)
from .ranking import SortMode, rank_vehicles, rank_tasks, attention_items
from .overview import (
    FleetSummary,
    summarize_fleet,
    vehicles_due,
    recently_serviced,
    search_vehicles,
)
from .loader import (
    load_fleet,
    load_vehicle,
    save_current_distance,
    save_maintenance_record,
    save_safety_inspection,
    save_distance_unit,
    save_interval,
    save_unit_number,
    add_vehicle,
    delete_vehicle,
)

__all__ = [
    "Status",
    "DistanceUnit",
    "TaskKind",
    "RECURRING_TASKS",
    "default_interval",
    "approaching_distance_threshold",
    "convert",
    "MaintenanceRecord",
    "Vehicle",
    "TaskDue",
    "clean_distance",
    "clean_interval",
    "parse_date",
    "calc_next_due_distance",
    "calc_overdue_distance",
    "check_distance_status",
    "check_date_status",
    "resolve_interval",
    "evaluate_task",
    "evaluate_safety_inspection",
    "fleet_inspection_status",
    "evaluate_all",
    "vehicle_needs_attention",
    "has_overdue_maintenance",
    "UrgencyWeights",
    "DEFAULT_WEIGHTS",
    "urgency_score",
    "task_urgency_score",
    "overdue_distance",
    "SortMode",
    "rank_vehicles",
    "rank_tasks",
    "attention_items",
    "FleetSummary",
    "summarize_fleet",
    "vehicles_due",
    "recently_serviced",
    "search_vehicles",
    "load_fleet",
    "load_vehicle",
    "save_current_distance",
    "save_maintenance_record",
    "save_safety_inspection",
    "save_distance_unit",
    "save_interval",
    "save_unit_number",
    "add_vehicle",
    "delete_vehicle",
]
