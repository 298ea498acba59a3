#!/usr/bin/env python3
"""
Unified CLI for fleet maintenance tracking.

Commands:
  list            - List vehicles ranked by urgency
  status          - Show what maintenance is due or approaching for a vehicle
  dashboard       - Fleet summary, vehicles needing service, recent services
  log             - Record a service
  update-distance - Update a vehicle's odometer reading
  inspect         - Record a safety inspection
  set-unit        - Switch a vehicle between miles and kilometers
  set-interval    - Set a service interval for one task
  set-unit-number - Set a vehicle's fleet unit number
  add             - Add a vehicle to the fleet
  remove          - Remove a vehicle from the fleet
"""

import argparse
import sys
from datetime import datetime
from pathlib import Path
from tabulate import tabulate
from typing import List, Optional

from fleet import (
    RECURRING_TASKS,
    MaintenanceRecord,
    SortMode,
    Status,
    TaskDue,
    TaskKind,
    Vehicle,
    add_vehicle,
    attention_items,
    delete_vehicle,
    evaluate_all,
    load_fleet,
    load_vehicle,
    parse_date,
    rank_tasks,
    rank_vehicles,
    recently_serviced,
    resolve_interval,
    save_current_distance,
    save_distance_unit,
    save_interval,
    save_maintenance_record,
    save_safety_inspection,
    save_unit_number,
    search_vehicles,
    summarize_fleet,
    task_urgency_score,
    urgency_score,
    vehicles_due,
)

# =============================================================================
# Formatting helpers
# =============================================================================

STATUS_LABELS = {
    Status.DUE: "DUE",
    Status.APPROACHING: "SOON",
    Status.OK: "OK",
    Status.UNKNOWN: "-",
}


def unit_suffix(vehicle: Vehicle) -> str:
    return vehicle.distance_unit.value if vehicle.distance_unit else "?"


def format_distance(distance: Optional[float], unit: Optional[str] = None) -> str:
    """Format a distance for display."""
    if distance is None:
        return "-"
    text = f"{distance:,.0f}"
    return f"{text} {unit}" if unit else text


def format_date(value: Optional[datetime]) -> str:
    """Format a date for display."""
    return value.date().isoformat() if value is not None else "-"


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if text is None:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def describe_item(result: TaskDue, vehicle: Vehicle) -> str:
    """One-line description of a due or approaching item."""
    if result.task == TaskKind.SAFETY_INSPECTION:
        if result.next_due_date is None:
            return "No inspection on file"
        verb = "Expired" if result.is_due else "Expires"
        return f"{verb} {format_date(result.next_due_date)}"
    if result.record is None:
        return "Initial service needed"
    if result.is_due and result.overdue_distance:
        return f"Overdue by {format_distance(result.overdue_distance, unit_suffix(vehicle))}"
    parts = []
    if result.next_due_distance is not None:
        parts.append(f"at {format_distance(result.next_due_distance, unit_suffix(vehicle))}")
    if result.next_due_date is not None:
        parts.append(f"by {format_date(result.next_due_date)}")
    return "Due " + " / ".join(parts) if parts else "Due"


def resolve_now(args) -> datetime:
    """Evaluation time: --as-of if given, otherwise now."""
    if not getattr(args, "as_of", None):
        return datetime.now()
    parsed = parse_date(args.as_of)
    if parsed is None:
        raise ValueError(f"Invalid date: {args.as_of!r}")
    return parsed


# =============================================================================
# List command
# =============================================================================


def make_vehicle_table(
    vehicles: List[Vehicle], now: datetime, mode: SortMode
) -> List[List[str]]:
    """Convert ranked vehicles to table rows."""
    rows = []
    for vehicle in vehicles:
        if mode == SortMode.AGGREGATE:
            score = urgency_score(vehicle, now)
        else:
            score = task_urgency_score(vehicle, mode.task, now)
        statuses = [STATUS_LABELS[r.status] for r in evaluate_all(vehicle, now)]
        rows.append(
            [
                vehicle.unit_number or vehicle.vehicle_id,
                vehicle.name,
                format_distance(vehicle.current_odometer, unit_suffix(vehicle)),
                str(score),
                *statuses,
            ]
        )
    return rows


def cmd_list(args):
    """List vehicles ranked by urgency."""
    now = resolve_now(args)
    mode = SortMode.parse(args.sort)
    vehicles = search_vehicles(load_fleet(args.fleet_file), args.search)
    ranked = rank_vehicles(vehicles, mode, now)

    print(f"Sort: {mode.label}")
    if args.search:
        print(f"Search: {args.search} ({len(ranked)} matching)")
    print()

    if not ranked:
        print("No vehicles found.")
        return 0

    headers = ["Unit", "Vehicle", "Distance", "Score"]
    headers += [task.label for task in RECURRING_TASKS] + ["Inspection"]
    print(tabulate(make_vehicle_table(ranked, now, mode), headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Status command
# =============================================================================


def make_status_table(results: List[TaskDue], vehicle: Vehicle) -> List[List[str]]:
    """Convert item statuses to table rows."""
    unit = unit_suffix(vehicle)
    rows = []
    for result in results:
        last_done = "-"
        if result.record is not None:
            parts = []
            if result.record.date:
                parts.append(str(result.record.date))
            if result.record.mileage is not None:
                parts.append(format_distance(result.record.mileage))
            last_done = " @ ".join(parts) or "-"

        rows.append(
            [
                result.task.label,
                STATUS_LABELS[result.status],
                last_done,
                format_distance(result.next_due_distance, unit),
                format_date(result.next_due_date),
                format_distance(result.overdue_distance, unit) if result.overdue_distance else "-",
            ]
        )
    return rows


def cmd_status(args):
    """Show what maintenance is due or approaching for a vehicle."""
    now = resolve_now(args)
    vehicle = load_vehicle(args.fleet_file, args.vehicle_id)
    results = rank_tasks(vehicle, now)

    # Header
    print(f"Vehicle: {vehicle.name}")
    print(
        f"Current distance: {format_distance(vehicle.current_odometer, unit_suffix(vehicle))}"
        f" (as of {now.date().isoformat()})"
    )
    print(f"Urgency score: {urgency_score(vehicle, now)}")
    print(f"Service records: {len(vehicle.maintenance_history)}")
    print()

    headers = ["Item", "Status", "Last Done", "Due (dist)", "Due (date)", "Overdue"]
    print(tabulate(make_status_table(results, vehicle), headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Dashboard command
# =============================================================================


def cmd_dashboard(args):
    """Fleet summary, vehicles needing service, and recent services."""
    now = resolve_now(args)
    vehicles = load_fleet(args.fleet_file)
    summary = summarize_fleet(vehicles, now)

    print(f"Total vehicles:          {summary.total}")
    print(f"Maintenance due:         {summary.needing_attention}")
    print(f"Serviced in last month:  {summary.recently_serviced}")
    print()

    due = vehicles_due(vehicles, now, limit=args.limit)
    print("MAINTENANCE DUE:")
    if not due:
        print("  No maintenance due soon")
    for vehicle in due:
        print(f"  {vehicle.name}")
        for item in attention_items(vehicle, now):
            flag = "OVERDUE" if item.is_due else "SOON"
            print(f"    {item.task.label}: {describe_item(item, vehicle)} ({flag})")
    print()

    recent = recently_serviced(vehicles, limit=args.limit)
    print("RECENTLY SERVICED:")
    if not recent:
        print("  No maintenance records yet")
    rows = []
    for vehicle in recent:
        last = vehicle.last_service
        rows.append(
            [
                vehicle.name,
                TaskKind(last.task).label if last and last.kind else "-",
                last.date if last else "-",
                format_distance(last.mileage if last else None, unit_suffix(vehicle)),
                truncate(last.notes if last else None),
            ]
        )
    if rows:
        headers = ["Vehicle", "Service", "Date", "Distance", "Notes"]
        print(tabulate(rows, headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Log command
# =============================================================================


def cmd_log(args):
    """Record a service."""
    vehicle = load_vehicle(args.fleet_file, args.vehicle_id)

    record = MaintenanceRecord(
        task=args.task,
        date=args.date or datetime.now().date().isoformat(),
        mileage=args.mileage,
        next_date=args.next_date,
        notes=args.notes,
    )

    # Show what will be added
    print(f"Recording service for {vehicle.name}:")
    print(f"  Service:  {TaskKind(args.task).label}")
    print(f"  Date:     {record.date}")
    if record.mileage is not None:
        print(f"  Distance: {format_distance(record.mileage, unit_suffix(vehicle))}")
    if record.next_date:
        print(f"  Next due: {record.next_date}")
    if record.notes:
        print(f"  Notes:    {record.notes}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    save_maintenance_record(args.fleet_file, vehicle.vehicle_id, record)
    print("Record saved.")
    return 0


# =============================================================================
# Update Distance command
# =============================================================================


def cmd_update_distance(args):
    """Update a vehicle's odometer reading."""
    vehicle = load_vehicle(args.fleet_file, args.vehicle_id)
    unit = unit_suffix(vehicle)

    print(f"Vehicle: {vehicle.name}")
    print(f"Current distance: {format_distance(vehicle.current_odometer, unit)}")
    print(f"New distance:     {format_distance(args.distance, unit)}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    save_current_distance(args.fleet_file, vehicle.vehicle_id, args.distance)
    print("Distance updated.")
    return 0


# =============================================================================
# Inspect command
# =============================================================================


def cmd_inspect(args):
    """Record a safety inspection."""
    vehicle = load_vehicle(args.fleet_file, args.vehicle_id)

    print(f"Vehicle: {vehicle.name}")
    print(f"Inspection date: {args.date}")

    if args.dry_run:
        print()
        print("(dry run - no changes made)")
        return 0

    expiry = save_safety_inspection(args.fleet_file, vehicle.vehicle_id, args.date)
    print(f"Expiry date:     {expiry}")
    print()
    print("Inspection saved.")
    return 0


# =============================================================================
# Set Unit command
# =============================================================================


def cmd_set_unit(args):
    """Switch a vehicle between miles and kilometers."""
    vehicle = load_vehicle(args.fleet_file, args.vehicle_id)
    converted = vehicle.with_distance_unit(args.unit)

    print(f"Vehicle: {vehicle.name}")
    print(f"Unit: {unit_suffix(vehicle)} -> {unit_suffix(converted)}")
    print(
        f"Current distance: {format_distance(vehicle.current_odometer)}"
        f" -> {format_distance(converted.current_odometer)}"
    )
    for kind in RECURRING_TASKS:
        if kind in vehicle.intervals:
            print(
                f"{kind.label} interval: {format_distance(vehicle.interval_for(kind))}"
                f" -> {format_distance(converted.interval_for(kind))}"
            )
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    save_distance_unit(args.fleet_file, vehicle.vehicle_id, args.unit)
    print("Distance unit updated.")
    return 0


# =============================================================================
# Set Interval command
# =============================================================================


def cmd_set_interval(args):
    """Set a vehicle's service interval for one task."""
    vehicle = load_vehicle(args.fleet_file, args.vehicle_id)
    kind = TaskKind(args.task)
    unit = unit_suffix(vehicle)

    current = vehicle.interval_for(kind)
    if current is None:
        current_text = f"{format_distance(resolve_interval(vehicle, kind), unit)} (default)"
    else:
        current_text = format_distance(current, unit)

    print(f"Vehicle: {vehicle.name}")
    print(f"{kind.label} interval: {current_text} -> {format_distance(args.interval, unit)}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    save_interval(args.fleet_file, vehicle.vehicle_id, kind, args.interval)
    print("Interval updated.")
    return 0


# =============================================================================
# Set Unit Number command
# =============================================================================


def cmd_set_unit_number(args):
    """Set a vehicle's fleet unit number."""
    vehicle = load_vehicle(args.fleet_file, args.vehicle_id)

    print(f"Vehicle: {vehicle.name}")
    print(f"Unit number: {vehicle.unit_number or '-'} -> {args.unit_number or '-'}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    save_unit_number(args.fleet_file, vehicle.vehicle_id, args.unit_number)
    print("Unit number updated.")
    return 0


# =============================================================================
# Add command
# =============================================================================

INTERVAL_OPTIONS = {
    TaskKind.OIL: "oil_interval",
    TaskKind.AIR_FILTER: "air_filter_interval",
    TaskKind.FUEL_FILTER: "fuel_filter_interval",
    TaskKind.DPF_CLEANING: "dpf_interval",
}


def cmd_add(args):
    """Add a vehicle to the fleet."""
    intervals = {
        kind: getattr(args, option)
        for kind, option in INTERVAL_OPTIONS.items()
        if getattr(args, option) is not None
    }
    vehicle = Vehicle(
        args.vehicle_id,
        make=args.make,
        model=args.model,
        year=args.year,
        unit_number=args.unit_number,
        vin=args.vin,
        distance_unit=args.unit,
        current_distance=args.distance,
        intervals=intervals,
        safety_inspection_date=args.inspection_date,
    )
    unit = unit_suffix(vehicle)

    print(f"Adding vehicle: {vehicle.name}")
    if vehicle.vin:
        print(f"  VIN:      {vehicle.vin.upper()}")
    print(f"  Distance: {format_distance(vehicle.current_odometer, unit)}")
    for kind in RECURRING_TASKS:
        interval = resolve_interval(vehicle, kind)
        suffix = "" if kind in intervals else " (default)"
        print(f"  {kind.label} interval: {format_distance(interval, unit)}{suffix}")
    if args.inspection_date:
        print(f"  Inspected: {args.inspection_date}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    add_vehicle(args.fleet_file, vehicle)
    print("Vehicle added.")
    return 0


# =============================================================================
# Remove command
# =============================================================================


def cmd_remove(args):
    """Remove a vehicle and its maintenance history."""
    vehicle = load_vehicle(args.fleet_file, args.vehicle_id)

    print(f"Removing vehicle: {vehicle.name}")
    print(f"Service records: {len(vehicle.maintenance_history)}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    delete_vehicle(args.fleet_file, vehicle.vehicle_id)
    print("Vehicle removed.")
    return 0


# =============================================================================
# Main
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Fleet maintenance tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s fleet.yaml list
  %(prog)s fleet.yaml list --sort oil
  %(prog)s fleet.yaml list --sort safetyInspection --search freightliner
  %(prog)s fleet.yaml status truck-101
  %(prog)s fleet.yaml dashboard --as-of 2025-06-01
  %(prog)s fleet.yaml log truck-101 oil --mileage 42000 --next-date 2025-12-01
  %(prog)s fleet.yaml update-distance truck-101 43500
  %(prog)s fleet.yaml inspect truck-101 2025-05-20
  %(prog)s fleet.yaml set-unit truck-101 miles
  %(prog)s fleet.yaml set-interval truck-101 oil 10000
  %(prog)s fleet.yaml add truck-104 --vin 1XKYD49X0MJ445566 --make Kenworth --year 2021
  %(prog)s fleet.yaml remove truck-104 --dry-run
""",
    )
    parser.add_argument(
        "fleet_file",
        type=Path,
        help="Path to fleet YAML file",
    )
    parser.add_argument(
        "--as-of",
        type=str,
        help="Evaluate as of this date (YYYY-MM-DD, default: now)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    sort_choices = [mode.value for mode in SortMode]
    task_choices = [kind.value for kind in RECURRING_TASKS]

    # List subcommand
    list_parser = subparsers.add_parser("list", help="List vehicles ranked by urgency")
    list_parser.add_argument(
        "--sort",
        choices=sort_choices,
        default=SortMode.AGGREGATE.value,
        help="Ranking mode (default: aggregate)",
    )
    list_parser.add_argument(
        "--search",
        type=str,
        help="Filter by VIN, make, model, year or unit number",
    )

    # Status subcommand
    status_parser = subparsers.add_parser(
        "status", help="Show what maintenance is due or approaching for a vehicle"
    )
    status_parser.add_argument("vehicle_id", type=str, help="Vehicle id")

    # Dashboard subcommand
    dashboard_parser = subparsers.add_parser(
        "dashboard", help="Fleet summary and vehicles needing service"
    )
    dashboard_parser.add_argument(
        "--limit",
        type=int,
        default=5,
        help="Vehicles to list per section (default: 5)",
    )

    # Log subcommand
    log_parser = subparsers.add_parser("log", help="Record a service")
    log_parser.add_argument("vehicle_id", type=str, help="Vehicle id")
    log_parser.add_argument("task", choices=task_choices, help="Maintenance type")
    log_parser.add_argument(
        "--date",
        type=str,
        help="Service date in YYYY-MM-DD format (default: today)",
    )
    log_parser.add_argument(
        "--mileage",
        type=float,
        help="Odometer reading at time of service",
    )
    log_parser.add_argument(
        "--next-date",
        type=str,
        help="Next service date in YYYY-MM-DD format",
    )
    log_parser.add_argument("--notes", type=str, help="Notes about the service")
    log_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be added without saving",
    )

    # Update Distance subcommand
    update_parser = subparsers.add_parser(
        "update-distance", help="Update a vehicle's odometer reading"
    )
    update_parser.add_argument("vehicle_id", type=str, help="Vehicle id")
    update_parser.add_argument("distance", type=float, help="Current odometer reading")
    update_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be updated without saving",
    )

    # Inspect subcommand
    inspect_parser = subparsers.add_parser("inspect", help="Record a safety inspection")
    inspect_parser.add_argument("vehicle_id", type=str, help="Vehicle id")
    inspect_parser.add_argument("date", type=str, help="Inspection date (YYYY-MM-DD)")
    inspect_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be saved without saving",
    )

    # Set Unit subcommand
    unit_parser = subparsers.add_parser(
        "set-unit", help="Switch a vehicle between miles and kilometers"
    )
    unit_parser.add_argument("vehicle_id", type=str, help="Vehicle id")
    unit_parser.add_argument("unit", choices=["miles", "km"], help="New distance unit")
    unit_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show the converted values without saving",
    )

    # Set Interval subcommand
    interval_parser = subparsers.add_parser(
        "set-interval", help="Set a service interval for one task"
    )
    interval_parser.add_argument("vehicle_id", type=str, help="Vehicle id")
    interval_parser.add_argument("task", choices=task_choices, help="Maintenance type")
    interval_parser.add_argument(
        "interval", type=float, help="Distance between services, in the vehicle's unit"
    )
    interval_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be updated without saving",
    )

    # Set Unit Number subcommand
    number_parser = subparsers.add_parser(
        "set-unit-number", help="Set a vehicle's fleet unit number"
    )
    number_parser.add_argument("vehicle_id", type=str, help="Vehicle id")
    number_parser.add_argument("unit_number", type=str, help="New unit number (empty to clear)")
    number_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be updated without saving",
    )

    # Add subcommand
    add_parser = subparsers.add_parser("add", help="Add a vehicle to the fleet")
    add_parser.add_argument("vehicle_id", type=str, help="New vehicle id")
    add_parser.add_argument("--vin", type=str, help="17-character VIN")
    add_parser.add_argument("--unit-number", type=str, help="Fleet unit number")
    add_parser.add_argument("--make", type=str, help="Make")
    add_parser.add_argument("--model", type=str, help="Model")
    add_parser.add_argument("--year", type=int, help="Model year")
    add_parser.add_argument(
        "--unit",
        choices=["miles", "km"],
        default="km",
        help="Distance unit (default: km)",
    )
    add_parser.add_argument("--distance", type=float, help="Current odometer reading")
    add_parser.add_argument("--oil-interval", type=float, help="Oil change interval")
    add_parser.add_argument("--air-filter-interval", type=float, help="Air filter interval")
    add_parser.add_argument("--fuel-filter-interval", type=float, help="Fuel filter interval")
    add_parser.add_argument("--dpf-interval", type=float, help="DPF cleaning interval")
    add_parser.add_argument(
        "--inspection-date",
        type=str,
        help="Last safety inspection (YYYY-MM-DD); expiry is one year later",
    )
    add_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be added without saving",
    )

    # Remove subcommand
    remove_parser = subparsers.add_parser("remove", help="Remove a vehicle from the fleet")
    remove_parser.add_argument("vehicle_id", type=str, help="Vehicle id")
    remove_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be removed without saving",
    )

    return parser


COMMANDS = {
    "list": cmd_list,
    "status": cmd_status,
    "dashboard": cmd_dashboard,
    "log": cmd_log,
    "update-distance": cmd_update_distance,
    "inspect": cmd_inspect,
    "set-unit": cmd_set_unit,
    "set-interval": cmd_set_interval,
    "set-unit-number": cmd_set_unit_number,
    "add": cmd_add,
    "remove": cmd_remove,
}


def main(argv=None):
    args = build_parser().parse_args(argv)

    # Validate fleet file exists (add creates it)
    if args.command != "add" and not args.fleet_file.exists():
        print(f"Error: File not found: {args.fleet_file}")
        return 1

    try:
        return COMMANDS[args.command](args)
    except KeyError as e:
        print(f"Error: {e.args[0] if e.args else e}")
        return 1
    except ValueError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
