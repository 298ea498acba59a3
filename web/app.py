"""Flask web application for fleet maintenance tracking."""

import os
from datetime import datetime
from pathlib import Path

from flask import Flask, abort, jsonify, request

from fleet.calculations import parse_date
from fleet.evaluator import evaluate_all
from fleet.loader import load_fleet, load_vehicle, save_current_distance
from fleet.overview import (
    recently_serviced,
    search_vehicles,
    summarize_fleet,
    vehicles_due,
)
from fleet.ranking import SortMode, attention_items, rank_tasks, rank_vehicles
from fleet.task_due import TaskDue
from fleet.urgency import task_urgency_score, urgency_score
from fleet.vehicle import Vehicle

app = Flask(__name__)

# Path to the fleet store (relative to project root unless absolute)
app.config["FLEET_FILE"] = Path(
    os.environ.get("FLEET_FILE", Path(__file__).parent.parent / "fleet.yaml")
)


def fleet_file() -> Path:
    return Path(app.config["FLEET_FILE"])


def request_now() -> datetime:
    """Evaluation time: the asOf query parameter if given, otherwise now."""
    as_of = request.args.get("asOf")
    if not as_of:
        return datetime.now()
    parsed = parse_date(as_of)
    if parsed is None:
        abort(400, description=f"Invalid date: {as_of!r}")
    return parsed


def format_date(value):
    """Format a datetime as an ISO date."""
    if value is None:
        return None
    return value.date().isoformat()


def task_to_dict(result: TaskDue) -> dict:
    return {
        "task": result.task.value,
        "label": result.task.label,
        "status": result.status.name.lower(),
        "nextDueDistance": result.next_due_distance,
        "overdueDistance": result.overdue_distance,
        "nextDueDate": format_date(result.next_due_date),
    }


def vehicle_to_dict(vehicle: Vehicle) -> dict:
    last = vehicle.last_service
    return {
        "id": vehicle.vehicle_id,
        "name": vehicle.name,
        "unitNumber": vehicle.unit_number,
        "vin": vehicle.vin,
        "year": vehicle.year,
        "distanceUnit": vehicle.distance_unit.value if vehicle.distance_unit else None,
        "currentMileage": vehicle.current_odometer,
        "lastService": last.date if last else None,
    }


def get_vehicle_or_404(vehicle_id: str) -> Vehicle:
    try:
        return load_vehicle(fleet_file(), vehicle_id)
    except KeyError:
        abort(404, description=f"Vehicle '{vehicle_id}' not found")


@app.errorhandler(400)
@app.errorhandler(404)
def json_error(error):
    return jsonify({"error": error.description}), error.code


@app.route("/")
def dashboard():
    """Dashboard counts, vehicles needing service and recent services."""
    now = request_now()
    vehicles = load_fleet(fleet_file())
    summary = summarize_fleet(vehicles, now)

    due = []
    for vehicle in vehicles_due(vehicles, now):
        entry = vehicle_to_dict(vehicle)
        entry["items"] = [task_to_dict(r) for r in attention_items(vehicle, now)]
        due.append(entry)

    return jsonify({
        "totalVehicles": summary.total,
        "maintenanceDue": summary.needing_attention,
        "recentMaintenance": summary.recently_serviced,
        "vehiclesDue": due,
        "recentlyServiced": [vehicle_to_dict(v) for v in recently_serviced(vehicles)],
    })


@app.route("/vehicles")
def vehicle_list():
    """Vehicle list, ranked by the requested sort mode."""
    now = request_now()
    try:
        mode = SortMode.parse(request.args.get("sort"))
    except ValueError:
        abort(400, description=f"Unknown sort mode: {request.args.get('sort')}")

    vehicles = search_vehicles(load_fleet(fleet_file()), request.args.get("q", ""))
    ranked = rank_vehicles(vehicles, mode, now)

    results = []
    for vehicle in ranked:
        entry = vehicle_to_dict(vehicle)
        if mode == SortMode.AGGREGATE:
            entry["score"] = urgency_score(vehicle, now)
        else:
            entry["score"] = task_urgency_score(vehicle, mode.task, now)
        entry["items"] = [task_to_dict(r) for r in evaluate_all(vehicle, now)]
        results.append(entry)

    return jsonify({"sort": mode.value, "label": mode.label, "vehicles": results})


def detail_response(vehicle_id: str, now: datetime):
    vehicle = get_vehicle_or_404(vehicle_id)

    entry = vehicle_to_dict(vehicle)
    entry["score"] = urgency_score(vehicle, now)
    entry["items"] = [task_to_dict(r) for r in rank_tasks(vehicle, now)]
    return jsonify(entry)


@app.route("/vehicles/<vehicle_id>")
def vehicle_detail(vehicle_id: str):
    """Vehicle detail with every item's status, most urgent first."""
    return detail_response(vehicle_id, request_now())


@app.route("/vehicles/<vehicle_id>/mileage", methods=["POST"])
def update_mileage(vehicle_id: str):
    """Handle update distance form submission."""
    now = request_now()
    get_vehicle_or_404(vehicle_id)

    mileage = request.form.get("mileage")
    if not mileage:
        abort(400, description="Please enter a distance")

    try:
        distance = float(mileage)
        save_current_distance(fleet_file(), vehicle_id, distance)
    except ValueError as e:
        abort(400, description=str(e))

    app.logger.info("Updated distance for %s to %s", vehicle_id, mileage)
    return detail_response(vehicle_id, now)


if __name__ == "__main__":
    # Using 5001 to avoid conflict with macOS AirPlay Receiver on 5000
    app.run(debug=True, host="0.0.0.0", port=5001)
