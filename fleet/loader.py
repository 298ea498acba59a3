"""YAML loading and saving utilities for fleet data."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml
from dateutil.relativedelta import relativedelta

from .calculations import clean_distance, clean_interval, parse_date
from .maintenance_record import MaintenanceRecord
from .units import RECURRING_TASKS, DistanceUnit, TaskKind
from .vehicle import Vehicle

logger = logging.getLogger(__name__)

# Smallest interval the store accepts, in either unit
MIN_INTERVAL = 1000
VIN_LENGTH = 17
MIN_MODEL_YEAR = 1900


def _parse_object(dct: Dict[str, Any]) -> Union[MaintenanceRecord, Vehicle, dict]:
    """Parse dictionary into appropriate object type."""
    # Maintenance record (inside 'maintenanceHistory')
    if "type" in dct:
        return MaintenanceRecord(
            dct["type"],
            dct.get("date"),
            dct.get("mileage"),
            dct.get("nextDate"),
            dct.get("notes"),
            dct.get("id"),
        )
    # Vehicle
    elif "id" in dct:
        intervals = {
            kind: dct[kind.interval_field]
            for kind in RECURRING_TASKS
            if kind.interval_field in dct
        }
        return Vehicle(
            dct["id"],
            make=dct.get("make"),
            model=dct.get("model"),
            year=dct.get("year"),
            unit_number=dct.get("unitNumber"),
            vin=dct.get("vin"),
            distance_unit=dct.get("distanceUnit"),
            current_distance=dct.get("currentMileage"),
            intervals=intervals,
            safety_inspection_date=dct.get("safetyInspectionDate"),
            safety_inspection_expiry_date=dct.get("safetyInspectionExpiryDate"),
            maintenance_history=[
                r
                for r in dct.get("maintenanceHistory") or []
                if isinstance(r, MaintenanceRecord)
            ],
        )
    else:
        # Return dict as-is for unknown structures (like the top level)
        return dct


def load_fleet(filename: Union[str, Path]) -> List[Vehicle]:
    """Load every vehicle from a fleet YAML file."""
    with open(filename, "rb") as fp:
        # Unquoted YAML dates load as date objects; keep them as ISO strings
        json_data = json.dumps(yaml.load(fp, Loader=yaml.SafeLoader), default=str)
    data = json.loads(json_data, object_hook=_parse_object)
    return (data or {}).get("vehicles") or []


def load_vehicle(filename: Union[str, Path], vehicle_id: str) -> Vehicle:
    """Load a single vehicle by id. Raises KeyError if it isn't in the file."""
    for vehicle in load_fleet(filename):
        if str(vehicle.vehicle_id) == str(vehicle_id):
            return vehicle
    raise KeyError(f"Vehicle '{vehicle_id}' not found")


def _load_raw(filename: Union[str, Path]) -> Dict[str, Any]:
    """Load the raw YAML data (not parsed into objects)."""
    with open(filename, "r") as fp:
        return yaml.load(fp, Loader=yaml.SafeLoader) or {}


def _dump(filename: Union[str, Path], data: Dict[str, Any]) -> None:
    with open(filename, "w") as fp:
        yaml.dump(
            data,
            fp,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=120,
        )


def _find_raw_vehicle(data: Dict[str, Any], vehicle_id: str) -> Dict[str, Any]:
    for raw in data.get("vehicles") or []:
        if str(raw.get("id")) == str(vehicle_id):
            return raw
    raise KeyError(f"Vehicle '{vehicle_id}' not found")


def _record_to_dict(record: MaintenanceRecord) -> Dict[str, Any]:
    """Serialize a MaintenanceRecord to the YAML dict format (camelCase keys)."""
    d: Dict[str, Any] = {"type": record.task}
    if record.record_id is not None:
        d["id"] = record.record_id
    if record.date is not None:
        d["date"] = record.date
    if record.mileage is not None:
        d["mileage"] = record.mileage
    if record.next_date is not None:
        d["nextDate"] = record.next_date
    if record.notes is not None:
        d["notes"] = record.notes
    return d


def save_current_distance(
    filename: Union[str, Path], vehicle_id: str, distance: float
) -> None:
    """
    Update a vehicle's odometer reading.

    Raises ValueError if the reading is invalid or lower than the current one.
    """
    new_distance = clean_distance(distance)
    if new_distance is None:
        raise ValueError(f"Invalid distance: {distance!r}")

    data = _load_raw(filename)
    raw = _find_raw_vehicle(data, vehicle_id)

    current = clean_distance(raw.get("currentMileage"))
    if current is not None and new_distance < current:
        raise ValueError(
            f"New distance {new_distance:,} cannot be less than current distance {current:,}"
        )

    raw["currentMileage"] = new_distance
    _dump(filename, data)
    logger.info("Vehicle %s odometer set to %s", vehicle_id, new_distance)


def save_maintenance_record(
    filename: Union[str, Path], vehicle_id: str, record: MaintenanceRecord
) -> None:
    """
    Store the last service of a task kind for a vehicle.

    Any existing record of the same kind is replaced, keeping one per kind.
    """
    if record.kind is None:
        raise ValueError(f"Unknown maintenance type: {record.task!r}")

    data = _load_raw(filename)
    raw = _find_raw_vehicle(data, vehicle_id)

    history = [
        entry
        for entry in raw.get("maintenanceHistory") or []
        if TaskKind.parse(entry.get("type")) != record.kind
    ]
    history.append(_record_to_dict(record))
    raw["maintenanceHistory"] = history

    _dump(filename, data)
    logger.info("Vehicle %s: saved %s record", vehicle_id, record.task)


def _inspection_dates(inspection_date) -> Tuple[str, str]:
    """ISO inspection date and its expiry one year later."""
    inspected = parse_date(inspection_date)
    if inspected is None:
        raise ValueError(f"Invalid inspection date: {inspection_date!r}")
    expiry = inspected + relativedelta(years=1)
    return inspected.date().isoformat(), expiry.date().isoformat()


def save_safety_inspection(
    filename: Union[str, Path], vehicle_id: str, inspection_date: str
) -> str:
    """
    Record a safety inspection; the expiry is set one year later.

    Returns the expiry date as an ISO string.
    """
    inspected, expiry = _inspection_dates(inspection_date)

    data = _load_raw(filename)
    raw = _find_raw_vehicle(data, vehicle_id)
    raw["safetyInspectionDate"] = inspected
    raw["safetyInspectionExpiryDate"] = expiry

    _dump(filename, data)
    logger.info("Vehicle %s: safety inspection expires %s", vehicle_id, expiry)
    return expiry


def save_distance_unit(filename: Union[str, Path], vehicle_id: str, unit: str) -> Vehicle:
    """
    Switch a vehicle to another distance unit, converting stored distances.

    Returns the converted vehicle.
    """
    target = DistanceUnit.parse(unit)
    if target is None:
        raise ValueError(f"Unknown distance unit: {unit!r}")

    converted = load_vehicle(filename, vehicle_id).with_distance_unit(target)

    data = _load_raw(filename)
    raw = _find_raw_vehicle(data, vehicle_id)
    raw["distanceUnit"] = target.value
    if "currentMileage" in raw:
        raw["currentMileage"] = converted.current_distance
    for kind in RECURRING_TASKS:
        if kind.interval_field in raw:
            raw[kind.interval_field] = converted.intervals[kind]
    # Records load in file order, so indexes line up
    for entry, record in zip(raw.get("maintenanceHistory") or [], converted.maintenance_history):
        if "mileage" in entry:
            entry["mileage"] = record.mileage

    _dump(filename, data)
    logger.info("Vehicle %s converted to %s", vehicle_id, target.value)
    return converted


def _checked_interval(task, interval) -> Tuple[TaskKind, Any]:
    kind = TaskKind.parse(task)
    if kind is None or not kind.is_recurring:
        raise ValueError(f"Unknown maintenance type: {task!r}")
    value = clean_interval(interval)
    if value is None or value < MIN_INTERVAL:
        raise ValueError(
            f"Invalid {kind.label.lower()} interval {interval!r} (minimum {MIN_INTERVAL:,})"
        )
    return kind, value


def save_interval(
    filename: Union[str, Path], vehicle_id: str, task: Union[TaskKind, str], interval: float
) -> None:
    """
    Set a vehicle's service interval for one task kind.

    Next-due distances are derived from the interval on every evaluation,
    so nothing else needs rewriting.
    """
    kind, value = _checked_interval(task, interval)

    data = _load_raw(filename)
    raw = _find_raw_vehicle(data, vehicle_id)
    raw[kind.interval_field] = value

    _dump(filename, data)
    logger.info("Vehicle %s: %s interval set to %s", vehicle_id, kind.value, value)


def save_unit_number(
    filename: Union[str, Path], vehicle_id: str, unit_number: Optional[str]
) -> None:
    """Set or clear (empty value) a vehicle's fleet unit number."""
    data = _load_raw(filename)
    raw = _find_raw_vehicle(data, vehicle_id)
    unit_number = str(unit_number).strip() if unit_number is not None else ""
    if unit_number:
        raw["unitNumber"] = unit_number
    else:
        raw.pop("unitNumber", None)

    _dump(filename, data)
    logger.info("Vehicle %s: unit number set to %r", vehicle_id, unit_number)


def _vehicle_to_dict(vehicle: Vehicle) -> Dict[str, Any]:
    """
    Serialize a new Vehicle to the YAML dict format, validating its fields.

    Raises ValueError for a VIN that isn't 17 characters, an implausible
    model year, an invalid odometer or interval, or an unknown unit.
    """
    if vehicle.distance_unit is None:
        raise ValueError("Unknown distance unit")

    d: Dict[str, Any] = {"id": vehicle.vehicle_id}
    if vehicle.unit_number:
        d["unitNumber"] = str(vehicle.unit_number)
    if vehicle.vin:
        vin = str(vehicle.vin).strip().upper()
        if len(vin) != VIN_LENGTH:
            raise ValueError(f"VIN must be {VIN_LENGTH} characters")
        d["vin"] = vin
    if vehicle.make:
        d["make"] = vehicle.make
    if vehicle.model:
        d["model"] = vehicle.model
    if vehicle.year is not None:
        try:
            year = int(vehicle.year)
        except (TypeError, ValueError):
            year = None
        if year is None or not MIN_MODEL_YEAR <= year <= datetime.now().year + 1:
            raise ValueError(f"Invalid model year: {vehicle.year!r}")
        d["year"] = year
    d["distanceUnit"] = vehicle.distance_unit.value
    if vehicle.current_distance is not None:
        if vehicle.current_odometer is None:
            raise ValueError(f"Invalid distance: {vehicle.current_distance!r}")
        d["currentMileage"] = vehicle.current_odometer
    for kind in RECURRING_TASKS:
        if vehicle.intervals.get(kind) is not None:
            d[kind.interval_field] = _checked_interval(kind, vehicle.intervals[kind])[1]
    if vehicle.safety_inspection_date:
        inspected, expiry = _inspection_dates(vehicle.safety_inspection_date)
        d["safetyInspectionDate"] = inspected
        d["safetyInspectionExpiryDate"] = expiry
    d["maintenanceHistory"] = [_record_to_dict(r) for r in vehicle.maintenance_history]
    return d


def add_vehicle(filename: Union[str, Path], vehicle: Vehicle) -> None:
    """
    Add a vehicle to the fleet file, creating the file if needed.

    The inspection expiry is derived from the inspection date. Raises
    ValueError if the id is already taken or a field is invalid.
    """
    entry = _vehicle_to_dict(vehicle)

    data = _load_raw(filename) if Path(filename).exists() else {}
    vehicles = data.get("vehicles") or []
    if any(str(raw.get("id")) == str(vehicle.vehicle_id) for raw in vehicles):
        raise ValueError(f"Vehicle '{vehicle.vehicle_id}' already exists")
    vehicles.append(entry)
    data["vehicles"] = vehicles

    _dump(filename, data)
    logger.info("Vehicle %s added", vehicle.vehicle_id)


def delete_vehicle(filename: Union[str, Path], vehicle_id: str) -> None:
    """Remove a vehicle and its maintenance history from the fleet file."""
    data = _load_raw(filename)
    raw = _find_raw_vehicle(data, vehicle_id)
    data["vehicles"].remove(raw)

    _dump(filename, data)
    logger.info("Vehicle %s deleted", vehicle_id)
