"""Vehicle class - the read-only snapshot the evaluators work from."""

from typing import Dict, List, Optional

from .calculations import clean_distance, clean_interval, parse_date
from .maintenance_record import MaintenanceRecord
from .units import DistanceUnit, TaskKind, convert


class Vehicle:
    """Vehicle identity, odometer, service intervals and last-service records."""

    def __init__(
        self,
        vehicle_id: str,
        make: Optional[str] = None,
        model: Optional[str] = None,
        year: Optional[int] = None,
        unit_number: Optional[str] = None,
        vin: Optional[str] = None,
        distance_unit=None,
        current_distance: Optional[float] = None,
        intervals: Optional[Dict[TaskKind, float]] = None,
        safety_inspection_date: Optional[str] = None,
        safety_inspection_expiry_date: Optional[str] = None,
        maintenance_history: Optional[List[MaintenanceRecord]] = None,
    ):
        self.vehicle_id = vehicle_id
        self.make = make
        self.model = model
        self.year = year
        self.unit_number = unit_number
        self.vin = vin
        self.distance_unit = DistanceUnit.parse(distance_unit)
        self.current_distance = current_distance
        self.intervals = dict(intervals or {})
        self.safety_inspection_date = safety_inspection_date
        self.safety_inspection_expiry_date = safety_inspection_expiry_date
        self.maintenance_history = list(maintenance_history or [])

    @property
    def name(self) -> str:
        """Human-readable vehicle name."""
        base = " ".join(str(p) for p in (self.year, self.make, self.model) if p)
        if self.unit_number:
            return f"Unit {self.unit_number} - {base}" if base else f"Unit {self.unit_number}"
        return base or self.vehicle_id

    @property
    def current_odometer(self) -> Optional[float]:
        """Current odometer reading, None if missing or invalid."""
        return clean_distance(self.current_distance)

    @property
    def has_history(self) -> bool:
        return bool(self.maintenance_history)

    def interval_for(self, kind: TaskKind) -> Optional[float]:
        """Explicit interval for a task kind, None if unset or invalid."""
        return clean_interval(self.intervals.get(kind))

    def get_records(self, kind: TaskKind) -> List[MaintenanceRecord]:
        """Get all records for a task kind."""
        return [r for r in self.maintenance_history if r.kind == kind]

    def get_record(self, kind: TaskKind) -> Optional[MaintenanceRecord]:
        """
        Get the authoritative record for a task kind.

        The most recently dated record wins. Undated records only count when
        no dated one exists, in which case the last one listed is used.
        """
        records = self.get_records(kind)
        if not records:
            return None
        dated = [r for r in records if parse_date(r.date) is not None]
        if dated:
            return max(dated, key=lambda r: parse_date(r.date))
        return records[-1]

    @property
    def last_service(self) -> Optional[MaintenanceRecord]:
        """Get the most recent dated record of any kind."""
        dated = [r for r in self.maintenance_history if parse_date(r.date) is not None]
        if not dated:
            return None
        return max(dated, key=lambda r: parse_date(r.date))

    def with_distance_unit(self, unit) -> "Vehicle":
        """
        Return a copy of this vehicle expressed in another distance unit.

        Converts the odometer, every explicit interval and every record's
        odometer reading. Each value is rounded on its own, so repeated
        toggling can drift by a unit.
        """
        target = DistanceUnit.parse(unit)
        if target is None:
            raise ValueError(f"Unknown distance unit: {unit!r}")
        source = self.distance_unit
        if source is None:
            raise ValueError(f"Vehicle {self.vehicle_id} has no recognised distance unit")

        def _convert(value):
            cleaned = clean_distance(value)
            return convert(cleaned, source, target) if cleaned is not None else value

        history = [
            MaintenanceRecord(
                r.task,
                r.date,
                _convert(r.mileage),
                r.next_date,
                r.notes,
                r.record_id,
            )
            for r in self.maintenance_history
        ]
        return Vehicle(
            self.vehicle_id,
            make=self.make,
            model=self.model,
            year=self.year,
            unit_number=self.unit_number,
            vin=self.vin,
            distance_unit=target,
            current_distance=_convert(self.current_distance),
            intervals={kind: _convert(v) for kind, v in self.intervals.items()},
            safety_inspection_date=self.safety_inspection_date,
            safety_inspection_expiry_date=self.safety_inspection_expiry_date,
            maintenance_history=history,
        )
