"""Fleet-wide summaries for the dashboard and vehicle list."""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Union

from dateutil.relativedelta import relativedelta

from .calculations import parse_date
from .evaluator import has_overdue_maintenance, vehicle_needs_attention
from .vehicle import Vehicle


@dataclass
class FleetSummary:
    """Headline counts for a fleet."""

    total: int
    needing_attention: int
    recently_serviced: int


def _serviced_since(vehicle: Vehicle, since: datetime) -> bool:
    for record in vehicle.maintenance_history:
        serviced = parse_date(record.date)
        if serviced is not None and serviced > since:
            return True
    return False


def summarize_fleet(vehicles: Iterable[Vehicle], now: Union[datetime, str]) -> FleetSummary:
    """Count vehicles, those needing attention, and those serviced in the last month."""
    vehicles = list(vehicles)
    current_time = parse_date(now)
    recent = 0
    if current_time is not None:
        since = current_time - relativedelta(months=1)
        recent = sum(1 for v in vehicles if _serviced_since(v, since))
    return FleetSummary(
        total=len(vehicles),
        needing_attention=sum(1 for v in vehicles if vehicle_needs_attention(v, now)),
        recently_serviced=recent,
    )


def vehicles_due(
    vehicles: Iterable[Vehicle], now: Union[datetime, str], limit: int = 5
) -> List[Vehicle]:
    """Vehicles needing attention, those with overdue items first."""
    due = [v for v in vehicles if vehicle_needs_attention(v, now)]
    due.sort(key=lambda v: not has_overdue_maintenance(v, now))
    return due[:limit]


def recently_serviced(vehicles: Iterable[Vehicle], limit: int = 5) -> List[Vehicle]:
    """Vehicles with history, most recently serviced first."""
    serviced = [v for v in vehicles if v.has_history]

    def latest(vehicle: Vehicle):
        last = vehicle.last_service
        return parse_date(last.date) if last else None

    # Vehicles whose records are all undated go last
    serviced.sort(key=lambda v: (latest(v) is not None, latest(v) or datetime.min), reverse=True)
    return serviced[:limit]


def search_vehicles(vehicles: Iterable[Vehicle], term: str) -> List[Vehicle]:
    """Case-insensitive match on VIN, make, model, year or unit number."""
    vehicles = list(vehicles)
    needle = (term or "").strip().lower()
    if not needle:
        return vehicles
    matches = []
    for vehicle in vehicles:
        fields = (vehicle.vin, vehicle.make, vehicle.model, vehicle.year, vehicle.unit_number)
        if any(needle in str(f).lower() for f in fields if f is not None):
            matches.append(vehicle)
    return matches
