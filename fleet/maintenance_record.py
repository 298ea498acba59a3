"""MaintenanceRecord class for the last service of each task kind."""
from typing import Optional

from .units import TaskKind


class MaintenanceRecord:
    """A record of the most recent service of one task kind."""

    def __init__(
            self,
            task: str,
            date: Optional[str] = None,
            mileage: Optional[float] = None,
            next_date: Optional[str] = None,
            notes: Optional[str] = None,
            record_id: Optional[str] = None,
    ):
        self.task = task
        self.date = date
        self.mileage = mileage
        self.next_date = next_date
        self.notes = notes
        self.record_id = record_id

    @property
    def kind(self) -> Optional[TaskKind]:
        """Task kind, or None if the stored type isn't a recurring task."""
        kind = TaskKind.parse(self.task)
        if kind is None or not kind.is_recurring:
            return None
        return kind
