"""TaskDue dataclass for calculated task status."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union, TYPE_CHECKING

from .status import Status
from .units import TaskKind

if TYPE_CHECKING:
    from .maintenance_record import MaintenanceRecord


@dataclass
class TaskDue:
    """Calculated due information for one maintenance item of a vehicle."""

    task: TaskKind
    status: Status
    next_due_distance: Optional[Union[int, float]] = None
    overdue_distance: Union[int, float] = 0
    next_due_date: Optional[datetime] = None
    record: Optional["MaintenanceRecord"] = None

    @property
    def is_due(self) -> bool:
        return self.status == Status.DUE

    @property
    def is_approaching(self) -> bool:
        return self.status == Status.APPROACHING

    @property
    def needs_attention(self) -> bool:
        return self.status in (Status.DUE, Status.APPROACHING)
