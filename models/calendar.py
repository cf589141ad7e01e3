"""
Calendar models - deadlines and reminders on the dashboard.
"""

import datetime as dt
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict


class EventType(str, Enum):
    DEADLINE = "deadline"
    REMINDER = "reminder"
    COMPLETED = "completed"


class ComplianceEvent(BaseModel):
    """A dated entry on the compliance calendar."""
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    date: dt.datetime
    type: EventType = EventType.DEADLINE
    description: Optional[str] = None

    def falls_on(self, day: dt.date) -> bool:
        """Same calendar day, time ignored."""
        return self.date.date() == day
