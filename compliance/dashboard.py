"""
Dashboard derivations - overview cards and the compliance calendar.
"""

from datetime import date, datetime
from typing import Iterable, Sequence
from pydantic import BaseModel

from models import (
    ComplianceEvent,
    ComplianceTask,
    EventType,
    Policy,
    PolicyStatus,
    Report,
    ReportStatus,
    TaskStatus,
)


class OverviewStats(BaseModel):
    """Numbers behind the four overview cards."""
    total_policies: int = 0
    compliance_rate: int = 100
    trend: str = "up"
    pending_reports: int = 0
    upcoming_deadlines: int = 0


def compliance_rate(tasks: Sequence[ComplianceTask]) -> int:
    """Percent of tasks completed, halves rounded up. No tasks counts as fully compliant."""
    if not tasks:
        return 100
    done = sum(1 for t in tasks if t.status == TaskStatus.COMPLETED)
    return (done * 200 + len(tasks)) // (2 * len(tasks))


def upcoming_deadlines(tasks: Iterable[ComplianceTask], now: datetime, window_days: int) -> list[ComplianceTask]:
    """Open tasks due between today and the end of the window, soonest first."""
    due = [
        t for t in tasks
        if t.is_open and 0 <= t.days_until_due(now) <= window_days
    ]
    return sorted(due, key=lambda t: t.due_date)


def overview(
    policies: Sequence[Policy],
    tasks: Sequence[ComplianceTask],
    reports: Sequence[Report],
    now: datetime,
    window_days: int = 14,
    target: int = 85,
) -> OverviewStats:
    rate = compliance_rate(tasks)
    return OverviewStats(
        total_policies=sum(1 for p in policies if p.status == PolicyStatus.ACTIVE),
        compliance_rate=rate,
        trend="up" if rate >= target else "down",
        pending_reports=sum(1 for r in reports if r.status == ReportStatus.PENDING),
        upcoming_deadlines=len(upcoming_deadlines(tasks, now, window_days)),
    )


def pending_acknowledgements(policies: Iterable[Policy]) -> list[Policy]:
    """Policies still waiting on the viewer's acknowledgement."""
    return [p for p in policies if p.action_required]


def task_events(tasks: Iterable[ComplianceTask]) -> list[ComplianceEvent]:
    """Calendar entries for tasks: completed ones marked done, the rest as deadlines."""
    events = []
    for task in tasks:
        events.append(ComplianceEvent(
            id=task.id,
            title=task.title,
            date=task.due_date,
            type=EventType.DEADLINE if task.is_open else EventType.COMPLETED,
            description=task.description or None,
        ))
    return sorted(events, key=lambda e: e.date)


def events_on(events: Iterable[ComplianceEvent], day: date) -> list[ComplianceEvent]:
    return [e for e in events if e.falls_on(day)]
