"""
Tracking lookup - resolves a reporter's tracking ID to a status record.

The source is a port: production code backs it with the report
repository, tests and demos with a static list. Any latency belongs to
the source, the lookup itself waits for nothing.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Iterable, Optional
from pydantic import BaseModel, ConfigDict, model_validator

from models import ReportStatusRecord
from .errors import CollaboratorError, NotFoundError, ValidationError


class ReportStatusSource(ABC):
    """Where status records come from."""

    @abstractmethod
    async def find(self, tracking_id: str) -> Optional[ReportStatusRecord]:
        """Exact, case-sensitive match on tracking ID. None if absent."""
        pass


class StaticStatusSource(ReportStatusSource):
    """Fixed in-memory records, with an optional simulated round trip."""

    def __init__(self, records: Iterable[ReportStatusRecord], delay: float = 0.0):
        self._records = {r.tracking_id: r for r in records}
        self.delay = delay

    async def find(self, tracking_id: str) -> Optional[ReportStatusRecord]:
        if self.delay:
            await asyncio.sleep(self.delay)
        return self._records.get(tracking_id)


class RepositoryStatusSource(ReportStatusSource):
    """
    Looks reports up in the report repository.

    The repository is synchronous, so the call runs in a worker thread
    to keep the event loop free.
    """

    def __init__(self, reports):
        self._reports = reports

    async def find(self, tracking_id: str) -> Optional[ReportStatusRecord]:
        try:
            report = await asyncio.to_thread(self._reports.get_by_tracking_id, tracking_id)
        except OSError as e:
            raise CollaboratorError(f"Report lookup failed: {e}") from e
        return report.status_record() if report else None


class TrackingResult(BaseModel):
    """Outcome of one lookup: a record, or not_found. Never both."""
    model_config = ConfigDict(frozen=True)

    tracking_id: str
    record: Optional[ReportStatusRecord] = None
    not_found: bool = False

    @model_validator(mode="after")
    def _exactly_one(self):
        if (self.record is None) != self.not_found:
            raise ValueError("TrackingResult needs exactly one of record / not_found")
        return self

    @property
    def found(self) -> bool:
        return self.record is not None

    def unwrap(self) -> ReportStatusRecord:
        if self.record is None:
            raise NotFoundError(f"No report found with tracking ID {self.tracking_id}")
        return self.record


def normalize_tracking_id(raw: Optional[str]) -> str:
    """Trim surrounding whitespace; empty is a validation error."""
    tracking_id = (raw or "").strip()
    if not tracking_id:
        raise ValidationError("tracking ID required")
    return tracking_id


class TrackingLookup:
    """
    Reporter-facing status lookup.

    Overlapping lookups are allowed; `latest` only ever holds the result
    of the most recently started one.
    """

    def __init__(self, source: ReportStatusSource):
        self._source = source
        self._sequence = 0
        self.latest: Optional[TrackingResult] = None

    async def lookup(self, raw_id: str) -> TrackingResult:
        """
        Resolve a tracking ID.

        Raises:
            ValidationError: blank input, before any lookup happens
            CollaboratorError: the source failed (not retried)
        """
        tracking_id = normalize_tracking_id(raw_id)

        self._sequence += 1
        ticket = self._sequence

        record = await self._source.find(tracking_id)
        if record is None:
            result = TrackingResult(tracking_id=tracking_id, not_found=True)
        else:
            result = TrackingResult(tracking_id=tracking_id, record=record)

        if ticket == self._sequence:
            self.latest = result
        return result

    async def track(self, raw_id: str) -> ReportStatusRecord:
        """Resolve a tracking ID or raise NotFoundError."""
        result = await self.lookup(raw_id)
        return result.unwrap()
