"""
Whistleblowing report models.

A report has two identifiers: `id` is the internal storage key, and
`tracking_id` is the only reference ever shown to the reporter.
"""

import uuid
from datetime import date
from enum import Enum
from typing import ClassVar, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .base import BaseEntity, Priority, lower_enum_value


class ReportStatus(str, Enum):
    """Investigation state of a report."""
    PENDING = "pending"
    INVESTIGATING = "investigating"
    RESOLVED = "resolved"


STATUS_MESSAGES = {
    ReportStatus.PENDING: (
        "Your report has been received and is pending review by our compliance team."
    ),
    ReportStatus.INVESTIGATING: (
        "Your report is currently under investigation. "
        "An investigator has been assigned to review the details provided."
    ),
    ReportStatus.RESOLVED: (
        "Your report has been fully investigated and appropriate actions have been taken. "
        "The case is now closed."
    ),
}


class ReportStatusRecord(BaseModel):
    """What a reporter sees when tracking a report. Never carries the internal id."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    tracking_id: str = Field(alias="trackingId")
    title: str
    status: ReportStatus
    date_submitted: date = Field(alias="dateSubmitted")
    last_updated: date = Field(alias="lastUpdated")
    message: str = ""

    @field_validator("status", mode="before")
    @classmethod
    def _lowercase_status(cls, value):
        return lower_enum_value(value)


class Report(BaseEntity):
    """A whistleblowing report as handled by compliance admins."""

    SORT_FIELDS: ClassVar[tuple[str, ...]] = ("title", "category", "date_submitted")

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str
    category: str = ""
    date_submitted: date = Field(default_factory=date.today, alias="dateSubmitted")
    status: ReportStatus = ReportStatus.PENDING
    priority: Priority = Priority.MEDIUM
    assigned_to: Optional[str] = Field(default=None, alias="assignedTo")
    tracking_id: str = Field(alias="trackingId")

    description: str = ""
    evidence_urls: tuple[str, ...] = Field(default=(), alias="evidenceUrls")
    investigation_notes: str = Field(default="", alias="investigationNotes")
    resolution: str = ""

    @field_validator("status", "priority", mode="before")
    @classmethod
    def _lowercase_enums(cls, value):
        return lower_enum_value(value)

    @field_validator("evidence_urls", mode="before")
    @classmethod
    def _evidence_or_empty(cls, value):
        return () if value is None else value

    @model_validator(mode="after")
    def _tracking_id_is_not_id(self):
        if not self.tracking_id:
            raise ValueError("tracking_id is required")
        if self.tracking_id == self.id:
            raise ValueError("tracking_id must differ from the report id")
        return self

    @property
    def search_values(self) -> tuple[str, ...]:
        return (self.title, self.id, self.tracking_id)

    def status_record(self) -> ReportStatusRecord:
        """Reporter-facing view of this report."""
        return ReportStatusRecord(
            tracking_id=self.tracking_id,
            title=self.title,
            status=self.status,
            date_submitted=self.date_submitted,
            last_updated=self.updated_at.date(),
            message=STATUS_MESSAGES[self.status],
        )
