"""
Compliance task models - a task and its document checklist.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Iterable, Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from .base import BaseEntity, Priority, lower_enum_value


class TaskStatus(str, Enum):
    """Lifecycle of a compliance task."""
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    OVERDUE = "overdue"


class Document(BaseModel):
    """A checklist entry. Only meaningful inside its task."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str
    required: bool = True
    uploaded: bool = False


def checklist_progress(documents: Iterable[Document]) -> int:
    """Percent of required documents uploaded, halves rounded up. No required documents means 100."""
    required = 0
    uploaded = 0
    for doc in documents:
        if doc.required:
            required += 1
            if doc.uploaded:
                uploaded += 1

    if required == 0:
        return 100
    # round(uploaded / required * 100) with halves rounded up, in integers
    return (uploaded * 200 + required) // (2 * required)


class ComplianceTask(BaseEntity):
    """
    A unit of required employee action.

    progress is derived from the document checklist whenever a task is
    built or loaded; any progress value in the input is ignored. Use
    compliance.progress to change documents.
    """
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str
    description: str = ""
    due_date: datetime = Field(alias="dueDate")
    status: TaskStatus = TaskStatus.PENDING
    priority: Priority = Priority.MEDIUM
    category: str = ""
    progress: int = Field(default=0, ge=0, le=100)
    documents: tuple[Document, ...] = ()

    # Backend columns
    assigned_to: Optional[str] = Field(default=None, alias="assignedTo")
    policy_id: Optional[str] = Field(default=None, alias="policyId")
    submitted_at: Optional[datetime] = Field(default=None, alias="submittedAt")

    @model_validator(mode="before")
    @classmethod
    def _progress_from_checklist(cls, data):
        if not isinstance(data, dict):
            return data
        try:
            documents = [
                doc if isinstance(doc, Document) else Document.model_validate(doc)
                for doc in data.get("documents") or ()
            ]
        except (PydanticValidationError, TypeError):
            return data  # Field validation reports the bad document

        data = dict(data)
        data["progress"] = checklist_progress(documents)
        return data

    @field_validator("status", "priority", mode="before")
    @classmethod
    def _lowercase_enums(cls, value):
        return lower_enum_value(value)

    @field_validator("documents", mode="before")
    @classmethod
    def _documents_or_empty(cls, value):
        return () if value is None else value

    @field_validator("documents")
    @classmethod
    def _unique_document_names(cls, documents):
        seen = set()
        for doc in documents:
            if doc.name in seen:
                raise ValueError(f"Duplicate document name: {doc.name}")
            seen.add(doc.name)
        return documents

    @property
    def is_submittable(self) -> bool:
        return checklist_progress(self.documents) == 100

    @property
    def is_submitted(self) -> bool:
        return self.submitted_at is not None

    @property
    def is_open(self) -> bool:
        """Still needs work from the assignee."""
        return self.status != TaskStatus.COMPLETED

    def document(self, name: str) -> Optional[Document]:
        """Find a document by exact name."""
        for doc in self.documents:
            if doc.name == name:
                return doc
        return None

    def days_until_due(self, now: datetime) -> int:
        """Whole days until due date (negative once past due)."""
        return (self.due_date.date() - now.date()).days
