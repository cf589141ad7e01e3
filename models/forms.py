"""
Form input models.

Validation at the boundary - these mirror the checks the dashboard
forms apply before anything reaches a collaborator.
"""

import re
from datetime import date
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .profile import Role

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class IncidentType(str, Enum):
    """Incident categories offered on the whistleblowing form."""
    ETHICS = "ethics"
    HARASSMENT = "harassment"
    SAFETY = "safety"
    FINANCIAL = "financial"
    DATA = "data"
    OTHER = "other"


INCIDENT_LABELS = {
    IncidentType.ETHICS: "Ethics Violation",
    IncidentType.HARASSMENT: "Harassment or Discrimination",
    IncidentType.SAFETY: "Safety Concern",
    IncidentType.FINANCIAL: "Financial Misconduct",
    IncidentType.DATA: "Data Privacy Breach",
    IncidentType.OTHER: "Other",
}


class FormModel(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True, extra="ignore")


class ReportSubmission(FormModel):
    """Anonymous whistleblowing report as entered by the reporter."""
    incident_type: IncidentType = Field(alias="incidentType")
    description: str = Field(min_length=10)
    incident_date: Optional[date] = Field(default=None, alias="date")
    location: str = ""
    involved_parties: str = Field(default="", alias="involvedParties")
    evidence_urls: list[str] = Field(default_factory=list, alias="evidence")

    @property
    def title(self) -> str:
        return INCIDENT_LABELS[self.incident_type]


class PolicyDraft(FormModel):
    """New or edited policy from the admin policy form."""
    title: str = Field(min_length=2)
    description: str = Field(min_length=10)
    category: str = Field(min_length=1)
    effective_date: date = Field(alias="effectiveDate")
    acknowledgement_required: bool = Field(default=True, alias="acknowledgementRequired")
    content: str = ""


class LoginCredentials(FormModel):
    email: str
    password: str = Field(min_length=8)

    @field_validator("email")
    @classmethod
    def _valid_email(cls, value: str) -> str:
        if not EMAIL_PATTERN.match(value):
            raise ValueError("Please enter a valid email address")
        return value.lower()


class Registration(LoginCredentials):
    full_name: str = Field(min_length=2, alias="fullName")
    confirm_password: str = Field(alias="confirmPassword")
    role: Role = Role.EMPLOYEE

    @model_validator(mode="after")
    def _passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self
