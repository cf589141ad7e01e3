"""
Policy models.
"""

import uuid
from datetime import date, datetime
from enum import Enum
from typing import ClassVar, Optional
from pydantic import Field, field_validator, model_validator

from .base import BaseEntity, lower_enum_value


class PolicyStatus(str, Enum):
    """Publication state of a policy."""
    ACTIVE = "active"
    PENDING = "pending"
    EXPIRED = "expired"


class Acknowledgement(str, Enum):
    """
    Whether an employee's acknowledgement is needed and given.

    Three explicit states instead of an optional boolean, so that
    "nothing required" and "required but not yet given" never look alike.
    """
    NOT_APPLICABLE = "not_applicable"
    PENDING = "pending"
    ACKNOWLEDGED = "acknowledged"


# Flag pair used by the dashboard frontend before the three states existed
LEGACY_ACK_KEYS = {"acknowledgementRequired", "acknowledgement_required", "acknowledged"}


class Policy(BaseEntity):
    """
    A company policy as shown to a viewer.

    The stored row is shared by everyone, so there `acknowledgement` only
    says whether acknowledgement is required (PENDING or NOT_APPLICABLE).
    ACKNOWLEDGED appears on the copy made for one viewer by `as_seen_by`.
    """

    SORT_FIELDS: ClassVar[tuple[str, ...]] = ("title", "category", "effective_date", "last_updated")

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str
    category: str = ""
    effective_date: date = Field(alias="effectiveDate")
    status: PolicyStatus = PolicyStatus.PENDING
    description: str = ""
    last_updated: date = Field(default_factory=date.today, alias="lastUpdated")
    acknowledgement: Acknowledgement = Acknowledgement.PENDING

    # Backend columns
    content: str = ""
    created_by: Optional[str] = Field(default=None, alias="createdBy")

    @model_validator(mode="before")
    @classmethod
    def _legacy_acknowledgement(cls, data):
        """Map {acknowledgementRequired, acknowledged} onto the three states."""
        if not isinstance(data, dict) or "acknowledgement" in data:
            return data
        if not LEGACY_ACK_KEYS & data.keys():
            return data

        data = dict(data)
        required = data.pop("acknowledgementRequired", None)
        required = data.pop("acknowledgement_required", required)
        if required is None:
            required = True
        acknowledged = data.pop("acknowledged", None)
        if not required:
            data["acknowledgement"] = Acknowledgement.NOT_APPLICABLE
        elif acknowledged:
            data["acknowledgement"] = Acknowledgement.ACKNOWLEDGED
        else:
            data["acknowledgement"] = Acknowledgement.PENDING
        return data

    @field_validator("status", "acknowledgement", mode="before")
    @classmethod
    def _lowercase_enums(cls, value):
        return lower_enum_value(value)

    @property
    def acknowledgement_required(self) -> bool:
        return self.acknowledgement != Acknowledgement.NOT_APPLICABLE

    @property
    def acknowledged(self) -> bool:
        return self.acknowledgement == Acknowledgement.ACKNOWLEDGED

    @property
    def action_required(self) -> bool:
        """Active, needs acknowledgement, not yet given."""
        return self.status == PolicyStatus.ACTIVE and self.acknowledgement == Acknowledgement.PENDING

    @property
    def badge(self) -> str:
        """Status label for list views."""
        if self.status == PolicyStatus.ACTIVE:
            return "Action Required" if self.action_required else "Active"
        if self.status == PolicyStatus.PENDING:
            return "Pending"
        return "Expired"

    @property
    def search_values(self) -> tuple[str, ...]:
        return (self.title, self.description)

    def as_seen_by(self, acknowledged: bool) -> "Policy":
        """This policy with one viewer's acknowledgement filled in."""
        if not self.acknowledgement_required:
            return self
        state = Acknowledgement.ACKNOWLEDGED if acknowledged else Acknowledgement.PENDING
        if state == self.acknowledgement:
            return self
        return self.model_copy(update={"acknowledgement": state})

    def shared(self) -> "Policy":
        """The row as stored for everyone: required or not, nobody's answer."""
        return self.as_seen_by(False)


def acknowledgement_id(policy_id: str, profile_id: str) -> str:
    return f"{policy_id}--{profile_id}"


class PolicyAcknowledgement(BaseEntity):
    """One employee's recorded confirmation of one policy."""

    id: str = ""
    policy_id: str = Field(alias="policyId")
    profile_id: str = Field(alias="profileId")
    acknowledged_at: datetime = Field(default_factory=datetime.now, alias="acknowledgedAt")

    @model_validator(mode="before")
    @classmethod
    def _key_from_pair(cls, data):
        if isinstance(data, dict) and not data.get("id"):
            policy_id = data.get("policy_id", data.get("policyId"))
            profile_id = data.get("profile_id", data.get("profileId"))
            if policy_id and profile_id:
                data = dict(data)
                data["id"] = acknowledgement_id(policy_id, profile_id)
        return data
