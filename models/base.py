"""
Base entity classes.
"""

from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field, ConfigDict


class TimestampMixin(BaseModel):
    """Mixin for created/updated timestamps."""
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class BaseEntity(TimestampMixin):
    """
    Base for all persistent entities.

    Entities are immutable snapshots. Changes are made on a copy
    (model_copy) and handed back to whoever owns the state.
    Timestamps belong to the repository, not to the rule code.
    """
    model_config = ConfigDict(
        frozen=True,
        extra="ignore",  # Ignore unknown columns from the backend
        str_strip_whitespace=True,
        populate_by_name=True,
        use_enum_values=False,
    )

    def touched(self):
        """Copy with the updated_at timestamp refreshed."""
        return self.model_copy(update={"updated_at": datetime.now()})


class Priority(str, Enum):
    """Priority shared by tasks and reports."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def lower_enum_value(value):
    """Accept 'Pending' / 'HIGH' style values from older frontends."""
    if isinstance(value, str):
        return value.strip().lower()
    return value
