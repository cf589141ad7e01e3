"""
Repository base classes - define the interface.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar, Optional

from models import (
    Profile,
    Policy,
    PolicyAcknowledgement,
    ComplianceTask,
    Report,
)

T = TypeVar("T")


class BaseRepository(ABC, Generic[T]):
    """Abstract base for entity repositories."""

    @abstractmethod
    def get(self, id: str) -> Optional[T]:
        """Get entity by ID."""
        pass

    @abstractmethod
    def save(self, entity: T) -> T:
        """Save entity. Returns the stored snapshot (timestamps refreshed)."""
        pass

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Delete entity by ID. Returns True if deleted."""
        pass

    @abstractmethod
    def list(self) -> list[T]:
        """List all entities."""
        pass

    @abstractmethod
    def exists(self, id: str) -> bool:
        """Check if entity exists."""
        pass


class ProfileRepository(BaseRepository[Profile]):
    """Repository for user profiles."""

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[Profile]:
        """Find a profile by email (case-insensitive)."""
        pass


class PolicyRepository(BaseRepository[Policy]):
    """Repository for policies."""


class AcknowledgementRepository(BaseRepository[PolicyAcknowledgement]):
    """Repository for per-employee policy acknowledgements."""

    @abstractmethod
    def find(self, policy_id: str, profile_id: str) -> Optional[PolicyAcknowledgement]:
        """This employee's acknowledgement of this policy, if recorded."""
        pass

    @abstractmethod
    def for_profile(self, profile_id: str) -> list[PolicyAcknowledgement]:
        """Everything one employee has acknowledged."""
        pass


class TaskRepository(BaseRepository[ComplianceTask]):
    """Repository for compliance tasks."""

    @abstractmethod
    def for_assignee(self, profile_id: str) -> list[ComplianceTask]:
        """Tasks assigned to one profile."""
        pass


class ReportRepository(BaseRepository[Report]):
    """Repository for whistleblowing reports."""

    @abstractmethod
    def get_by_tracking_id(self, tracking_id: str) -> Optional[Report]:
        """Exact, case-sensitive tracking ID match."""
        pass


class Repository:
    """
    Aggregate repository - provides access to all entity repositories.

    This is what consumers use. Backend implementations provide
    concrete versions of each sub-repository.
    """

    @property
    @abstractmethod
    def profiles(self) -> ProfileRepository:
        """Access profile repository."""
        pass

    @property
    @abstractmethod
    def policies(self) -> PolicyRepository:
        """Access policy repository."""
        pass

    @property
    @abstractmethod
    def acknowledgements(self) -> AcknowledgementRepository:
        """Access policy acknowledgement repository."""
        pass

    @property
    @abstractmethod
    def tasks(self) -> TaskRepository:
        """Access compliance task repository."""
        pass

    @property
    @abstractmethod
    def reports(self) -> ReportRepository:
        """Access whistleblowing report repository."""
        pass
