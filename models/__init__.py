"""
Domain models - single source of truth for all entities.

Design principles:
- Every entity defined once
- Immutable snapshots, updated by copy
- Validation at the boundary
- Backend-agnostic (repository handles persistence)
"""

from .base import BaseEntity, TimestampMixin, Priority
from .task import ComplianceTask, Document, TaskStatus, checklist_progress
from .policy import Policy, PolicyStatus, Acknowledgement, PolicyAcknowledgement, acknowledgement_id
from .report import Report, ReportStatus, ReportStatusRecord
from .profile import Profile, Role, HOME_ROUTES, LOGIN_ROUTE
from .calendar import ComplianceEvent, EventType
from .forms import (
    IncidentType,
    ReportSubmission,
    PolicyDraft,
    LoginCredentials,
    Registration,
)

__all__ = [
    # Base
    "BaseEntity",
    "TimestampMixin",
    "Priority",
    # Tasks
    "ComplianceTask",
    "Document",
    "TaskStatus",
    "checklist_progress",
    # Policies
    "Policy",
    "PolicyStatus",
    "Acknowledgement",
    "PolicyAcknowledgement",
    "acknowledgement_id",
    # Reports
    "Report",
    "ReportStatus",
    "ReportStatusRecord",
    # Profiles
    "Profile",
    "Role",
    "HOME_ROUTES",
    "LOGIN_ROUTE",
    # Calendar
    "ComplianceEvent",
    "EventType",
    # Forms
    "IncidentType",
    "ReportSubmission",
    "PolicyDraft",
    "LoginCredentials",
    "Registration",
]
