"""
Compliance rule core.

- progress:  task checklist -> progress percent and status
- query:     filter/sort for policy and report lists
- tracking:  reporter-facing tracking ID lookup
- session:   explicit sessions and role-gated routing
- service:   the above wired to a repository for one session
"""

from .errors import (
    ComplianceError,
    ValidationError,
    NotFoundError,
    IncompleteTaskError,
    CollaboratorError,
    AccessDeniedError,
)
from .progress import compute_progress, toggle_document, submit_task, recalculate
from .query import CollectionQuery, apply_query, filter_items, sort_items, category_options
from .tracking import TrackingLookup, TrackingResult, ReportStatusSource, StaticStatusSource
from .session import (
    Session,
    SessionManager,
    AuthProvider,
    RepositoryAuthProvider,
    AccessDecision,
    resolve_access,
)

__all__ = [
    # Errors
    "ComplianceError",
    "ValidationError",
    "NotFoundError",
    "IncompleteTaskError",
    "CollaboratorError",
    "AccessDeniedError",
    # Progress
    "compute_progress",
    "toggle_document",
    "submit_task",
    "recalculate",
    # Query
    "CollectionQuery",
    "apply_query",
    "filter_items",
    "sort_items",
    "category_options",
    # Tracking
    "TrackingLookup",
    "TrackingResult",
    "ReportStatusSource",
    "StaticStatusSource",
    # Session
    "Session",
    "SessionManager",
    "AuthProvider",
    "RepositoryAuthProvider",
    "AccessDecision",
    "resolve_access",
]
