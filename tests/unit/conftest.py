"""
Unit test fixtures.

All unit tests should be:
- Fast (< 100ms)
- Isolated (no external dependencies)
- Deterministic (same result every time)
"""

import pytest
from datetime import datetime

from models import ComplianceTask, Document, Profile, Role


@pytest.fixture
def task_data():
    """Raw task data dict, camelCase as the frontend sends it."""
    return {
        "id": "task-1",
        "title": "Annual Data Privacy Certification",
        "description": "Documentation review and quiz.",
        "dueDate": datetime(2024, 1, 22, 9, 0, 0),
        "status": "in-progress",
        "priority": "high",
        "category": "Data Privacy",
        "progress": 50,
        "documents": [
            {"name": "Privacy Policy Acknowledgment", "required": True, "uploaded": True},
            {"name": "Data Handling Certification", "required": True, "uploaded": False},
            {"name": "Ethics Quiz Results", "required": False, "uploaded": False},
        ],
    }


@pytest.fixture
def task(task_data):
    return ComplianceTask.model_validate(task_data)


def make_task(documents, status="in-progress", progress=None, **kwargs):
    """Task with the given (required, uploaded) pairs."""
    docs = tuple(
        Document(name=f"doc-{i}", required=required, uploaded=uploaded)
        for i, (required, uploaded) in enumerate(documents)
    )
    fields = {
        "id": "t",
        "title": "Task",
        "due_date": datetime(2024, 2, 1),
        "status": status,
        "documents": docs,
    }
    fields.update(kwargs)
    if progress is not None:
        fields["progress"] = progress
    return ComplianceTask(**fields)


@pytest.fixture
def task_factory():
    return make_task


@pytest.fixture
def policy_rows():
    """Raw policy rows in the frontend's legacy shape."""
    return [
        {"id": "1", "title": "Data Privacy Policy", "category": "Information Security",
         "effectiveDate": "2023-05-15", "status": "active",
         "description": "Handling customer data under GDPR.", "lastUpdated": "2023-04-01",
         "acknowledgementRequired": True, "acknowledged": True},
        {"id": "2", "title": "Anti-Harassment Policy", "category": "HR",
         "effectiveDate": "2023-03-10", "status": "active",
         "description": "Preventing workplace harassment.", "lastUpdated": "2023-02-15",
         "acknowledgementRequired": True, "acknowledged": False},
        {"id": "3", "title": "Information Security Policy", "category": "Information Security",
         "effectiveDate": "2023-06-01", "status": "pending",
         "description": "Securing company information assets.", "lastUpdated": "2023-05-20",
         "acknowledgementRequired": True},
        {"id": "4", "title": "code of Conduct", "category": "Ethics",
         "effectiveDate": "2022-12-01", "status": "active",
         "description": "Standards of ethical business conduct.", "lastUpdated": "2022-11-15",
         "acknowledgementRequired": False},
        {"id": "5", "title": "Remote Work Policy", "category": "HR",
         "effectiveDate": "2023-01-15", "status": "expired",
         "description": "Working remotely, security expectations.", "lastUpdated": "2022-12-20",
         "acknowledgementRequired": True, "acknowledged": True},
    ]


@pytest.fixture
def admin():
    return Profile(id="admin-1", full_name="Sarah Johnson", email="Admin@Example.com", role=Role.ADMIN)


@pytest.fixture
def employee():
    return Profile(id="emp-1", full_name="John Doe", email="john@example.com", role=Role.EMPLOYEE)
