"""
Task progress calculator.

Progress is the share of required documents that are uploaded, rounded
half up. Reaching 100 is the only automatic status change: a completed
task is never moved back when a document is later un-ticked.
"""

from datetime import datetime
from typing import Iterable, Optional

from models import ComplianceTask, Document, TaskStatus, checklist_progress
from .errors import IncompleteTaskError


def compute_progress(documents: Iterable[Document]) -> int:
    """Percent of required documents uploaded. No required documents means 100."""
    return checklist_progress(documents)


def _status_for(progress: int, current: TaskStatus) -> TaskStatus:
    return TaskStatus.COMPLETED if progress == 100 else current


def recalculate(task: ComplianceTask) -> ComplianceTask:
    """Bring a stored task's progress and status back in line with its checklist."""
    progress = compute_progress(task.documents)
    if progress == task.progress and _status_for(progress, task.status) == task.status:
        return task
    return task.model_copy(update={
        "progress": progress,
        "status": _status_for(progress, task.status),
    })


def toggle_document(task: ComplianceTask, name: str, uploaded: bool) -> ComplianceTask:
    """
    Set one document's uploaded flag and recompute progress and status.

    Args:
        task: Current task snapshot (not modified)
        name: Exact document name
        uploaded: New flag value

    Returns:
        Updated copy. The same task when no document has that name.
    """
    if task.document(name) is None:
        print(f"[WARN] Task {task.id} has no document named {name!r}, nothing toggled")
        return task

    documents = tuple(
        doc.model_copy(update={"uploaded": uploaded}) if doc.name == name else doc
        for doc in task.documents
    )
    progress = compute_progress(documents)

    return task.model_copy(update={
        "documents": documents,
        "progress": progress,
        "status": _status_for(progress, task.status),
    })


def submit_task(task: ComplianceTask, now: Optional[datetime] = None) -> ComplianceTask:
    """
    Final submission of a task.

    Eligibility is decided by the checklist itself, not by the progress
    value carried on the snapshot.

    Raises:
        IncompleteTaskError: progress is below 100. The task is untouched.
    """
    progress = compute_progress(task.documents)
    if progress != 100:
        raise IncompleteTaskError(task.id, progress)

    return task.model_copy(update={
        "progress": progress,
        "status": TaskStatus.COMPLETED,
        "submitted_at": now or datetime.now(),
    })
