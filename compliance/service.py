"""
Compliance service - the rule modules wired to persistence for one session.

Every mutation computes the new snapshot first and saves it second. If
the save fails the CollaboratorError propagates and the caller keeps the
state it already had; nothing is half-applied.
"""

from datetime import datetime
from typing import Optional
from pydantic import ValidationError as PydanticValidationError

from models import (
    Acknowledgement,
    ComplianceTask,
    Policy,
    PolicyAcknowledgement,
    PolicyDraft,
    PolicyStatus,
    Report,
    ReportStatus,
    ReportSubmission,
    Role,
)
from repositories.base import Repository
from . import progress
from .errors import AccessDeniedError, NotFoundError, ValidationError, from_pydantic
from .query import CollectionQuery, apply_query
from .reports import ReportSubmitter, RepositoryReportSubmitter
from .session import Session


class ComplianceService:
    """Dashboard operations on behalf of one signed-in user."""

    def __init__(self, repo: Repository, session: Session, submitter: ReportSubmitter = None):
        self.repo = repo
        self.session = session
        self.submitter = submitter or RepositoryReportSubmitter(repo.reports)

    # === Access ===

    def _require(self, *roles: Role) -> None:
        if not self.session.is_active():
            raise AccessDeniedError("Sign in required")
        if roles and self.session.role not in roles:
            raise AccessDeniedError(f"{self.session.role.value} may not do this")

    # === Policies ===

    def policies(self, query: Optional[CollectionQuery] = None) -> list[Policy]:
        """
        Policy list for the signed-in user, filtered and sorted.

        Each policy carries this user's own acknowledgement state.
        """
        self._require()
        acknowledged = {
            a.policy_id for a in self.repo.acknowledgements.for_profile(self.session.user.id)
        }
        rows = [p.as_seen_by(p.id in acknowledged) for p in self.repo.policies.list()]
        return apply_query(rows, query or CollectionQuery(), entity=Policy)

    def acknowledge_policy(self, policy_id: str) -> Policy:
        """Record this employee's acknowledgement. Other employees are unaffected."""
        self._require(Role.EMPLOYEE)
        policy = self._policy(policy_id)
        profile_id = self.session.user.id

        if not policy.acknowledgement_required:
            raise ValidationError(f"Policy {policy.title} does not require acknowledgement")
        if self.repo.acknowledgements.find(policy.id, profile_id) is None:
            self.repo.acknowledgements.save(
                PolicyAcknowledgement(policy_id=policy.id, profile_id=profile_id)
            )
        return policy.as_seen_by(True)

    def create_policy(self, draft: dict | PolicyDraft) -> Policy:
        """Publish a policy from the admin form. New policies start pending."""
        self._require(Role.ADMIN)
        if not isinstance(draft, PolicyDraft):
            try:
                draft = PolicyDraft.model_validate(draft)
            except PydanticValidationError as e:
                raise from_pydantic(e) from e

        policy = Policy(
            title=draft.title,
            description=draft.description,
            category=draft.category,
            effective_date=draft.effective_date,
            status=PolicyStatus.PENDING,
            content=draft.content,
            created_by=self.session.user.id,
            acknowledgement=(
                Acknowledgement.PENDING if draft.acknowledgement_required
                else Acknowledgement.NOT_APPLICABLE
            ),
        )
        return self.repo.policies.save(policy)

    def _policy(self, policy_id: str) -> Policy:
        policy = self.repo.policies.get(policy_id)
        if policy is None:
            raise NotFoundError(f"No policy {policy_id}")
        return policy

    # === Tasks ===

    def tasks(self) -> list[ComplianceTask]:
        """Admins see every task, employees their own."""
        self._require()
        if self.session.role == Role.ADMIN:
            rows = self.repo.tasks.list()
        else:
            rows = self.repo.tasks.for_assignee(self.session.user.id)
        return [progress.recalculate(t) for t in rows]

    def toggle_document(self, task_id: str, name: str, uploaded: bool) -> ComplianceTask:
        self._require()
        task = self._task(task_id)
        updated = progress.toggle_document(task, name, uploaded)
        if updated is task:
            return task
        return self.repo.tasks.save(updated)

    def submit_task(self, task_id: str, now: Optional[datetime] = None) -> ComplianceTask:
        """Raises IncompleteTaskError below 100%; the stored task is not touched."""
        self._require()
        task = self._task(task_id)
        submitted = progress.submit_task(task, now)
        return self.repo.tasks.save(submitted)

    def _task(self, task_id: str) -> ComplianceTask:
        task = self.repo.tasks.get(task_id)
        if task is None:
            raise NotFoundError(f"No task {task_id}")
        if self.session.role != Role.ADMIN and task.assigned_to != self.session.user.id:
            raise AccessDeniedError("Task is assigned to someone else")
        return progress.recalculate(task)

    # === Reports ===

    def reports(self, query: Optional[CollectionQuery] = None) -> list[Report]:
        self._require(Role.ADMIN)
        query = query or CollectionQuery(sort_field="date_submitted", sort_direction="desc")
        return apply_query(self.repo.reports.list(), query, entity=Report)

    def update_report(
        self,
        report_id: str,
        status: Optional[str] = None,
        assigned_to: Optional[str] = None,
        notes: Optional[str] = None,
        resolution: Optional[str] = None,
    ) -> Report:
        """Admin case handling: status, investigator, notes, resolution."""
        self._require(Role.ADMIN)
        report = self.repo.reports.get(report_id)
        if report is None:
            raise NotFoundError(f"No report {report_id}")

        changes = {}
        if status is not None:
            try:
                changes["status"] = ReportStatus(status.strip().lower())
            except ValueError:
                raise ValidationError(f"Unknown report status: {status}")
        if assigned_to is not None:
            changes["assigned_to"] = assigned_to.strip() or None
        if notes is not None:
            changes["investigation_notes"] = notes
        if resolution is not None:
            changes["resolution"] = resolution

        if not changes:
            return report
        return self.repo.reports.save(report.model_copy(update=changes))

    async def submit_report(self, submission: dict | ReportSubmission) -> str:
        """
        Anonymous submission. Needs no session; returns only the tracking ID.
        """
        if not isinstance(submission, ReportSubmission):
            try:
                submission = ReportSubmission.model_validate(submission)
            except PydanticValidationError as e:
                raise from_pydantic(e) from e
        return await self.submitter.submit(submission)
