"""
Anonymous report submission.

The reporter gets back a tracking ID and nothing else. Tracking IDs are
random and have no relation to the internal report id.
"""

import asyncio
import secrets
from abc import ABC, abstractmethod
from datetime import date

from models import Report, ReportStatus, ReportSubmission
from .errors import CollaboratorError

TRACKING_PREFIX = "TRK"
MAX_ATTEMPTS = 5


def generate_tracking_id() -> str:
    """TRK-XXXX-XXXX with random uppercase hex groups."""
    token = secrets.token_hex(4).upper()
    return f"{TRACKING_PREFIX}-{token[:4]}-{token[4:]}"


class ReportSubmitter(ABC):
    """Accepts a new report and hands back its tracking ID."""

    @abstractmethod
    async def submit(self, submission: ReportSubmission) -> str:
        pass


class RepositoryReportSubmitter(ReportSubmitter):
    """Stores submissions through the report repository."""

    def __init__(self, reports, id_factory=generate_tracking_id):
        self._reports = reports
        self._id_factory = id_factory

    def _unused_tracking_id(self) -> str:
        for _ in range(MAX_ATTEMPTS):
            candidate = self._id_factory()
            if self._reports.get_by_tracking_id(candidate) is None:
                return candidate
        raise CollaboratorError("Could not allocate a unique tracking ID")

    def _store(self, submission: ReportSubmission) -> str:
        tracking_id = self._unused_tracking_id()
        details = [submission.description]
        if submission.location:
            details.append(f"Location: {submission.location}")
        if submission.involved_parties:
            details.append(f"Involved parties: {submission.involved_parties}")
        if submission.incident_date:
            details.append(f"Incident date: {submission.incident_date.isoformat()}")

        report = Report(
            title=submission.title,
            category=submission.incident_type.value,
            date_submitted=date.today(),
            status=ReportStatus.PENDING,
            tracking_id=tracking_id,
            description="\n".join(details),
            evidence_urls=tuple(submission.evidence_urls),
        )
        self._reports.save(report)
        return tracking_id

    async def submit(self, submission: ReportSubmission) -> str:
        return await asyncio.to_thread(self._store, submission)
