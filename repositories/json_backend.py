"""
JSON file backend - stores each row as one JSON file.

Directory structure:
    {data_dir}/
        profiles/{id}.json
        policies/{id}.json
        acknowledgements/{policy_id}--{profile_id}.json
        tasks/{id}.json
        reports/{id}.json
"""

import json
import threading
from pathlib import Path
from typing import Generic, Optional, TypeVar

from pydantic import ValidationError as PydanticValidationError

import config
from compliance.errors import CollaboratorError
from models import Profile, Policy, PolicyAcknowledgement, ComplianceTask, Report, acknowledgement_id
from .base import (
    Repository,
    ProfileRepository,
    PolicyRepository,
    AcknowledgementRepository,
    TaskRepository,
    ReportRepository,
)

T = TypeVar("T")


class WriteQueue:
    """Thread-safe write serialization."""

    def __init__(self):
        self._lock = threading.Lock()

    def write_json(self, path: Path, data: dict) -> None:
        """Atomic JSON write."""
        with self._lock:
            temp = path.with_suffix(".json.tmp")
            with open(temp, "w") as f:
                json.dump(data, f, indent=2, default=str)
            temp.replace(path)


_write_queue = WriteQueue()


class JsonEntityRepository(Generic[T]):
    """One directory per collection, one file per row."""

    collection: str = ""
    model: type = None

    def __init__(self, base_path: Path = None):
        self._base_path = base_path or config.DATA_DIR

    @property
    def _dir(self) -> Path:
        return self._base_path / self.collection

    def _file(self, id: str) -> Path:
        return self._dir / f"{id}.json"

    def _load(self, path: Path) -> Optional[T]:
        try:
            with open(path) as f:
                data = json.load(f)
            return self.model.model_validate(data)
        except (json.JSONDecodeError, PydanticValidationError) as e:
            print(f"[WARN] Corrupt {self.collection} row {path.name}: {e}")
            return None
        except OSError as e:
            raise CollaboratorError(f"Could not read {path}: {e}") from e

    def get(self, id: str) -> Optional[T]:
        path = self._file(id)
        if not path.exists():
            return None
        return self._load(path)

    def save(self, entity: T) -> T:
        stored = entity.touched()
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            _write_queue.write_json(self._file(stored.id), stored.model_dump(mode="json"))
        except OSError as e:
            raise CollaboratorError(f"Could not save {self.collection} {stored.id}: {e}") from e
        return stored

    def delete(self, id: str) -> bool:
        path = self._file(id)
        if not path.exists():
            return False
        try:
            path.unlink()
        except OSError as e:
            raise CollaboratorError(f"Could not delete {self.collection} {id}: {e}") from e
        return True

    def list(self) -> list[T]:
        if not self._dir.exists():
            return []

        rows = []
        for path in sorted(self._dir.glob("*.json")):
            row = self._load(path)
            if row is not None:
                rows.append(row)

        return sorted(rows, key=lambda r: r.created_at)

    def exists(self, id: str) -> bool:
        return self._file(id).exists()


class JsonProfileRepository(JsonEntityRepository[Profile], ProfileRepository):
    """JSON file implementation of profile repository."""
    collection = "profiles"
    model = Profile

    def get_by_email(self, email: str) -> Optional[Profile]:
        wanted = email.strip().lower()
        for profile in self.list():
            if profile.email == wanted:
                return profile
        return None


class JsonPolicyRepository(JsonEntityRepository[Policy], PolicyRepository):
    """JSON file implementation of policy repository."""
    collection = "policies"
    model = Policy


class JsonAcknowledgementRepository(JsonEntityRepository[PolicyAcknowledgement], AcknowledgementRepository):
    """JSON file implementation of acknowledgement repository."""
    collection = "acknowledgements"
    model = PolicyAcknowledgement

    def find(self, policy_id: str, profile_id: str) -> Optional[PolicyAcknowledgement]:
        return self.get(acknowledgement_id(policy_id, profile_id))

    def for_profile(self, profile_id: str) -> list[PolicyAcknowledgement]:
        return [a for a in self.list() if a.profile_id == profile_id]


class JsonTaskRepository(JsonEntityRepository[ComplianceTask], TaskRepository):
    """JSON file implementation of task repository."""
    collection = "tasks"
    model = ComplianceTask

    def for_assignee(self, profile_id: str) -> list[ComplianceTask]:
        return [t for t in self.list() if t.assigned_to == profile_id]


class JsonReportRepository(JsonEntityRepository[Report], ReportRepository):
    """JSON file implementation of report repository."""
    collection = "reports"
    model = Report

    def get_by_tracking_id(self, tracking_id: str) -> Optional[Report]:
        for report in self.list():
            if report.tracking_id == tracking_id:
                return report
        return None


class JsonRepository(Repository):
    """JSON file backend implementation."""

    def __init__(self, base_path: Path = None):
        self._base_path = base_path or config.DATA_DIR
        self._profiles = JsonProfileRepository(self._base_path)
        self._policies = JsonPolicyRepository(self._base_path)
        self._acknowledgements = JsonAcknowledgementRepository(self._base_path)
        self._tasks = JsonTaskRepository(self._base_path)
        self._reports = JsonReportRepository(self._base_path)

    @property
    def profiles(self) -> ProfileRepository:
        return self._profiles

    @property
    def policies(self) -> PolicyRepository:
        return self._policies

    @property
    def acknowledgements(self) -> AcknowledgementRepository:
        return self._acknowledgements

    @property
    def tasks(self) -> TaskRepository:
        return self._tasks

    @property
    def reports(self) -> ReportRepository:
        return self._reports
