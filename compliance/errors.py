"""
Error taxonomy.

Every error here is recoverable at the interaction level: the caller shows
the message and the user retries. Nothing is retried automatically.
"""

from pydantic import ValidationError as PydanticValidationError


class ComplianceError(Exception):
    """Base for all errors raised by the compliance core."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ComplianceError):
    """Invalid caller input (empty tracking ID, bad form fields...)."""


class NotFoundError(ComplianceError):
    """Nothing matched. An expected outcome, shown as an empty state."""


class IncompleteTaskError(ComplianceError):
    """Task submitted before every required document was uploaded."""

    def __init__(self, task_id: str, progress: int):
        super().__init__(f"Task {task_id} is only {progress}% complete")
        self.task_id = task_id
        self.progress = progress


class CollaboratorError(ComplianceError):
    """Persistence or auth backend failed. In-memory state is left as it was."""


class AccessDeniedError(ComplianceError):
    """Session role may not perform this action."""


def from_pydantic(error: PydanticValidationError) -> ValidationError:
    """First field error as a user-facing ValidationError."""
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "Invalid input")
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return ValidationError(f"{location}: {message}" if location else message)
