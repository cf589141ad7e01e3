"""
Repository layer - persistence behind one interface.

    from repositories import get_repository

    repo = get_repository()
    report = repo.reports.get_by_tracking_id("TRK-8F72-9D3E")
    repo.tasks.save(task)

Only the JSON file backend ships; `configure_backend` exists so a hosted
backend can be slotted in without touching the compliance core.
"""

from .base import Repository
from .json_backend import JsonRepository

BACKENDS = {
    "json": JsonRepository,
}

_backend: str = "json"
_options: dict = {}
_instance: Repository = None


def get_repository() -> Repository:
    """Shared repository for the configured backend."""
    global _instance

    if _instance is None:
        if _backend not in BACKENDS:
            raise ValueError(f"Unknown backend: {_backend}")
        _instance = BACKENDS[_backend](**_options)

    return _instance


def configure_backend(backend: str, **kwargs) -> None:
    """Select a backend; the next get_repository() builds it."""
    global _backend, _options, _instance
    _backend = backend
    _options = kwargs
    _instance = None


__all__ = ["get_repository", "configure_backend", "Repository", "JsonRepository", "BACKENDS"]
