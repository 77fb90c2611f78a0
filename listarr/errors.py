"""
Exception hierarchy for Listarr.

Lookup, add and reconciliation failures are converted into SyncOutcome
values by the orchestrator; only store and configuration errors reach the
command line.
"""

from typing import Any, Optional


class ListarrError(Exception):
    """Base class for all Listarr errors."""
    pass


class NotFoundError(ListarrError):
    """Raised when a catalog lookup yields nothing."""
    pass


class AlreadyExistsError(ListarrError):
    """Raised when a target rejects an add because the title is present."""

    def __init__(self, message: str, record: Optional[Any] = None):
        super().__init__(message)
        self.record = record


class UnsupportedError(ListarrError):
    """Raised when a source/target pairing has no defined mapping."""
    pass


class TransportError(ListarrError):
    """Network or HTTP failure talking to an external service."""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class ConfigurationError(ListarrError):
    """Raised when a collaborator is required but not configured."""
    pass


class ListStoreError(ListarrError):
    """Raised for unknown lists, duplicate names and bad item indexes."""
    pass
