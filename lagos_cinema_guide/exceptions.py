"""Failure taxonomy for listings queries."""

from typing import Any
from typing import Optional


class CinemaGuideError(Exception):
    """Base exception for the cinema guide."""
    pass


class FetchError(CinemaGuideError):
    """The listings database could not be opened or queried."""

    def __init__(self, operation: str, message: str) -> None:
        self.operation = operation
        super().__init__(f"{operation}: {message}")


class RecordNotFoundError(FetchError):
    """Exactly one row was expected but zero or several came back."""

    def __init__(self, entity: str, record_id: Any, count: int, operation: Optional[str] = None) -> None:
        self.entity = entity
        self.record_id = record_id
        self.count = count
        if count == 0:
            message = f"no {entity} with id {record_id}"
        else:
            message = f"expected one {entity} with id {record_id}, got {count}"
        super().__init__(operation or f"get_{entity}_by_id", message)
