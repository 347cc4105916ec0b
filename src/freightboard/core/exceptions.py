"""
Exception types raised by the freight board.

Callers catch these at the call site and show a generic message; the types
only exist so the message can be chosen.
"""

from typing import Optional


class FreightBoardError(Exception):
    """Base exception for all freight board errors."""

    def __init__(self, message: str, details: Optional[dict] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class StoreError(FreightBoardError):
    """A call to the remote table API failed."""

    def __init__(
        self,
        table: str,
        operation: str,
        cause: Optional[Exception] = None,
        code: Optional[str] = None,
    ) -> None:
        super().__init__(
            f"{operation} on '{table}' failed",
            details={"table": table, "operation": operation, "cause": str(cause) if cause else None},
        )
        self.table = table
        self.operation = operation
        self.cause = cause
        self.code = code


class RecordNotFoundError(FreightBoardError):
    """No row with the given id exists."""

    def __init__(self, table: str, record_id: str) -> None:
        super().__init__(f"No record '{record_id}' in '{table}'", details={"table": table, "id": record_id})
        self.table = table
        self.record_id = record_id


class DriverHasFreightsError(FreightBoardError):
    """A driver cannot be deleted while freights still reference them."""

    def __init__(self, driver_id: str) -> None:
        super().__init__(
            "This driver has linked freights and cannot be deleted. Delete the freights first.",
            details={"driver_id": driver_id},
        )
        self.driver_id = driver_id
