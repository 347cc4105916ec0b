"""
Base service class for all freight board screens.

Provides common functionality:
- Config and store wiring
- Structured logging
- Operation tracking for writes
"""

import json
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional

import structlog
from pydantic import BaseModel

from freightboard.core.config import ConfigManager, PricingConfig, get_config
from freightboard.data.store import TableStore, get_store


class OperationRecord(BaseModel):
    """
    A write performed by a service.

    Kept so a session can be audited after the fact; nothing is rolled back.
    """

    timestamp: datetime
    service_name: str
    operation: str
    table: str
    record_id: Optional[str] = None
    input_data: dict[str, Any]
    execution_time_seconds: float


class BaseService(ABC):
    """
    Base class for all freight board services.

    Each service backs one screen: it fetches rows in full, builds the
    screen's view in execute(), and issues single-row writes.
    """

    def __init__(
        self,
        service_name: str,
        store: Optional[TableStore] = None,
        config_manager: Optional[ConfigManager] = None,
        logger: Optional[structlog.BoundLogger] = None,
    ) -> None:
        """
        Initialize the base service.

        Args:
            service_name: Name of the service (e.g., "freights", "drivers")
            store: Optional table store (defaults to the global Supabase store)
            config_manager: Optional config manager (defaults to global instance)
            logger: Optional structured logger
        """
        self.service_name = service_name
        self.config_manager = config_manager or get_config()
        self.store = store or get_store(self.config_manager)
        self.logger = logger or structlog.get_logger(service_name=service_name)

        self.pricing: PricingConfig = self.config_manager.get_pricing()

        # Write history (for debugging and audit)
        self.operation_history: list[OperationRecord] = []

    def record_operation(
        self,
        operation: str,
        table: str,
        record_id: Optional[str],
        input_data: dict[str, Any],
        started_at: float,
        finished_at: float,
    ) -> OperationRecord:
        """
        Record a completed write.

        Args:
            operation: Operation name (e.g. "create", "status_change")
            table: Remote table written
            record_id: Id of the affected row
            input_data: Payload sent
            started_at: time() before the write
            finished_at: time() after the write
        """
        record = OperationRecord(
            timestamp=datetime.now(),
            service_name=self.service_name,
            operation=operation,
            table=table,
            record_id=record_id,
            input_data=input_data,
            execution_time_seconds=finished_at - started_at,
        )
        self.operation_history.append(record)
        self.logger.info(
            "operation_recorded",
            operation=operation,
            table=table,
            record_id=record_id,
            execution_time=record.execution_time_seconds,
        )
        return record

    def export_history(self, filepath: str) -> None:
        """
        Export operation history to JSON file.

        Args:
            filepath: Path to output JSON file
        """
        with open(filepath, "w", encoding="utf-8") as f:
            records = [r.model_dump(mode="json") for r in self.operation_history]
            json.dump(records, f, indent=2, default=str)

        self.logger.info("history_exported", filepath=filepath, count=len(self.operation_history))

    @abstractmethod
    def execute(self, *args: Any, **kwargs: Any) -> Any:
        """
        Build the service's screen view.

        Each service must implement this method with its specific logic.

        Returns:
            Service-specific view model
        """
        pass

    def __repr__(self) -> str:
        """String representation of the service."""
        return f"{self.__class__.__name__}(service_name='{self.service_name}')"
