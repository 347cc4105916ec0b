"""
Driver Service - driver registration and availability.

This service:
- Lists drivers with their trip counts
- Registers, edits and removes drivers
- Records ratings
- Sets availability when a freight changes state
"""

from time import time
from typing import Any

from freightboard.core.exceptions import DriverHasFreightsError, StoreError
from freightboard.data.models.driver import Driver, DriverInput, DriverStatus
from freightboard.data.store import DRIVERS_TABLE, FOREIGN_KEY_VIOLATION
from freightboard.services.base import BaseService


class DriverService(BaseService):
    """Driver Service backing the drivers screen."""

    def __init__(self, **kwargs: Any) -> None:
        """Initialize the driver service."""
        super().__init__(service_name="drivers", **kwargs)

    def execute(self, search: str = "") -> list[Driver]:
        """Drivers screen: newest first, narrowed by name/plate search."""
        return [d for d in self.list_drivers() if d.matches(search)]

    def list_drivers(self) -> list[Driver]:
        """All drivers, newest first, with trip counts."""
        rows = self.store.select(
            DRIVERS_TABLE,
            columns="*, freights(count)",
            order_by="created_at",
            descending=True,
        )
        return [Driver.from_row(row) for row in rows]

    def list_options(self) -> list[tuple[str, str]]:
        """(id, name) pairs ordered by name for pickers."""
        rows = self.store.select(DRIVERS_TABLE, columns="id, name", order_by="name")
        return [(row["id"], row["name"]) for row in rows]

    def get(self, driver_id: str) -> Driver:
        return Driver.from_row(self.store.get(DRIVERS_TABLE, driver_id))

    def create(self, data: DriverInput) -> Driver:
        """Register a new driver."""
        start_time = time()
        payload = data.to_row()
        row = self.store.insert(DRIVERS_TABLE, payload)
        driver = Driver.from_row(row)
        self.logger.info("driver_created", driver_id=driver.id, name=driver.name)
        self.record_operation("create", DRIVERS_TABLE, driver.id, payload, start_time, time())
        return driver

    def update(self, driver_id: str, data: DriverInput) -> Driver:
        """Overwrite a driver's form fields."""
        start_time = time()
        payload = data.to_row()
        row = self.store.update(DRIVERS_TABLE, driver_id, payload)
        self.logger.info("driver_updated", driver_id=driver_id)
        self.record_operation("update", DRIVERS_TABLE, driver_id, payload, start_time, time())
        return Driver.from_row(row)

    def delete(self, driver_id: str) -> None:
        """
        Remove a driver.

        Raises:
            DriverHasFreightsError: If freights still reference the driver
        """
        start_time = time()
        try:
            self.store.delete(DRIVERS_TABLE, driver_id)
        except StoreError as e:
            if e.code == FOREIGN_KEY_VIOLATION:
                self.logger.warning("driver_delete_blocked", driver_id=driver_id)
                raise DriverHasFreightsError(driver_id) from e
            raise
        self.logger.info("driver_deleted", driver_id=driver_id)
        self.record_operation("delete", DRIVERS_TABLE, driver_id, {}, start_time, time())

    def set_rating(self, driver_id: str, rating: float) -> Driver:
        """Record a 0-5 star rating."""
        if not 0 <= rating <= 5:
            raise ValueError("rating must be between 0 and 5")
        start_time = time()
        row = self.store.update(DRIVERS_TABLE, driver_id, {"rating": rating})
        self.logger.info("driver_rated", driver_id=driver_id, rating=rating)
        self.record_operation("rate", DRIVERS_TABLE, driver_id, {"rating": rating}, start_time, time())
        return Driver.from_row(row)

    def set_status(self, driver_id: str, status: DriverStatus) -> None:
        """Overwrite availability; last write wins."""
        start_time = time()
        self.store.update(DRIVERS_TABLE, driver_id, {"status": status.value})
        self.logger.info("driver_status_synced", driver_id=driver_id, status=status.value)
        self.record_operation(
            "status_sync", DRIVERS_TABLE, driver_id, {"status": status.value}, start_time, time()
        )
