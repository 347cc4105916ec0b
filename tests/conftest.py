"""
Shared fixtures.

Provides an in-memory TableStore that behaves like the Supabase tables the
services expect: embedded joins, ordering, and the freight->driver foreign
key on delete.
"""

import copy
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Optional
from uuid import uuid4

import pytest
import structlog

from freightboard.core import config as config_module
from freightboard.core.config import ConfigManager
from freightboard.core.exceptions import RecordNotFoundError, StoreError
from freightboard.data import store as store_module
from freightboard.data.store import DRIVERS_TABLE, FOREIGN_KEY_VIOLATION, FREIGHTS_TABLE, TableStore
from freightboard.services.driver import DriverService
from freightboard.services.freight import FreightService

CONFIG_YAML = """
company:
  name: "Transportes Teste"
pricing:
  sack_weight_kg: "60"
  advance_ratio: "0.70"
  commission_per_ton: "5.00"
"""


class InMemoryTableStore(TableStore):
    """TableStore over dicts, recording every write."""

    def __init__(self) -> None:
        self.tables: dict[str, dict[str, dict[str, Any]]] = {DRIVERS_TABLE: {}, FREIGHTS_TABLE: {}}
        self.writes: list[tuple[str, str, str]] = []
        self.fail_on: set[tuple[str, str]] = set()
        self._clock = datetime(2025, 1, 1, 8, 0, 0)

    def _check_failure(self, operation: str, table: str) -> None:
        if (operation, table) in self.fail_on:
            raise StoreError(table, operation, cause=RuntimeError("network down"))

    def _embed(self, table: str, row: dict[str, Any], columns: str) -> dict[str, Any]:
        row = copy.deepcopy(row)
        if table == FREIGHTS_TABLE and "drivers(" in columns:
            driver = self.tables[DRIVERS_TABLE].get(row.get("driver_id") or "")
            row["drivers"] = copy.deepcopy(driver) if driver else None
        if table == DRIVERS_TABLE and "freights(count)" in columns:
            count = sum(1 for f in self.tables[FREIGHTS_TABLE].values() if f.get("driver_id") == row["id"])
            row["freights"] = [{"count": count}]
        return row

    def select(
        self,
        table: str,
        columns: str = "*",
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        self._check_failure("select", table)
        rows = [self._embed(table, r, columns) for r in self.tables[table].values()]
        if order_by:
            present = [r for r in rows if r.get(order_by) is not None]
            missing = [r for r in rows if r.get(order_by) is None]
            present.sort(key=lambda r: r[order_by], reverse=descending)
            rows = present + missing
        return rows[:limit] if limit is not None else rows

    def get(self, table: str, record_id: str, columns: str = "*") -> dict[str, Any]:
        self._check_failure("get", table)
        row = self.tables[table].get(record_id)
        if row is None:
            raise RecordNotFoundError(table, record_id)
        return self._embed(table, row, columns)

    def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        self._check_failure("insert", table)
        self._clock += timedelta(minutes=1)
        stored = {"id": str(uuid4()), "created_at": self._clock.isoformat(), **copy.deepcopy(row)}
        self.tables[table][stored["id"]] = stored
        self.writes.append(("insert", table, stored["id"]))
        return copy.deepcopy(stored)

    def update(self, table: str, record_id: str, patch: dict[str, Any]) -> dict[str, Any]:
        self._check_failure("update", table)
        if record_id not in self.tables[table]:
            raise RecordNotFoundError(table, record_id)
        self.tables[table][record_id].update(copy.deepcopy(patch))
        self.writes.append(("update", table, record_id))
        return copy.deepcopy(self.tables[table][record_id])

    def delete(self, table: str, record_id: str) -> None:
        self._check_failure("delete", table)
        if table == DRIVERS_TABLE and any(
            f.get("driver_id") == record_id for f in self.tables[FREIGHTS_TABLE].values()
        ):
            raise StoreError(table, "delete", cause=RuntimeError("fk violation"), code=FOREIGN_KEY_VIOLATION)
        self.tables[table].pop(record_id, None)
        self.writes.append(("delete", table, record_id))

    def count(self, table: str) -> int:
        self._check_failure("count", table)
        return len(self.tables[table])

    # Test helpers

    def add(self, table: str, **row: Any) -> dict[str, Any]:
        """Seed a row directly, bypassing write tracking."""
        row.setdefault("id", str(uuid4()))
        self._clock += timedelta(minutes=1)
        row.setdefault("created_at", self._clock.isoformat())
        self.tables[table][row["id"]] = row
        return row

    def driver_status(self, driver_id: str) -> Optional[str]:
        return self.tables[DRIVERS_TABLE][driver_id].get("status")


@pytest.fixture(autouse=True)
def reset_globals():
    """Keep the global store/config/logging state from leaking between tests."""
    store_module.set_store(None)
    config_module.reset_config()
    yield
    store_module.set_store(None)
    config_module.reset_config()
    structlog.reset_defaults()


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    (tmp_path / "config.yaml").write_text(CONFIG_YAML, encoding="utf-8")
    return tmp_path


@pytest.fixture
def config_manager(config_dir: Path) -> ConfigManager:
    return ConfigManager(config_dir=config_dir)


@pytest.fixture
def store() -> InMemoryTableStore:
    return InMemoryTableStore()


@pytest.fixture
def driver_service(store: InMemoryTableStore, config_manager: ConfigManager) -> DriverService:
    return DriverService(store=store, config_manager=config_manager)


@pytest.fixture
def freight_service(store: InMemoryTableStore, config_manager: ConfigManager) -> FreightService:
    return FreightService(store=store, config_manager=config_manager)


def freight_row(**overrides: Any) -> dict[str, Any]:
    """A freights row with sensible defaults."""
    row = {
        "date": "2025-03-10",
        "product": "Soja",
        "origin": "Rio Verde",
        "destination": "Santos",
        "invoice_number": None,
        "driver_id": None,
        "weight_loaded": 30.0,
        "unit_price": 150.0,
        "total_value": 4500.0,
        "sacks_amount": 500.0,
        "weight_sack": 60,
        "status": "EM_TRANSITO",
        "advance_paid": False,
        "balance_paid": False,
    }
    row.update(overrides)
    return row


@pytest.fixture
def seeded(store: InMemoryTableStore) -> dict[str, Any]:
    """Two drivers and four freights across two months."""
    joao = store.add(DRIVERS_TABLE, name="João Silva", license_plate="ABC1D23", phone="64 99999-0001", status="Em Viagem")
    maria = store.add(DRIVERS_TABLE, name="Maria Souza", license_plate="XYZ9K88", phone=None, status="Disponível", rating=4.5)

    f1 = store.add(FREIGHTS_TABLE, **freight_row(date="2025-03-10", driver_id=joao["id"], destination="Santos"))
    f2 = store.add(
        FREIGHTS_TABLE,
        **freight_row(
            date="2025-03-12",
            driver_id=maria["id"],
            destination="Paranaguá",
            product="Milho",
            weight_loaded=40.0,
            unit_price=120.0,
            status="PAGO",
            advance_paid=True,
            balance_paid=True,
        ),
    )
    f3 = store.add(
        FREIGHTS_TABLE,
        **freight_row(
            date="2025-03-12",
            destination="Uberlândia",
            product="Sorgo",
            weight_loaded=10.0,
            unit_price=100.0,
            status="AGENDADO",
            advance_paid=True,
        ),
    )
    f4 = store.add(
        FREIGHTS_TABLE,
        **freight_row(date="2025-02-20", driver_id=joao["id"], destination="Santos", status="DESCARREGADO"),
    )
    return {"joao": joao, "maria": maria, "f1": f1, "f2": f2, "f3": f3, "f4": f4}
