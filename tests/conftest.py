"""Shared fixtures: an in-memory Supabase stand-in and a TestClient wired to it."""

from __future__ import annotations

from pathlib import Path
import sys
from typing import Any, Optional

import pytest
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.testclient import TestClient

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from postgrest.exceptions import APIError  # noqa: E402

from Database.deps import get_db  # noqa: E402
from api.hotel_routes import hotel_router  # noqa: E402
from api.room_routes import room_router  # noqa: E402
from api.utils import request_validation_handler  # noqa: E402

UNIQUE_COLUMNS: dict[str, list[tuple[str, ...]]] = {
    "hotels": [("name",), ("tax_id",)],
    "rooms": [("hotel_id", "type", "accommodation")],
}


def make_api_error(message: str, code: str) -> APIError:
    """Build a PostgREST error the way the client raises it."""

    return APIError({"message": message, "code": code, "hint": None, "details": None})


class FakeSupabaseResponse:
    """Minimal Supabase-like response wrapper."""

    def __init__(self, data: list[dict[str, Any]]) -> None:
        self.data = data


class FakeTable:
    """In-memory table with a Supabase-like interface."""

    def __init__(
        self,
        backing_store: list[dict[str, Any]],
        table_name: str,
        cascade_to: Optional[list[dict[str, Any]]] = None,
    ) -> None:
        self._store = backing_store
        self._table_name = table_name
        # rows referencing this table through hotel_id, removed with their parent (ON DELETE CASCADE)
        self._cascade_to = cascade_to
        self._action: str | None = None
        self._filters: list[tuple[str, str]] = []
        self._payload: dict[str, Any] | list[dict[str, Any]] | None = None

    def select(self, *_: str) -> "FakeTable":
        self._action = "select"
        return self

    def insert(self, payload: dict[str, Any] | list[dict[str, Any]]) -> "FakeTable":
        self._action = "insert"
        self._payload = payload
        return self

    def update(self, payload: dict[str, Any]) -> "FakeTable":
        self._action = "update"
        self._payload = payload
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def eq(self, column: str, value: str) -> "FakeTable":
        self._filters.append((column, value))
        return self

    def _filter_rows(self) -> list[dict[str, Any]]:
        return [
            row
            for row in self._store
            if all(str(row.get(column)) == str(value) for column, value in self._filters)
        ]

    def _check_unique(self, row: dict[str, Any]) -> None:
        for columns in UNIQUE_COLUMNS.get(self._table_name, []):
            for existing in self._store:
                if existing.get("id") == row.get("id"):
                    continue
                if all(str(existing.get(column)) == str(row.get(column)) for column in columns):
                    raise make_api_error("duplicate key value violates unique constraint", "23505")

    def execute(self) -> FakeSupabaseResponse:
        if self._action == "select":
            data = [dict(row) for row in self._filter_rows()]
        elif self._action == "insert":
            rows = self._payload if isinstance(self._payload, list) else [self._payload]  # type: ignore[list-item]
            for row in rows:
                self._check_unique(row)  # type: ignore[arg-type]
            self._store.extend(dict(row) for row in rows)  # type: ignore[arg-type]
            data = [dict(row) for row in rows]  # type: ignore[arg-type]
        elif self._action == "update":
            data = self._filter_rows()
            for row in data:
                self._check_unique({**row, **(self._payload or {})})  # type: ignore[dict-item]
                row.update(self._payload or {})  # type: ignore[arg-type]
            data = [dict(row) for row in data]
        elif self._action == "delete":
            data = self._filter_rows()
            for row in data:
                self._store.remove(row)
            if self._cascade_to is not None:
                deleted_ids = {str(row.get("id")) for row in data}
                self._cascade_to[:] = [
                    child for child in self._cascade_to if str(child.get("hotel_id")) not in deleted_ids
                ]
        else:
            raise ValueError("Unsupported action for FakeTable.")

        self._action = None
        self._filters = []
        self._payload = None
        return FakeSupabaseResponse(data)


class FakeDB:
    """Simplified Supabase client exposing the minimal table(...) API."""

    def __init__(self) -> None:
        self.hotels: list[dict[str, Any]] = []
        self.rooms: list[dict[str, Any]] = []

    def table(self, name: str) -> FakeTable:
        if name == "hotels":
            return FakeTable(self.hotels, "hotels", cascade_to=self.rooms)
        if name == "rooms":
            return FakeTable(self.rooms, "rooms")
        raise ValueError(f"Unknown table {name}")


class FailingTable(FakeTable):
    """Table whose writes (or every call) blow up like an unreachable database."""

    def __init__(self, source: FakeTable, error: Exception, reads: bool) -> None:
        super().__init__(source._store, source._table_name, cascade_to=source._cascade_to)
        self._error = error
        self._reads = reads

    def execute(self) -> FakeSupabaseResponse:
        if self._reads or self._action != "select":
            self._action = None
            self._filters = []
            raise self._error
        return super().execute()


class FailingDB(FakeDB):
    """FakeDB that fails on one table, optionally on reads too."""

    def __init__(self, table_name: str, error: Optional[Exception] = None, reads: bool = False) -> None:
        super().__init__()
        self._failing_table = table_name
        self._error = error if error is not None else ConnectionError("database unreachable")
        self._reads = reads

    def table(self, name: str) -> FakeTable:
        table = super().table(name)
        if name == self._failing_table:
            return FailingTable(table, self._error, self._reads)
        return table


def build_client(db: FakeDB) -> TestClient:
    """Create a TestClient for both routers with a database dependency override."""

    app = FastAPI()
    app.dependency_overrides[get_db] = lambda: db  # type: ignore[assignment]
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.include_router(hotel_router, prefix="/hotels")
    app.include_router(room_router, prefix="/rooms")
    return TestClient(app)


@pytest.fixture()
def fake_db() -> FakeDB:
    return FakeDB()


@pytest.fixture()
def client_and_db(fake_db: FakeDB) -> tuple[TestClient, FakeDB]:
    """Create a TestClient with a fake database dependency override."""

    return build_client(fake_db), fake_db
