"""PostgreSQL store keeping each rental request as one JSONB document."""

import logging
import uuid
from collections.abc import Mapping
from dataclasses import replace
from typing import Any

import psycopg
from psycopg.types.json import Jsonb

from rental_engine.exceptions import PersistenceError, RequestNotFound
from rental_engine.models.rental import RentalRequest
from rental_engine.store.base import RentalRequestStore
from rental_engine.store.serialization import (
    check_paths,
    from_record,
    serialize_value,
    to_json_record,
)

logger = logging.getLogger(__name__)

TABLE = "rental_requests"

CREATE_TABLE_SQL = f"""
CREATE TABLE IF NOT EXISTS {TABLE} (
    id TEXT PRIMARY KEY,
    data JSONB NOT NULL,
    created_at TIMESTAMPTZ NOT NULL
)
"""


class PostgresRentalStore(RentalRequestStore):
    """Store requests in a ``rental_requests`` table.

    A partial update is a single ``UPDATE`` that nests one ``jsonb_set``
    per field, so every field of an operation lands together or not at all.

    Parameters
    ----------
    connection_string : str
        libpq connection string.
    """

    def __init__(self, connection_string: str) -> None:
        self.connection_string = connection_string

    def create_schema(self) -> None:
        """Create the table if it does not exist."""
        with self._connect() as conn:
            conn.execute(CREATE_TABLE_SQL)

    def list_all(self) -> list[RentalRequest]:
        try:
            with self._connect() as conn:
                rows = conn.execute(
                    f"SELECT data FROM {TABLE} ORDER BY created_at DESC"  # noqa: S608
                ).fetchall()
        except psycopg.Error as exc:
            raise PersistenceError(f"Cannot list rental requests: {exc}") from exc
        return [from_record(row[0]) for row in rows]

    def load_one(self, request_id: str) -> RentalRequest:
        try:
            with self._connect() as conn:
                row = conn.execute(
                    f"SELECT data FROM {TABLE} WHERE id = %s", (request_id,)  # noqa: S608
                ).fetchone()
        except psycopg.Error as exc:
            raise PersistenceError(f"Cannot load rental request {request_id}: {exc}") from exc
        if row is None:
            raise RequestNotFound(f"Rental request {request_id} not found")
        return from_record(row[0])

    def apply_partial_update(self, request_id: str, fields: Mapping[str, Any]) -> None:
        if not fields:
            return
        try:
            check_paths(fields)
        except KeyError as exc:
            raise PersistenceError(f"Unknown field {exc.args[0]!r} for request {request_id}") from exc

        expression = "data"
        params: list[Any] = []
        for path, value in fields.items():
            expression = f"jsonb_set({expression}, %s::text[], %s::jsonb, false)"
            params.extend([path.split("."), Jsonb(serialize_value(value))])
        params.append(request_id)

        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    f"UPDATE {TABLE} SET data = {expression} WHERE id = %s",  # noqa: S608
                    params,
                )
                updated = cursor.rowcount
        except psycopg.Error as exc:
            logger.warning("Partial update of %s failed: %s", request_id, exc)
            raise PersistenceError(f"Cannot update rental request {request_id}: {exc}") from exc

        if updated == 0:
            raise RequestNotFound(f"Rental request {request_id} not found")

    def add(self, request: RentalRequest) -> RentalRequest:
        stored = replace(request, id=request.id or uuid.uuid4().hex)
        try:
            with self._connect() as conn:
                conn.execute(
                    f"INSERT INTO {TABLE} (id, data, created_at) VALUES (%s, %s, %s)",  # noqa: S608
                    (stored.id, Jsonb(to_json_record(stored)), stored.created_at),
                )
        except psycopg.Error as exc:
            raise PersistenceError(f"Cannot insert rental request: {exc}") from exc
        return stored

    def _connect(self) -> psycopg.Connection:
        try:
            return psycopg.connect(self.connection_string)
        except psycopg.Error as exc:
            raise PersistenceError(f"Cannot connect to PostgreSQL: {exc}") from exc
