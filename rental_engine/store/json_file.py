"""JSON file store for rental requests."""

import json
import logging
import os
import tempfile
import uuid
from collections.abc import Mapping
from dataclasses import replace
from pathlib import Path
from typing import Any

from rental_engine.exceptions import (
    InvalidFinancialTerms,
    InvalidRentalTerms,
    PersistenceError,
    RequestNotFound,
)
from rental_engine.models.rental import RentalRequest
from rental_engine.store.base import RentalRequestStore
from rental_engine.store.serialization import (
    apply_field_updates,
    from_record,
    serialize_value,
    to_json_record,
)

logger = logging.getLogger(__name__)


class JsonFileRentalStore(RentalRequestStore):
    """Keep all requests in one JSON document on disk.

    Each write rewrites the whole file through a temporary file and
    ``os.replace``, so readers never see a half-written document.
    """

    def __init__(self, path: str | Path, pretty: bool = False) -> None:
        """Initialize JSON file store.

        Parameters
        ----------
        path : str | Path
            File holding the ``{id: record}`` document. Created on first write.
        pretty : bool
            Pretty-print JSON output.
        """
        self.path = Path(path)
        self.pretty = pretty

    def list_all(self) -> list[RentalRequest]:
        requests = [from_record(record) for record in self._read().values()]
        return sorted(requests, key=lambda r: r.created_at, reverse=True)

    def load_one(self, request_id: str) -> RentalRequest:
        records = self._read()
        if request_id not in records:
            raise RequestNotFound(f"Rental request {request_id} not found")
        return from_record(records[request_id])

    def apply_partial_update(self, request_id: str, fields: Mapping[str, Any]) -> None:
        records = self._read()
        if request_id not in records:
            raise RequestNotFound(f"Rental request {request_id} not found")
        try:
            updated = apply_field_updates(records[request_id], serialize_value(dict(fields)))
        except KeyError as exc:
            raise PersistenceError(f"Unknown field {exc.args[0]!r} for request {request_id}") from exc
        try:
            from_record(updated)
        except (TypeError, ValueError, InvalidFinancialTerms, InvalidRentalTerms) as exc:
            raise PersistenceError(f"Invalid update for request {request_id}: {exc}") from exc
        records[request_id] = updated
        self._write(records)

    def add(self, request: RentalRequest) -> RentalRequest:
        stored = replace(request, id=request.id or uuid.uuid4().hex)
        records = self._read()
        records[stored.id] = to_json_record(stored)
        self._write(records)
        return stored

    def _read(self) -> dict[str, dict[str, Any]]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise PersistenceError(f"Cannot read {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise PersistenceError(f"{self.path} does not hold a JSON object")
        return data

    def _write(self, records: dict[str, dict[str, Any]]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    if self.pretty:
                        json.dump(records, f, indent=2, ensure_ascii=False)
                    else:
                        json.dump(records, f, ensure_ascii=False)
                os.replace(tmp_name, self.path)
            except BaseException:
                os.unlink(tmp_name)
                raise
        except OSError as exc:
            raise PersistenceError(f"Cannot write {self.path}: {exc}") from exc
        logger.debug("Wrote %d rental requests to %s", len(records), self.path)
