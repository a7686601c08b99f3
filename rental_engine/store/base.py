"""Store adapter contract for rental requests."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from rental_engine.models.rental import RentalRequest


class RentalRequestStore(ABC):
    """Generic keyed document store holding rental requests.

    The store exclusively owns durability. Every write is one atomic
    partial update; readers may see a version that is about to be
    superseded.
    """

    @abstractmethod
    def list_all(self) -> list[RentalRequest]:
        """Return every request, newest ``created_at`` first."""
        ...

    @abstractmethod
    def load_one(self, request_id: str) -> RentalRequest:
        """Load one request.

        Raises
        ------
        RequestNotFound
            If no request has this id.
        PersistenceError
            If the store cannot be read.
        """
        ...

    @abstractmethod
    def apply_partial_update(self, request_id: str, fields: Mapping[str, Any]) -> None:
        """Atomically replace the given dotted-path fields of one record.

        Parameters
        ----------
        request_id : str
            Id of the record to update.
        fields : Mapping[str, Any]
            Dotted record path (e.g. ``documents.taxId.manuallyVerified``)
            to new value. Either all fields are written or none.

        Raises
        ------
        RequestNotFound
            If no request has this id.
        PersistenceError
            If the write fails or a path is unknown.
        """
        ...

    @abstractmethod
    def add(self, request: RentalRequest) -> RentalRequest:
        """Store a new request and return it with a store-assigned id."""
        ...
