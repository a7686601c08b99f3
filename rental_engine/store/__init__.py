"""Rental request stores behind one partial-update contract."""

from rental_engine.store.base import RentalRequestStore
from rental_engine.store.json_file import JsonFileRentalStore
from rental_engine.store.memory import InMemoryRentalStore
from rental_engine.store.postgres import PostgresRentalStore

__all__ = [
    "InMemoryRentalStore",
    "JsonFileRentalStore",
    "PostgresRentalStore",
    "RentalRequestStore",
]
