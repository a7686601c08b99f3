"""Domain models for the rental engine."""

from rental_engine.models.base import CustomerDetails, Event

__all__ = ["CustomerDetails", "Event"]
