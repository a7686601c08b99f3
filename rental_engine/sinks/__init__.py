"""Output sinks for rental lifecycle events."""

from rental_engine.sinks.console import ConsoleSink
from rental_engine.sinks.kafka import KafkaSink

__all__ = ["ConsoleSink", "KafkaSink"]
