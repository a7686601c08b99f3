"""Rental request lifecycle and document verification engine."""

__version__ = "0.1.0"
