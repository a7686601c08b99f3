"""Sample data generators."""

from rental_engine.generators.base import BaseGenerator
from rental_engine.generators.rental import RentalRequestGenerator

__all__ = ["BaseGenerator", "RentalRequestGenerator"]
