#!/usr/bin/env python3
"""Generate sample rental requests into the configured store.

Useful for trying the admin service locally: requests are spread across
every lifecycle status and carry document numbers that pass the offline
verification checks.
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from rental_engine.config import EngineConfig
from rental_engine.generators import RentalRequestGenerator
from rental_engine.logging import setup_logging
from rental_engine.service import RentalAdminService, build_store

logger = logging.getLogger(__name__)


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Generate sample rental requests")
    parser.add_argument(
        "--count",
        type=int,
        default=25,
        help="Number of rental requests to generate (default: 25)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for reproducibility (default: 42)",
    )
    parser.add_argument(
        "--json-path",
        type=Path,
        default=None,
        help="Write to this JSON file instead of the configured store",
    )
    args = parser.parse_args()

    config = EngineConfig.from_env()
    if args.json_path is not None:
        config.store.backend = "json"
        config.store.json_path = args.json_path
    setup_logging(config.log_level, config.log_format)

    store = build_store(config)
    generator = RentalRequestGenerator(seed=args.seed)
    for request in generator.generate_batch(args.count):
        store.add(request)
    logger.info("Added %d rental requests to the %s store", args.count, config.store.backend)

    stats = RentalAdminService(store).statistics()
    print("=" * 60)
    print("Summary")
    print("=" * 60)
    for name, count in stats.items():
        print(f"{name + ':':24}{count}")
    print("=" * 60)


if __name__ == "__main__":
    main()
