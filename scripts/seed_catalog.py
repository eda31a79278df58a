#!/usr/bin/env python3
"""ShelfSense catalog seeder.

CLI entry point that initialises the database and loads products either
from a JSON file or from the synthetic catalog generator.

Usage::

    python scripts/seed_catalog.py [--data-file data/products.json]
    python scripts/seed_catalog.py --generate 200 --seed 42
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import random
import sys

# ---------------------------------------------------------------------------
# Ensure the project root is on ``sys.path`` so that ``src.*`` imports work
# when this script is invoked directly from the command line.
# ---------------------------------------------------------------------------
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from faker import Faker  # noqa: E402

from data.generate_data import generate_products  # noqa: E402
from src.config import settings  # noqa: E402
from src.models.database import async_session, create_tables  # noqa: E402
from src.pipeline.inventory import InventoryService  # noqa: E402


def _configure_logging() -> None:
    """Set up root logger with a clean console format."""
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


async def main() -> None:
    """Parse arguments, initialise the database, and seed the catalog."""
    _configure_logging()

    parser = argparse.ArgumentParser(
        description="Seed the ShelfSense product catalog",
    )
    parser.add_argument(
        "--data-file",
        default="data/products.json",
        help="Path to the products JSON file (default: data/products.json)",
    )
    parser.add_argument(
        "--generate",
        type=int,
        default=None,
        metavar="COUNT",
        help="Generate COUNT synthetic products instead of reading a file",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed used with --generate (default: 42)",
    )
    args = parser.parse_args()

    print("=== ShelfSense Catalog Seeder ===")
    print("Initializing database...")
    await create_tables()

    service = InventoryService()
    async with async_session() as session:
        if args.generate is not None:
            random.seed(args.seed)
            Faker.seed(args.seed)
            print(f"Generating {args.generate} products (seed={args.seed})...")
            summary = await service.seed_products(
                session, generate_products(count=args.generate),
            )
        else:
            print(f"Loading products from {args.data_file}...")
            summary = await service.seed_from_json(session, args.data_file)

    print("\n=== Seed Summary ===")
    print(f"Records read:    {summary['total']}")
    print(f"Inserted:        {summary['inserted']}")
    print(f"Skipped (dupes): {summary['skipped']}")
    print(f"Processing Time: {summary['processing_time_seconds']:.2f}s")
    print(f"\nDatabase: {settings.DATABASE_URL}")
    print("Run 'uvicorn src.api.main:app --reload' to start the API")


if __name__ == "__main__":
    asyncio.run(main())
