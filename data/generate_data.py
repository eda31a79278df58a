#!/usr/bin/env python3
"""Generate synthetic catalog data for the ShelfSense inventory demo.

Produces a catalog of products whose delivery success rates follow a
seasonal pattern blended with a price-based pattern, so the RTO scorer and
the dashboard analytics have realistic-looking history to work from.

Usage::

    python data/generate_data.py [--count 200] [--seed 42]

Output:
    data/products.json  -- list of product dictionaries.
"""

from __future__ import annotations

import json
import math
import random
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Final

from faker import Faker

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

fake = Faker()

ITEM_NAMES: Final[list[str]] = ["Shirt", "Pants", "Shoes", "Watch", "Bag"]
CATEGORIES: Final[list[str]] = ["Classic", "Premium", "Sport", "Casual", "Luxury"]

PRICE_RANGE: Final[tuple[int, int]] = (500, 10499)
STOCK_RANGE: Final[tuple[int, int]] = (50, 249)
AGING_RANGE: Final[tuple[int, int]] = (1, 60)
MAX_RESTOCK_AGE_DAYS: Final[int] = 89

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def seasonal_rate(day_of_year: int) -> float:
    """Seasonal delivery success pattern peaking around mid-year.

    Args:
        day_of_year: Day index in ``[0, 365)``.

    Returns:
        A rate around 75 +/- 15 with up to 5 points of noise.
    """
    return 75 + 15 * math.sin(day_of_year * math.pi / 180) + random.random() * 5


def price_based_rate(price: float) -> float:
    """Delivery success pattern driven by price.

    Cheap products rarely come back; expensive ones are returned more and
    with more variance.
    """
    if price < 1000:
        return 80 + random.random() * 10
    if price > 5000:
        return 70 + random.random() * 15
    return 75 + random.random() * 12


def _product_name() -> str:
    """Build a ``"<Category> <Item>"`` product name."""
    return f"{fake.random_element(CATEGORIES)} {fake.random_element(ITEM_NAMES)}"


def _build_product(product_id: int, now: datetime) -> dict[str, object]:
    """Build a single product dictionary.

    Args:
        product_id: Sequential id, also used for the SKU.
        now: Reference time for ``last_restocked``.

    Returns:
        A dictionary matching the ``Product`` ORM model's fields, minus
        ``rto_risk``, which the seeding step derives from the rate.
    """
    price = random.randint(*PRICE_RANGE)
    day_of_year = random.randint(0, 364)

    delivery_success_rate = (seasonal_rate(day_of_year) + price_based_rate(price)) / 2
    returns_count = math.floor((100 - delivery_success_rate) * random.random())
    last_restocked = now - timedelta(days=random.randint(0, MAX_RESTOCK_AGE_DAYS))

    return {
        "id": product_id,
        "name": _product_name(),
        "sku": f"SKU{product_id:05d}",
        "stock": random.randint(*STOCK_RANGE),
        "price": price,
        "last_restocked": last_restocked.isoformat(),
        "returns_count": returns_count,
        "delivery_success_rate": delivery_success_rate,
        "aging": random.randint(*AGING_RANGE),
    }


def generate_products(
    count: int = 200,
    now: datetime | None = None,
) -> list[dict[str, object]]:
    """Generate a synthetic product catalog.

    Seed ``random`` and ``Faker`` beforehand for a reproducible catalog.

    Args:
        count: Number of products to produce.
        now: Reference time for restock timestamps.  Defaults to the
            current UTC time.

    Returns:
        Product dicts with ids ``1..count``.
    """
    ref = now or datetime.now(timezone.utc)
    return [_build_product(i, ref) for i in range(1, count + 1)]


def _print_summary(products: list[dict[str, object]]) -> None:
    """Print a summary of the generated catalog to stdout."""
    total = len(products)
    rates = [float(p["delivery_success_rate"]) for p in products]
    prices = [float(p["price"]) for p in products]
    avg_rate = sum(rates) / len(rates) if rates else 0.0

    bands = {
        "> 85": sum(1 for r in rates if r > 85),
        "75-85": sum(1 for r in rates if 75 < r <= 85),
        "<= 75": sum(1 for r in rates if r <= 75),
    }

    print(f"\n{'=' * 60}")
    print("  ShelfSense Synthetic Catalog Summary")
    print(f"{'=' * 60}")
    print(f"  Total products:          {total}")
    print()
    print("  --- Delivery Success Bands ---")
    for band, count in bands.items():
        pct = count / total * 100 if total else 0.0
        print(f"    {band:<20s} {count:>4d}  ({pct:5.1f}%)")
    print()
    print("  --- Price Statistics ---")
    if prices:
        print(f"    Min:  {min(prices):>10.2f}")
        print(f"    Max:  {max(prices):>10.2f}")
    print(f"    Avg delivery success:  {avg_rate:.1f}%")
    print(f"{'=' * 60}\n")


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Generate a synthetic ShelfSense catalog")
    parser.add_argument(
        "--count", type=int, default=200,
        help="Number of products to generate (default: 200)",
    )
    parser.add_argument(
        "--seed", type=int, default=42,
        help="Random seed for reproducibility (default: 42)",
    )
    parser.add_argument(
        "--output", type=str, default=None,
        help="Output file path (default: data/products.json)",
    )
    args = parser.parse_args()

    random.seed(args.seed)
    Faker.seed(args.seed)

    print(f"Generating {args.count} products (seed={args.seed})...")
    dataset = generate_products(count=args.count)

    script_dir = Path(__file__).resolve().parent
    output_path = Path(args.output) if args.output else script_dir / "products.json"

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(dataset, f, indent=2, default=str)

    print(f"Generated {len(dataset)} products -> {output_path}")
    _print_summary(dataset)
