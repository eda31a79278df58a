"""Barcode lookup against the product catalog.

Scanned codes are matched to catalog entries by exact SKU equality.  Image
decoding is not performed here: callers hand over the decoded code (typed
in, or produced by whatever device sits in front of the service).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class SkuRecord(Protocol):
    """Any catalog record carrying a SKU."""

    sku: str


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Outcome of a single scan.

    Attributes:
        code: The normalised code that was looked up.
        matched: ``True`` when a catalog entry carries this SKU.
        product: The matched entry, ``None`` when unmatched.
    """

    code: str
    matched: bool
    product: Any = None


def normalize_code(code: str) -> str:
    """Strip surrounding whitespace a scanner or keyboard may add."""
    return code.strip()


def match_sku(catalog: Iterable[SkuRecord], code: str) -> ScanResult:
    """Find the first catalog entry whose SKU equals the scanned code.

    Matching is exact and case-sensitive.  An empty code never matches.

    Args:
        catalog: Products to search.
        code: Raw scanned code.

    Returns:
        A ``ScanResult`` describing the match, if any.
    """
    normalized = normalize_code(code)
    if not normalized:
        return ScanResult(code=normalized, matched=False)

    for product in catalog:
        if product.sku == normalized:
            logger.info("Scan matched SKU %s", normalized)
            return ScanResult(code=normalized, matched=True, product=product)

    logger.info("Scan found no product for code %s", normalized)
    return ScanResult(code=normalized, matched=False)
