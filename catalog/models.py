"""
catalog/models.py -- Domain dataclasses for the vehicle catalog.

These are pure data containers with zero logic. Validation and listing rules
live in catalog/service.py; SQL lives in catalog/store.py.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Car:
    """A vehicle in the catalog.

    vin is always stored upper-cased and is the natural unique key.
    id is None before the record is written to the database.
    """

    brand: str
    model: str
    year: int
    price: float
    mileage: int
    color: str
    vin: str
    id: Optional[int] = None
    created_at: str = ""  # ISO 8601, set by store on insert


@dataclass
class CarPage:
    """One page of a catalog listing plus the totals needed to page through it."""

    page: int
    limit: int
    total: int
    total_pages: int
    items: list[Car] = field(default_factory=list)
