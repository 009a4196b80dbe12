"""
catalog/service.py -- Catalog query service: listing, lookup and CRUD rules.

CatalogService takes a CarStore by injection and owns every rule the store
does not: paging defaults and clamps, the sort whitelist fallback, field
validation, VIN normalization and the friendly duplicate-VIN pre-check.

Writes are all-or-nothing: validation and the conflict check run before the
single INSERT/UPDATE statement, and a failed statement changes nothing.

Missing vs. zero: a numeric field is missing only when it is absent (None).
mileage=0 is a real value and must be accepted. Text fields also count as
missing when empty or whitespace-only, but are otherwise stored exactly as
sent; only the VIN is rewritten (upper-cased).
"""

import logging
import math
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError

from catalog.models import Car, CarPage
from catalog.store import SORT_FIELDS, CarStore
from core.errors import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger("carcatalog.catalog")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
DEFAULT_SORT_FIELD = "createdAt"
DEFAULT_SORT_ORDER = "desc"

VIN_LENGTH = 17
MIN_YEAR = 1900

# Integer columns are signed 64-bit.
MAX_INTEGER = 2**63 - 1

REQUIRED_FIELDS = ("brand", "model", "year", "price", "mileage", "color", "vin")
_TEXT_FIELDS = {"brand", "model", "color", "vin"}


# ---------------------------------------------------------------------------
# Listing helpers
# ---------------------------------------------------------------------------


def normalize_paging(page: Optional[int], limit: Optional[int]) -> tuple[int, int]:
    """Apply defaults, then clamp page to >= 1 and limit to [1, MAX_LIMIT]."""
    page = DEFAULT_PAGE if page is None else page
    limit = DEFAULT_LIMIT if limit is None else limit
    return max(1, page), min(MAX_LIMIT, max(1, limit))


def resolve_sort(sort_by: Optional[str], sort_order: Optional[str]) -> tuple[str, str]:
    """Fall back silently to createdAt / desc for anything outside the whitelist."""
    field = sort_by if sort_by in SORT_FIELDS else DEFAULT_SORT_FIELD
    order = sort_order if sort_order in ("asc", "desc") else DEFAULT_SORT_ORDER
    return field, order


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if total else 0


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def _is_missing(name: str, value: Any) -> bool:
    if value is None:
        return True
    if name in _TEXT_FIELDS:
        return not str(value).strip()
    return False


def validate_car_fields(fields: Mapping[str, Any], current_year: Optional[int] = None) -> Car:
    """Check a full set of car fields and return a normalized, unsaved Car.

    Raises ValidationError naming the first rule that fails. The VIN in the
    returned Car is upper-cased; every other field is kept as given.
    """
    if any(_is_missing(name, fields.get(name)) for name in REQUIRED_FIELDS):
        raise ValidationError("All fields are required: " + ", ".join(REQUIRED_FIELDS))

    vin = str(fields["vin"])
    if len(vin) != VIN_LENGTH:
        raise ValidationError(f"VIN must be exactly {VIN_LENGTH} characters")

    max_year = (current_year or datetime.now(timezone.utc).year) + 1
    year = fields["year"]
    if isinstance(year, bool) or not isinstance(year, int):
        raise ValidationError("Year must be a whole number")
    if year < MIN_YEAR or year > max_year:
        raise ValidationError(f"Year must be between {MIN_YEAR} and {max_year}")

    price = fields["price"]
    if isinstance(price, bool) or not isinstance(price, (int, float)):
        raise ValidationError("Price must be a number")
    if isinstance(price, float) and not math.isfinite(price):
        raise ValidationError("Price must be a finite number")
    if price <= 0:
        raise ValidationError("Price must be greater than 0")

    mileage = fields["mileage"]
    if isinstance(mileage, bool) or not isinstance(mileage, int):
        raise ValidationError("Mileage must be a whole number")
    if mileage < 0:
        raise ValidationError("Mileage cannot be negative")
    if mileage > MAX_INTEGER:
        raise ValidationError("Mileage is too large")

    return Car(
        brand=str(fields["brand"]),
        model=str(fields["model"]),
        year=year,
        price=float(price),
        mileage=mileage,
        color=str(fields["color"]),
        vin=vin.upper(),
    )


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class CatalogService:
    def __init__(self, store: CarStore) -> None:
        self.store = store

    def list_cars(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        search: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
    ) -> CarPage:
        page, limit = normalize_paging(page, limit)
        sort_field, order = resolve_sort(sort_by, sort_order)
        term = search or ""

        items, total = self.store.search_cars(
            term,
            sort_field=sort_field,
            descending=order == "desc",
            offset=(page - 1) * limit,
            limit=limit,
        )
        return CarPage(page=page, limit=limit, total=total, total_pages=total_pages(total, limit), items=items)

    def get_car(self, car_id: int) -> Car:
        car = self.store.get_car(car_id)
        if car is None:
            raise NotFoundError("Car not found")
        return car

    def create_car(self, fields: Mapping[str, Any]) -> Car:
        car = validate_car_fields(fields)
        if self.store.get_car_by_vin(car.vin) is not None:
            raise ConflictError("A car with this VIN already exists")
        try:
            car_id = self.store.create_car(car)
        except IntegrityError as exc:
            raise ConflictError("A car with this VIN already exists") from exc
        logger.info("Created car id=%s vin=%s", car_id, car.vin)
        return self.get_car(car_id)

    def update_car(self, car_id: int, fields: Mapping[str, Any]) -> Car:
        """Full replace: every field is required even if only one changes."""
        self.get_car(car_id)
        car = validate_car_fields(fields)
        if self.store.get_car_by_vin(car.vin, exclude_id=car_id) is not None:
            raise ConflictError("Another car with this VIN already exists")
        try:
            updated = self.store.update_car(car_id, car)
        except IntegrityError as exc:
            raise ConflictError("Another car with this VIN already exists") from exc
        if not updated:
            # Deleted between the existence check and the UPDATE
            raise NotFoundError("Car not found")
        logger.info("Updated car id=%s", car_id)
        return self.get_car(car_id)

    def delete_car(self, car_id: int) -> None:
        if not self.store.delete_car(car_id):
            raise NotFoundError("Car not found")
        logger.info("Deleted car id=%s", car_id)
