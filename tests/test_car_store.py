"""Unit tests for catalog/store.py -- the SQL layer under CatalogService.

Covers:
- UNIQUE(vin) enforced by the schema, not only by the service pre-check
- update_car / delete_car report missing rows instead of raising
- get_car_by_vin exclude_id (self-match on update)
- search_cars returns the total of all matches, not just the page
"""

import pytest
from sqlalchemy.exc import IntegrityError

from catalog.models import Car
from catalog.store import SORT_FIELDS, CarStore


def _car(vin: str, brand: str = "Toyota", price: float = 1000.0) -> Car:
    return Car(brand=brand, model="Camry", year=2018, price=price, mileage=0, color="Black", vin=vin)


@pytest.fixture
def store():
    s = CarStore("sqlite:///:memory:")
    yield s
    s.close()


def test_create_sets_id_and_timestamp(store):
    car_id = store.create_car(_car("A" * 17))
    car = store.get_car(car_id)
    assert car.id == car_id
    assert car.created_at


def test_duplicate_vin_rejected_by_schema(store):
    store.create_car(_car("A" * 17))
    with pytest.raises(IntegrityError):
        store.create_car(_car("A" * 17))
    assert store.count_cars() == 1


def test_update_to_taken_vin_rejected_by_schema(store):
    store.create_car(_car("A" * 17))
    b_id = store.create_car(_car("B" * 17))
    with pytest.raises(IntegrityError):
        store.update_car(b_id, _car("A" * 17))
    assert store.get_car(b_id).vin == "B" * 17


def test_update_missing_returns_false(store):
    assert store.update_car(404, _car("A" * 17)) is False


def test_delete_missing_returns_false(store):
    assert store.delete_car(404) is False


def test_get_car_by_vin_exclude_id(store):
    car_id = store.create_car(_car("A" * 17))
    assert store.get_car_by_vin("A" * 17).id == car_id
    assert store.get_car_by_vin("A" * 17, exclude_id=car_id) is None


def test_search_total_counts_all_matches(store):
    for i in range(5):
        store.create_car(_car(f"{i:017d}", brand="Lada"))
    store.create_car(_car("X" * 17, brand="Volvo"))

    cars, total = store.search_cars("lada", offset=0, limit=2)
    assert len(cars) == 2
    assert total == 5


def test_sort_fields_whitelist():
    assert set(SORT_FIELDS) == {"id", "brand", "model", "year", "price", "mileage", "color", "vin", "createdAt"}


def test_ping(store):
    assert store.ping() is True
