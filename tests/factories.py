"""tests/factories.py -- Small builders shared by the unit and API tests."""

import uuid

TEST_EMAIL = "tester@example.com"
TEST_PASSWORD = "testpass123"


def make_car_fields(**overrides) -> dict:
    """A valid create/update body; override any field per test."""
    fields = {
        "brand": "Toyota",
        "model": "Camry",
        "year": 2018,
        "price": 1650000,
        "mileage": 89000,
        "color": "Black",
        "vin": "JTNB11HK8J3001234",
    }
    fields.update(overrides)
    return fields


def unique_vin() -> str:
    """17 upper-case hex characters, unique per call."""
    return uuid.uuid4().hex[:17].upper()
