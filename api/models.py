"""
API request and response models for the car catalog REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
catalog/models.py, which own the internal domain representation. Route
handlers map between the two.

Request bodies declare every field Optional on purpose: the presence rules
(and their error messages) belong to the services, which must tell "absent"
apart from "zero". Pydantic still rejects values of the wrong type.

JSON field names are camelCase on the wire (createdAt, totalPages); the
Python attributes stay snake_case via serialization aliases.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from auth.models import User
from catalog.models import Car, CarPage

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Request body for POST /api/auth/register."""

    email: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = Field(default=None, max_length=255)
    name: Optional[str] = Field(default=None, max_length=255)


class LoginRequest(BaseModel):
    """Request body for POST /api/auth/login."""

    email: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = Field(default=None, max_length=255)


class CarPayload(BaseModel):
    """Request body for POST /api/cars and PUT /api/cars/{id}.

    PUT is a full replace, so both verbs share one body shape. Text is
    passed through untouched; the service decides what counts as blank.
    """

    brand: Optional[str] = Field(default=None, max_length=100)
    model: Optional[str] = Field(default=None, max_length=100)
    year: Optional[int] = None
    price: Optional[float] = None
    mileage: Optional[int] = None
    color: Optional[str] = Field(default=None, max_length=50)
    vin: Optional[str] = Field(default=None, max_length=50)


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class UserOut(BaseModel):
    """Public view of a user -- never includes the password hash."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    email: str
    name: Optional[str]
    created_at: str = Field(serialization_alias="createdAt")

    @classmethod
    def from_user(cls, user: User) -> "UserOut":
        return cls(id=user.id, email=user.email, name=user.name, created_at=user.created_at or "")


class CarOut(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    brand: str
    model: str
    year: int
    price: float
    mileage: int
    color: str
    vin: str
    created_at: str = Field(serialization_alias="createdAt")

    @classmethod
    def from_car(cls, car: Car) -> "CarOut":
        return cls(
            id=car.id,
            brand=car.brand,
            model=car.model,
            year=car.year,
            price=car.price,
            mileage=car.mileage,
            color=car.color,
            vin=car.vin,
            created_at=car.created_at,
        )


class AuthData(BaseModel):
    """data payload for register and login."""

    model_config = ConfigDict(frozen=True)

    user: UserOut
    token: str


class MeData(BaseModel):
    model_config = ConfigDict(frozen=True)

    user: UserOut


class MessageData(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str


class Pagination(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    page: int
    limit: int
    total: int
    total_pages: int = Field(serialization_alias="totalPages")

    @classmethod
    def from_page(cls, page: CarPage) -> "Pagination":
        return cls(page=page.page, limit=page.limit, total=page.total, total_pages=page.total_pages)


class Envelope(BaseModel):
    """Uniform wrapper returned by every endpoint, success or failure.

    data, error and pagination are omitted from the JSON when unset.
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    pagination: Optional[Pagination] = None


class HealthData(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str]
