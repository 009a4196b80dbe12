"""
api/routes/cars.py -- Car catalog CRUD routes.

Routes:
  GET    /cars        -- paginated, searchable, sortable list
  POST   /cars        -- create a car
  GET    /cars/{id}   -- single car
  PUT    /cars/{id}   -- full replace of a car
  DELETE /cars/{id}   -- permanent delete

Query parameters for the list:
  page, limit        -- clamped by CatalogService (page >= 1, 1 <= limit <= 100)
  search             -- substring of brand, model or VIN, case-insensitive
  sortBy, sortOrder  -- unknown values fall back to createdAt / desc

Validation, VIN normalization and conflict checks live in
catalog/service.py; this module only maps HTTP onto the service.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from api.models import CarOut, CarPayload, Envelope, MessageData, Pagination
from api.responses import ok
from auth.dependencies import get_current_claims
from catalog.service import CatalogService

# Every catalog route requires authentication. The router-level dependency
# applies to every route registered on this router.
router = APIRouter(dependencies=[Depends(get_current_claims)])


def _catalog(request: Request) -> CatalogService:
    return request.app.state.catalog


@router.get("/cars", response_model=Envelope)
def list_cars(
    request: Request,
    page: Optional[int] = None,
    limit: Optional[int] = None,
    search: Optional[str] = None,
    sort_by: Optional[str] = Query(default=None, alias="sortBy"),
    sort_order: Optional[str] = Query(default=None, alias="sortOrder"),
) -> JSONResponse:
    result = _catalog(request).list_cars(
        page=page,
        limit=limit,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return ok([CarOut.from_car(c) for c in result.items], pagination=Pagination.from_page(result))


@router.post("/cars", response_model=Envelope, status_code=201)
def create_car(request: Request, body: CarPayload) -> JSONResponse:
    car = _catalog(request).create_car(body.model_dump())
    return ok(CarOut.from_car(car), status_code=201)


@router.get("/cars/{car_id}", response_model=Envelope)
def get_car(request: Request, car_id: int) -> JSONResponse:
    car = _catalog(request).get_car(car_id)
    return ok(CarOut.from_car(car))


@router.put("/cars/{car_id}", response_model=Envelope)
def update_car(request: Request, car_id: int, body: CarPayload) -> JSONResponse:
    """Replace a car. All fields are required, even for a one-field change."""
    car = _catalog(request).update_car(car_id, body.model_dump())
    return ok(CarOut.from_car(car))


@router.delete("/cars/{car_id}", response_model=Envelope)
def delete_car(request: Request, car_id: int) -> JSONResponse:
    _catalog(request).delete_car(car_id)
    return ok(MessageData(message="Car deleted"))
