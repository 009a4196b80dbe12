"""
catalog/store.py -- SQLAlchemy-backed persistence layer for the car catalog.

Uses SQLAlchemy Core (not ORM) so the dataclasses in catalog/models.py remain
the authoritative domain representation. Swapping SQLite for PostgreSQL is a
connection string change, not a rewrite.

Pattern: Repository + Data Mapper. CarStore is the repository; _row_to_car is
the mapper. Services never touch SQL directly.

Security: all queries use bound parameters. Sort columns come from the
_SORT_COLUMNS whitelist, never from raw request input.

UNIQUE(vin) is the final authority on duplicate VINs. create_car() and
update_car() let sqlalchemy.exc.IntegrityError propagate so the service can
report a conflict even when a concurrent writer slipped past its pre-check.

Usage:
    store = CarStore("sqlite:///:memory:")
    car_id = store.create_car(car)
    cars, total = store.search_cars("toyota", sort_field="price", descending=False, offset=0, limit=10)
    store.close()
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, Float, Integer, MetaData, String, Table, create_engine, event, func, or_, select, text
from sqlalchemy.engine import Engine

from catalog.models import Car
from core.config import get_settings

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_cars = Table(
    "cars",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("brand", String(100), nullable=False),
    Column("model", String(100), nullable=False),
    Column("year", Integer, nullable=False),
    Column("price", Float, nullable=False),
    Column("mileage", Integer, nullable=False),
    Column("color", String(50), nullable=False),
    Column("vin", String(17), nullable=False, unique=True),
    Column("created_at", String(32), nullable=False),
)

# Public sort keys (as the client sends them) -> columns.
_SORT_COLUMNS = {
    "id": _cars.c.id,
    "brand": _cars.c.brand,
    "model": _cars.c.model,
    "year": _cars.c.year,
    "price": _cars.c.price,
    "mileage": _cars.c.mileage,
    "color": _cars.c.color,
    "vin": _cars.c.vin,
    "createdAt": _cars.c.created_at,
}

SORT_FIELDS = tuple(_SORT_COLUMNS)

# Columns matched by the free-text search box.
_SEARCH_COLUMNS = (_cars.c.brand, _cars.c.model, _cars.c.vin)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


def _search_clause(term: str):
    """Case-insensitive substring match on brand OR model OR vin.

    lower() on both sides rather than ILIKE so SQLite and PostgreSQL behave
    the same. autoescape keeps user-typed % and _ literal.
    """
    needle = term.lower()
    return or_(*(func.lower(col).contains(needle, autoescape=True) for col in _SEARCH_COLUMNS))


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class CarStore:
    def __init__(self, db_url: Optional[str] = None) -> None:
        db_url = db_url or get_settings().database_url
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            # FastAPI runs sync handlers in a threadpool, so one SQLite
            # connection may be used from several threads.
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        metadata.create_all(self.engine)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def search_cars(
        self,
        term: str = "",
        sort_field: str = "createdAt",
        descending: bool = True,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[Car], int]:
        """Return one page of cars and the total number of matches.

        Ties on the sort column are broken by id in the same direction so a
        row never appears on two pages.
        """
        column = _SORT_COLUMNS[sort_field]
        order = (column.desc(), _cars.c.id.desc()) if descending else (column.asc(), _cars.c.id.asc())

        page_query = select(_cars)
        count_query = select(func.count()).select_from(_cars)
        if term:
            clause = _search_clause(term)
            page_query = page_query.where(clause)
            count_query = count_query.where(clause)
        page_query = page_query.order_by(*order).offset(offset).limit(limit)

        with self.engine.connect() as conn:
            rows = conn.execute(page_query).fetchall()
            total = conn.execute(count_query).scalar() or 0
        return [_row_to_car(r) for r in rows], total

    def get_car(self, car_id: int) -> Optional[Car]:
        with self.engine.connect() as conn:
            row = conn.execute(_cars.select().where(_cars.c.id == car_id)).fetchone()
        return _row_to_car(row) if row is not None else None

    def get_car_by_vin(self, vin: str, exclude_id: Optional[int] = None) -> Optional[Car]:
        """Look up a car by exact (already upper-cased) VIN.

        exclude_id skips one record -- used by updates, where a car keeping
        its own VIN is not a conflict.
        """
        query = _cars.select().where(_cars.c.vin == vin)
        if exclude_id is not None:
            query = query.where(_cars.c.id != exclude_id)
        with self.engine.connect() as conn:
            row = conn.execute(query).fetchone()
        return _row_to_car(row) if row is not None else None

    def count_cars(self) -> int:
        with self.engine.connect() as conn:
            result = conn.execute(select(func.count()).select_from(_cars)).scalar()
        return result or 0

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_car(self, car: Car) -> int:
        """Insert a new car and return its assigned database ID.

        Raises sqlalchemy.exc.IntegrityError if the VIN already exists.
        """
        with self.engine.connect() as conn:
            result = conn.execute(
                _cars.insert().values(
                    brand=car.brand,
                    model=car.model,
                    year=car.year,
                    price=car.price,
                    mileage=car.mileage,
                    color=car.color,
                    vin=car.vin,
                    created_at=_now_iso(),
                )
            )
            conn.commit()
            return result.inserted_primary_key[0]

    def update_car(self, car_id: int, car: Car) -> bool:
        """Replace every mutable field of an existing car.

        Returns True if a row was updated, False if car_id was not found.
        Raises sqlalchemy.exc.IntegrityError if the VIN belongs to another car.
        id and created_at are never rewritten.
        """
        with self.engine.connect() as conn:
            result = conn.execute(
                _cars.update()
                .where(_cars.c.id == car_id)
                .values(
                    brand=car.brand,
                    model=car.model,
                    year=car.year,
                    price=car.price,
                    mileage=car.mileage,
                    color=car.color,
                    vin=car.vin,
                )
            )
            conn.commit()
        return result.rowcount > 0

    def delete_car(self, car_id: int) -> bool:
        """Permanently delete a car. Returns True if deleted, False if not found."""
        with self.engine.connect() as conn:
            result = conn.execute(_cars.delete().where(_cars.c.id == car_id))
            conn.commit()
        return result.rowcount > 0

    def ping(self) -> bool:
        with self.engine.connect() as conn:
            return conn.execute(text("SELECT 1")).scalar() == 1

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_car(row) -> Car:
    return Car(
        id=row.id,
        brand=row.brand,
        model=row.model,
        year=row.year,
        price=row.price,
        mileage=row.mileage,
        color=row.color,
        vin=row.vin,
        created_at=row.created_at,
    )
