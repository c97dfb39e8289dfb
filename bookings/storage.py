"""Database access for hotels, hotel rooms and visitors."""

import json
import logging
from typing import Any, Iterable

from sqlalchemy import create_engine, delete, event, insert, select, update
from sqlalchemy.engine import Engine, Row
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql import Executable

from .migrations import (
    MigrationError,
    apply_down_to,
    apply_up,
    hotel_rooms_table,
    hotels_table,
    visitors_table,
)
from .models import Hotel, HotelRoom, Visitor

log = logging.getLogger(__name__)

_JSON_ESCAPES = str.maketrans(
    {
        "<": "\\u003c",
        ">": "\\u003e",
        "&": "\\u0026",
        "\u2028": "\\u2028",
        "\u2029": "\\u2029",
    }
)

_HOTEL_COLUMNS = (
    hotels_table.c.id,
    hotels_table.c.country,
    hotels_table.c.city,
    hotels_table.c.hotel_name,
    hotels_table.c.stars,
)

_ROOM_COLUMNS = (
    hotel_rooms_table.c.id,
    hotel_rooms_table.c.hotel_id,
    hotel_rooms_table.c.rooms,
    hotel_rooms_table.c.meals,
    hotel_rooms_table.c.bar,
    hotel_rooms_table.c.service.label("services"),
    hotel_rooms_table.c.busy,
)

_VISITOR_COLUMNS = (
    visitors_table.c.id,
    visitors_table.c.hotel_id,
    visitors_table.c.hotel_room_id.label("hotel_room"),
    visitors_table.c.first_name,
    visitors_table.c.last_name,
    visitors_table.c.age,
)


class StorageError(Exception):
    """A storage operation failed."""


class NotFoundError(StorageError):
    """The requested record does not exist."""


def _marshal(value: Any) -> str:
    text = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return text.translate(_JSON_ESCAPES)


def _marshal_records(records: Iterable[Any]) -> str:
    items = [record.to_dict() for record in records]
    return _marshal(items) if items else "null"


def _record(op: str, model: type, row: Row, strict: bool = True) -> Any:
    values = {key: value for key, value in row._mapping.items() if value is not None}
    if strict and len(values) != len(row._mapping):
        missing = sorted(set(row._mapping.keys()) - set(values))
        raise StorageError(f"{op}: scan failed: NULL in column {', '.join(missing)}")
    return model(**values)


def _enable_sqlite_foreign_keys(dbapi_connection, _record) -> None:
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()


class Storage:
    """Connection to the booking database with its query operations."""

    def __init__(self, database_url: str, reload: bool = False) -> None:
        op = "storage.postgres.NewPostgresDB"
        try:
            self.engine: Engine = create_engine(database_url)
            if self.engine.dialect.name == "sqlite":
                event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)
            with self.engine.connect():
                pass
        except (SQLAlchemyError, ImportError) as exc:
            raise StorageError(f"{op}: connection failed: {exc}") from exc

        try:
            if reload:
                log.info("Start reload db")
                try:
                    apply_down_to(self.engine, 0)
                except (MigrationError, SQLAlchemyError) as exc:
                    raise StorageError(f"{op}: Reload failed: {exc}") from exc
            log.info("Migration started!")
            try:
                apply_up(self.engine)
            except (MigrationError, SQLAlchemyError) as exc:
                raise StorageError(f"{op}: Migration failed: {exc}") from exc
        except StorageError:
            self.engine.dispose()
            raise

    def close(self) -> None:
        """Release every pooled connection."""
        self.engine.dispose()

    def __enter__(self) -> "Storage":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _execute(self, op: str, failure: str, statement: Executable) -> None:
        try:
            with self.engine.begin() as conn:
                conn.execute(statement)
        except SQLAlchemyError as exc:
            raise StorageError(f"{op}: {failure}: {exc}") from exc

    def _fetch_one(self, op: str, failure: str, statement: Executable, model: type) -> str:
        try:
            with self.engine.connect() as conn:
                row = conn.execute(statement).first()
        except SQLAlchemyError as exc:
            raise StorageError(f"{op}: {failure}: {exc}") from exc
        if row is None:
            raise NotFoundError(f"{op}: not found: no rows in result set")
        return _marshal(_record(op, model, row).to_dict())

    def _fetch_all(
        self, op: str, failure: str, statement: Executable, model: type, strict: bool = True
    ) -> str:
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(statement).all()
        except SQLAlchemyError as exc:
            raise StorageError(f"{op}: {failure}: {exc}") from exc
        return _marshal_records(_record(op, model, row, strict) for row in rows)

    # Hotels

    def create_hotel(self, country: str, city: str, hotel_name: str, stars: int) -> None:
        """Insert a hotel."""
        statement = insert(hotels_table).values(
            country=country, city=city, hotel_name=hotel_name, stars=stars
        )
        self._execute("storage.postgres.CreateHotel", "exec failed", statement)

    def get_all_hotels(self) -> str:
        """Return every hotel as a JSON array, or ``null`` when there is none."""
        statement = select(*_HOTEL_COLUMNS).order_by(hotels_table.c.id)
        return self._fetch_all("storage.postgres.GetAllHotels", "scan failed", statement, Hotel)

    def get_hotel(self, hotel_id: int) -> str:
        """Return one hotel as a JSON object."""
        statement = select(*_HOTEL_COLUMNS).where(hotels_table.c.id == hotel_id)
        return self._fetch_one("storage.postgres.GetHotel", "query failed", statement, Hotel)

    def delete_hotel(self, hotel_id: int) -> None:
        """Delete a hotel; deleting a missing one is not an error."""
        statement = delete(hotels_table).where(hotels_table.c.id == hotel_id)
        self._execute("storage.postgres.DeleteHotel", "delete failed", statement)

    def update_hotel(
        self, hotel_id: int, country: str, city: str, hotel_name: str, stars: int
    ) -> str:
        """Replace a hotel's fields and return it as stored."""
        statement = (
            update(hotels_table)
            .where(hotels_table.c.id == hotel_id)
            .values(country=country, city=city, hotel_name=hotel_name, stars=stars)
        )
        self._execute("storage.postgres.UpdateHotel", "update failed", statement)
        return self.get_hotel(hotel_id)

    # Hotel rooms

    def create_hotel_room(
        self, hotel_id: int, rooms: int, meals: bool, bar: bool, service: bool, busy: bool
    ) -> None:
        """Insert a room for a hotel."""
        statement = insert(hotel_rooms_table).values(
            hotel_id=hotel_id, rooms=rooms, meals=meals, bar=bar, service=service, busy=busy
        )
        self._execute("storage.postgres.CreateHotelRoom", "exec failed", statement)

    def get_all_hotel_rooms(self) -> str:
        """Return every hotel room as a JSON array, or ``null`` when there is none."""
        statement = select(*_ROOM_COLUMNS).order_by(hotel_rooms_table.c.id)
        return self._fetch_all(
            "storage.postgres.GetAllHotelRooms", "query failed", statement, HotelRoom
        )

    def get_hotel_room(self, room_id: int) -> str:
        """Return one hotel room as a JSON object."""
        statement = select(*_ROOM_COLUMNS).where(hotel_rooms_table.c.id == room_id)
        return self._fetch_one(
            "storage.postgres.GetHotelRoom", "query failed", statement, HotelRoom
        )

    def delete_hotel_room(self, room_id: int) -> None:
        """Delete a hotel room; deleting a missing one is not an error."""
        statement = delete(hotel_rooms_table).where(hotel_rooms_table.c.id == room_id)
        self._execute("storage.postgres.DeleteHotelRoom", "delete failed", statement)

    def update_hotel_room(
        self, room_id: int, hotel_id: int, rooms: int, meals: bool, bar: bool, service: bool
    ) -> str:
        """Replace a room's fields, keeping its busy flag, and return it as stored."""
        statement = (
            update(hotel_rooms_table)
            .where(hotel_rooms_table.c.id == room_id)
            .values(hotel_id=hotel_id, rooms=rooms, meals=meals, bar=bar, service=service)
        )
        self._execute("storage.postgres.UpdateHotelRoom", "update failed", statement)
        return self.get_hotel_room(room_id)

    # Visitors

    def create_visitor(
        self, hotel_id: int, hotel_room: int, first_name: str, last_name: str, age: int
    ) -> None:
        """Insert a visitor staying in a hotel room."""
        statement = insert(visitors_table).values(
            hotel_id=hotel_id,
            hotel_room_id=hotel_room,
            first_name=first_name,
            last_name=last_name,
            age=age,
        )
        self._execute("storage.postgres.CreateVisitor", "exec failed", statement)

    def get_all_visitors(self) -> str:
        """Return every visitor as a JSON array, or ``null`` when there is none.

        Empty columns come out as zero values.
        """
        statement = select(*_VISITOR_COLUMNS).order_by(visitors_table.c.id)
        return self._fetch_all(
            "storage.postgres.GetAllVisitors", "query failed", statement, Visitor, strict=False
        )

    def get_visitor(self, visitor_id: int) -> str:
        """Return one visitor as a JSON object."""
        statement = select(*_VISITOR_COLUMNS).where(visitors_table.c.id == visitor_id)
        return self._fetch_one("storage.postgres.GetVisitor", "query failed", statement, Visitor)

    def delete_visitor(self, visitor_id: int) -> None:
        """Delete a visitor; deleting a missing one is not an error."""
        statement = delete(visitors_table).where(visitors_table.c.id == visitor_id)
        self._execute("storage.postgres.DeleteVisitor", "exec failed", statement)

    def update_visitor(
        self,
        visitor_id: int,
        hotel_id: int,
        hotel_room: int,
        first_name: str,
        last_name: str,
        age: int,
    ) -> str:
        """Replace a visitor's fields and return it as stored.

        Returns an empty string when the visitor cannot be read back.
        """
        statement = (
            update(visitors_table)
            .where(visitors_table.c.id == visitor_id)
            .values(
                hotel_id=hotel_id,
                hotel_room_id=hotel_room,
                first_name=first_name,
                last_name=last_name,
                age=age,
            )
        )
        self._execute("storage.postgres.UpdateVisitor", "exec failed", statement)
        try:
            return self.get_visitor(visitor_id)
        except StorageError:
            return ""