"""Schema migrations for the booking database."""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Identity,
    Integer,
    MetaData,
    Table,
    Text,
    func,
    inspect,
    insert,
    delete,
    select,
)
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError


class MigrationError(Exception):
    """A migration step failed."""


metadata = MetaData()

hotels_table = Table(
    "hotels",
    metadata,
    Column("id", Integer, Identity(always=True), primary_key=True),
    Column("country", Text, nullable=False),
    Column("city", Text, nullable=False),
    Column("hotel_name", Text, nullable=False, unique=True),
    Column("stars", Integer, CheckConstraint("stars BETWEEN 1 AND 5"), nullable=False),
)

hotel_rooms_table = Table(
    "hotel_rooms",
    metadata,
    Column("id", Integer, Identity(always=True), primary_key=True),
    Column("hotel_id", Integer, ForeignKey("hotels.id"), nullable=False),
    Column("rooms", Integer),
    Column("meals", Boolean),
    Column("bar", Boolean),
    Column("service", Boolean),
    Column("busy", Boolean),
)

visitors_table = Table(
    "visitors",
    metadata,
    Column("id", Integer, Identity(always=True), primary_key=True),
    Column("hotel_id", Integer, nullable=False),
    Column("hotel_room_id", Integer, ForeignKey("hotel_rooms.id"), nullable=False),
    Column("first_name", Text),
    Column("last_name", Text),
    Column("age", Integer, CheckConstraint("age BETWEEN 18 AND 100")),
)

_version_table = Table(
    "goose_db_version",
    MetaData(),
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("version_id", BigInteger, nullable=False),
    Column("is_applied", Boolean, nullable=False),
    Column("tstamp", DateTime, default=datetime.now),
)


@dataclass(frozen=True)
class Migration:
    """One numbered schema change with its reverse."""

    version: int
    name: str
    up: Callable[[Connection], None]
    down: Callable[[Connection], None]


def _step(op: str, action: Callable[[Connection], None]) -> Callable[[Connection], None]:
    def run(conn: Connection) -> None:
        try:
            action(conn)
        except SQLAlchemyError as exc:
            raise MigrationError(f"{op}: {exc}") from exc

    return run


def _creator(table: Table) -> Callable[[Connection], None]:
    return lambda conn: table.create(conn, checkfirst=True)


def _dropper(table: Table) -> Callable[[Connection], None]:
    return lambda conn: table.drop(conn)


MIGRATIONS: tuple[Migration, ...] = (
    Migration(
        1,
        "hotels",
        _step("migrations.001_hotel.upHotels", _creator(hotels_table)),
        _step("migrations.001_hotel.downHotels", _dropper(hotels_table)),
    ),
    Migration(
        2,
        "hotelRooms",
        _step("migrations.001_hotel.upHotelRooms", _creator(hotel_rooms_table)),
        _step("migrations.001_hotel.downHotelRooms", _dropper(hotel_rooms_table)),
    ),
    Migration(
        3,
        "visitors",
        _step("migrations.001_hotel.upVisitors", _creator(visitors_table)),
        _step("migrations.001_hotel.downVisitors", _dropper(visitors_table)),
    ),
)


def _ensure_version_table(conn: Connection) -> None:
    if inspect(conn).has_table(_version_table.name):
        return
    _version_table.create(conn)
    conn.execute(insert(_version_table).values(version_id=0, is_applied=True))


def _read_version(conn: Connection) -> int:
    query = select(func.max(_version_table.c.version_id)).where(
        _version_table.c.is_applied.is_(True)
    )
    return conn.execute(query).scalar() or 0


def current_version(engine: Engine) -> int:
    """Return the highest applied migration version, 0 when none is."""
    with engine.begin() as conn:
        _ensure_version_table(conn)
        return _read_version(conn)


def apply_up(engine: Engine) -> list[int]:
    """Apply every pending migration in order; return the versions applied."""
    current = current_version(engine)
    applied = []
    for migration in MIGRATIONS:
        if migration.version <= current:
            continue
        with engine.begin() as conn:
            migration.up(conn)
            conn.execute(
                insert(_version_table).values(
                    version_id=migration.version, is_applied=True
                )
            )
        applied.append(migration.version)
    return applied


def apply_down_to(engine: Engine, version: int) -> list[int]:
    """Roll back migrations newer than ``version``; return the versions undone."""
    current = current_version(engine)
    undone = []
    for migration in reversed(MIGRATIONS):
        if not version < migration.version <= current:
            continue
        with engine.begin() as conn:
            migration.down(conn)
            conn.execute(
                delete(_version_table).where(
                    _version_table.c.version_id == migration.version
                )
            )
        undone.append(migration.version)
    return undone