import pytest
from sqlalchemy import create_engine, inspect, insert, select
from sqlalchemy.exc import IntegrityError

from bookings.migrations import (
    MIGRATIONS,
    Migration,
    MigrationError,
    apply_down_to,
    apply_up,
    current_version,
    hotel_rooms_table,
    hotels_table,
    visitors_table,
)


@pytest.fixture
def engine(tmp_path):
    eng = create_engine(f"sqlite:///{tmp_path / 'bookings.db'}")
    yield eng
    eng.dispose()


def _tables(engine):
    return set(inspect(engine).get_table_names()) - {"goose_db_version"}


def test_fresh_database_is_at_version_zero(engine):
    assert current_version(engine) == 0
    assert _tables(engine) == set()


def test_versions_are_unique_and_ascending(engine):
    applied = apply_up(engine)
    assert applied == sorted(set(applied))
    assert applied == [m.version for m in MIGRATIONS]
    assert all(isinstance(m, Migration) for m in MIGRATIONS)


def test_apply_up_creates_all_tables(engine):
    applied = apply_up(engine)
    assert applied == [m.version for m in MIGRATIONS]
    assert current_version(engine) == MIGRATIONS[-1].version
    assert _tables(engine) == {"hotels", "hotel_rooms", "visitors"}


def test_apply_up_is_idempotent(engine):
    apply_up(engine)
    assert apply_up(engine) == []
    assert current_version(engine) == MIGRATIONS[-1].version


def test_down_to_zero_removes_everything(engine):
    apply_up(engine)
    undone = apply_down_to(engine, 0)
    assert undone == [m.version for m in reversed(MIGRATIONS)]
    assert current_version(engine) == 0
    assert _tables(engine) == set()


def test_down_to_first_keeps_hotels(engine):
    apply_up(engine)
    apply_down_to(engine, 1)
    assert current_version(engine) == 1
    assert _tables(engine) == {"hotels"}


def test_up_after_down_restores_schema(engine):
    apply_up(engine)
    apply_down_to(engine, 0)
    apply_up(engine)
    assert _tables(engine) == {"hotels", "hotel_rooms", "visitors"}


def test_hotel_ids_are_generated(engine):
    apply_up(engine)
    with engine.begin() as conn:
        conn.execute(
            insert(hotels_table).values(
                country="Spain", city="Madrid", hotel_name="Sol", stars=3
            )
        )
        rows = conn.execute(select(hotels_table.c.id, hotels_table.c.hotel_name)).all()
    assert [name for _, name in rows] == ["Sol"]
    assert rows[0][0] >= 1


@pytest.mark.parametrize("stars", [0, 6])
def test_stars_outside_range_rejected(engine, stars):
    apply_up(engine)
    with pytest.raises(IntegrityError):
        with engine.begin() as conn:
            conn.execute(
                insert(hotels_table).values(
                    country="Spain", city="Madrid", hotel_name="Luna", stars=stars
                )
            )


def test_hotel_name_must_be_unique(engine):
    apply_up(engine)
    row = dict(country="Spain", city="Madrid", hotel_name="Luna", stars=2)
    with engine.begin() as conn:
        conn.execute(insert(hotels_table).values(**row))
    with pytest.raises(IntegrityError):
        with engine.begin() as conn:
            conn.execute(insert(hotels_table).values(**row))


@pytest.mark.parametrize("age", [17, 101])
def test_visitor_age_outside_range_rejected(engine, age):
    apply_up(engine)
    with engine.begin() as conn:
        conn.execute(
            insert(hotels_table).values(
                country="Spain", city="Madrid", hotel_name="Sol", stars=3
            )
        )
        conn.execute(insert(hotel_rooms_table).values(hotel_id=1, rooms=2))
    with pytest.raises(IntegrityError):
        with engine.begin() as conn:
            conn.execute(
                insert(visitors_table).values(
                    hotel_id=1, hotel_room_id=1, first_name="A", last_name="B", age=age
                )
            )


def test_failed_down_raises_and_keeps_version(engine):
    apply_up(engine)
    with engine.begin() as conn:
        conn.exec_driver_sql("DROP TABLE visitors")
    with pytest.raises(MigrationError, match="downVisitors"):
        apply_down_to(engine, 0)
    assert current_version(engine) == MIGRATIONS[-1].version