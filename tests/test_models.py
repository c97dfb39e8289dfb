import json

import pytest

from bookings.models import Hotel, HotelRoom, Visitor


def test_hotel_json_keys_in_field_order():
    hotel = Hotel(id=1, country="Italy", city="Rome", hotel_name="Roma", stars=4)
    assert list(hotel.to_dict()) == ["id", "country", "city", "hotel_name", "stars"]


def test_hotel_room_uses_hotels_id_key():
    room = HotelRoom(id=2, hotel_id=7, rooms=3, meals=True)
    data = room.to_dict()
    assert data["hotels_id"] == 7
    assert "hotel_id" not in data
    assert set(data) == {"id", "hotels_id", "rooms", "meals", "bar", "services", "busy"}


def test_visitor_uses_renamed_keys():
    visitor = Visitor(id=5, hotel_id=1, hotel_room=9, first_name="Ann", last_name="Lee", age=30)
    data = visitor.to_dict()
    assert data["visitor_id"] == 5
    assert data["hotel_room_id"] == 9
    assert set(data) == {
        "visitor_id", "hotel_id", "hotel_room_id", "first_name", "last_name", "age",
    }


@pytest.mark.parametrize(
    "record",
    [
        Hotel(id=1, country="France", city="Nice", hotel_name="Azur", stars=5),
        HotelRoom(id=3, hotel_id=1, rooms=2, meals=True, bar=False, services=True, busy=True),
        Visitor(id=4, hotel_id=1, hotel_room=3, first_name="Bo", last_name="Ek", age=42),
    ],
)
def test_round_trip_through_json(record):
    decoded = json.loads(json.dumps(record.to_dict()))
    assert type(record).from_dict(decoded) == record


@pytest.mark.parametrize("cls", [Hotel, HotelRoom, Visitor])
def test_empty_object_gives_zero_values(cls):
    assert cls.from_dict({}) == cls()


def test_null_fields_keep_zero_value():
    hotel = Hotel.from_dict({"country": None, "stars": 3})
    assert hotel == Hotel(stars=3)


def test_unknown_keys_are_ignored():
    hotel = Hotel.from_dict({"city": "Oslo", "extra": [1, 2]})
    assert hotel == Hotel(city="Oslo")


def test_internal_name_is_not_a_json_key():
    room = HotelRoom.from_dict({"hotel_id": 8})
    assert room.hotel_id == 0


@pytest.mark.parametrize(
    "cls, data",
    [
        (Hotel, {"stars": "five"}),
        (Hotel, {"stars": 4.0}),
        (Hotel, {"stars": True}),
        (Hotel, {"country": 12}),
        (HotelRoom, {"busy": 1}),
        (Visitor, {"age": "30"}),
    ],
)
def test_wrong_types_are_rejected(cls, data):
    with pytest.raises(ValueError):
        cls.from_dict(data)


@pytest.mark.parametrize("data", [[], "hotel", 3])
def test_non_object_is_rejected(data):
    with pytest.raises(ValueError):
        Hotel.from_dict(data)