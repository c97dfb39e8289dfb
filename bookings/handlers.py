"""HTTP handlers for the hotel endpoints."""

import json
import logging
import re
from typing import Any, Callable, Protocol

from flask import Response, request

from .logsetup import err
from .models import Hotel
from .storage import StorageError

_JSON_ESCAPES = str.maketrans(
    {
        "<": "\\u003c",
        ">": "\\u003e",
        "&": "\\u0026",
        "\u2028": "\\u2028",
        "\u2029": "\\u2029",
    }
)

_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT_MIN = -(2**63)
_INT_MAX = 2**63 - 1

_JSON_CONTENT_TYPE = "application/json; charset=utf-8"


class HotelCreator(Protocol):
    def create_hotel(self, country: str, city: str, hotel_name: str, stars: int) -> None:
        ...


class HotelGetter(Protocol):
    def get_hotel(self, hotel_id: int) -> str:
        ...


class HotelLister(Protocol):
    def get_all_hotels(self) -> str:
        ...


def _encode(value: Any) -> str:
    text = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return text.translate(_JSON_ESCAPES)


def _json_response(status: int, value: Any) -> Response:
    return Response(_encode(value), status=status, content_type=_JSON_CONTENT_TYPE)


def _parse_id(text: str) -> int:
    """Read a decimal id; text that is not a number reads as 0."""
    if not _INTEGER.fullmatch(text):
        return 0
    return max(_INT_MIN, min(_INT_MAX, int(text)))


def _logger(log: logging.Logger | None) -> logging.Logger:
    return log if log is not None else logging.getLogger(__name__)


def post_hotel_handler(
    log: logging.Logger | None, create_hotel: HotelCreator
) -> Callable[[], Response]:
    """Return a view that creates a hotel from the JSON request body."""
    logger = _logger(log)

    def post_hotel() -> Response:
        op = "handlers.hotelHandlers.PostHotelHandler"
        body = request.get_data(as_text=True)
        if not body.strip():
            logger.info("request body is empty", extra={"op": op})
            return _json_response(400, {"error": "EOF"})

        try:
            hotel = Hotel.from_dict(json.loads(body) or {})
        except ValueError as exc:
            logger.info("failed to decode request body", extra={"op": op, **err(exc)})
            return _json_response(400, {"error": str(exc)})

        logger.info("request body decoded", extra={"op": op})

        try:
            create_hotel.create_hotel(hotel.country, hotel.city, hotel.hotel_name, hotel.stars)
        except StorageError:
            logger.info("failed to create hotel", extra={"op": op})
            return _json_response(400, {"error": {}})

        logger.info("HOTEL CREATED", extra={"op": op})
        return _json_response(200, hotel.to_dict())

    return post_hotel


def get_all_hotel_handler(
    log: logging.Logger | None, get_hotels: HotelLister
) -> Callable[[], Response]:
    """Return a view that lists every hotel."""
    logger = _logger(log)

    def get_all_hotels() -> Response:
        op = "handlers.hotelHandlers.GetAllHotelHandler"
        try:
            data = get_hotels.get_all_hotels()
        except StorageError:
            logger.info("failed to get hotels", extra={"op": op})
            return _json_response(400, {"err": {}})

        logger.info("succssesful", extra={"op": op})
        return Response(data, status=200, content_type="application/json")

    return get_all_hotels


def get_hotel_handler(
    log: logging.Logger | None, get_hotel: HotelGetter
) -> Callable[..., Response]:
    """Return a view that fetches one hotel by the ``id`` path parameter.

    The stored JSON text is sent back encoded as a JSON string.
    """
    logger = _logger(log)

    def get_hotel_view(**params: str) -> Response:
        op = "handlers.hotelHandlers.GetHotelHandler"
        hotel_id = _parse_id(params.get("id", ""))
        try:
            data = get_hotel.get_hotel(hotel_id)
        except StorageError:
            logger.info("failed to get hotel", extra={"op": op})
            return _json_response(400, {"err": {}})

        return _json_response(200, data)

    return get_hotel_view