"""HTTP routes of the booking service and its entry point."""

import argparse
import logging
import os

from flask import Flask

from .handlers import get_all_hotel_handler, get_hotel_handler, post_hotel_handler
from .logsetup import err, setup_logger
from .storage import Storage, StorageError

log = logging.getLogger(__name__)

DEFAULT_PORT = 8080


def setup_router(storage) -> Flask:
    """Build the application with the hotel routes bound to ``storage``."""
    app = Flask(__name__)
    handler_log = logging.getLogger("bookings.handlers")
    app.add_url_rule(
        "/hotel/",
        endpoint="post_hotel",
        view_func=post_hotel_handler(handler_log, storage),
        methods=["POST"],
    )
    app.add_url_rule(
        "/hotel/",
        endpoint="get_all_hotels",
        view_func=get_all_hotel_handler(handler_log, storage),
        methods=["GET"],
    )
    app.add_url_rule(
        "/hotel/<id>",
        endpoint="get_hotel",
        view_func=get_hotel_handler(handler_log, storage),
        methods=["GET"],
    )
    return app


def main(argv=None) -> int:
    """Connect to the database, migrate it and serve the HTTP API."""
    parser = argparse.ArgumentParser(prog="bookings")
    parser.add_argument(
        "--database-url",
        default=os.environ.get("DATABASE_URL"),
        help="database URL (default: $DATABASE_URL)",
    )
    parser.add_argument(
        "--reload", action="store_true", help="roll back every migration before applying them"
    )
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    args = parser.parse_args(argv)
    if not args.database_url:
        parser.error("a database URL is required")

    setup_logger()
    log.info("application started")

    try:
        storage = Storage(args.database_url, args.reload)
    except StorageError as exc:
        log.error("failed to init storage", extra=err(exc))
        return 1
    log.info("DB connected!")

    with storage:
        setup_router(storage).run(host="0.0.0.0", port=args.port)
    return 0