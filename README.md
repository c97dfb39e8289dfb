# bookings

A small hotel booking service. It keeps hotels, hotel rooms and visitors in
an SQL database reached through SQLAlchemy, and serves the hotels over a JSON
HTTP API built on Flask.

## Installing

```
pip install .
```

The package depends on Flask and SQLAlchemy. SQLite works out of the box;
for any other database install the SQLAlchemy driver it needs.

## Running the server

```
bookings --database-url sqlite:///bookings.db
```

Options:

- `--database-url URL`: the SQLAlchemy database URL. Defaults to the
  `DATABASE_URL` environment variable; one of the two is required.
- `--reload`: roll every migration back before applying them again, which
  leaves empty tables.
- `--port PORT`: port to listen on, 8080 by default. The server listens on
  all interfaces (`0.0.0.0`) using Flask's built-in server.

On start it sets up logging to standard output, connects, brings the schema
up to date and serves the API. If the database cannot be reached or migrated
it logs `failed to init storage` and exits with status 1.

## HTTP API

| Method | Path          | Does                            |
|--------|---------------|---------------------------------|
| POST   | `/hotel/`     | create a hotel from a JSON body |
| GET    | `/hotel/`     | list all hotels                 |
| GET    | `/hotel/<id>` | fetch one hotel by its id       |

A hotel looks like this:

```json
{"id":1,"country":"Italy","city":"Rome","hotel_name":"Hotel Roma","stars":4}
```

- `POST /hotel/` answers 200 with the hotel as it was sent. An empty body
  gives 400 with `{"error":"EOF"}`; a body that is not valid JSON, or has a
  field of the wrong type, gives 400 with the decoding error as `error`. If the
  database refuses the hotel (`stars` outside 1 to 5, a `hotel_name` already
  taken, ...) the answer is 400 with `{"error":{}}`.
- `GET /hotel/` answers 200 with a JSON array of hotels ordered by id, or
  `null` when there are none; on a database failure 400 with `{"err":{}}`.
- `GET /hotel/<id>` answers 200 with the hotel's JSON text wrapped as a JSON
  string (for example `"{\"id\":1,...}"`). An id that is not a decimal number
  is read as 0. A missing hotel or a database failure gives 400 with
  `{"err":{}}`.

## Using it as a library

```python
import sys

from bookings.logsetup import setup_logger
from bookings.router import setup_router
from bookings.storage import Storage

setup_logger(sys.stdout)

storage = Storage("sqlite:///bookings.db", reload=False)
app = setup_router(storage)
app.run(port=8080)
```

The storage can be used on its own, also as a context manager that closes it:

```python
from bookings.storage import Storage

with Storage("sqlite:///bookings.db") as storage:
    storage.create_hotel("Italy", "Rome", "Hotel Roma", 4)
    print(storage.get_all_hotels())
```

### Modules

- `bookings.models`: the `Hotel`, `HotelRoom` and `Visitor` dataclasses, each
  with `to_dict()` and `from_dict()` for their JSON form. `from_dict` leaves
  missing or `null` fields at their zero values and raises `ValueError` for a
  value of the wrong type.
- `bookings.migrations`: the schema as three ordered `Migration`s (hotels,
  hotel rooms, visitors), with the applied version kept in a
  `goose_db_version` table. `apply_up(engine)` applies the pending ones,
  `apply_down_to(engine, version)` rolls back those above `version`, and
  `current_version(engine)` reports where the database stands. Both apply
  functions return the versions they touched. Failures raise `MigrationError`.
- `bookings.storage`: `Storage(database_url, reload=False)` connects, runs
  the migrations and offers `create_*`, `get_all_*`, `get_*`, `delete_*` and
  `update_*` for hotels, hotel rooms and visitors. Reads return JSON text;
  listing an empty table returns `null`. Deleting a missing row is not an
  error. `update_hotel_room` leaves the `busy` flag as it was, and
  `update_visitor` returns an empty string when the visitor cannot be read
  back. Failures raise `StorageError`; reading a missing row raises
  `NotFoundError`, a subclass of it. On SQLite, foreign keys are switched on.
- `bookings.handlers`: `post_hotel_handler`, `get_all_hotel_handler` and
  `get_hotel_handler`, each taking a logger and an object with the matching
  storage method and returning a Flask view.
- `bookings.router`: `setup_router(storage)` builds the Flask application,
  and `main()` is the `bookings` command.
- `bookings.logsetup`: `setup_logger(stream=None)` installs a debug-level
  handler on the root logger that writes `time=... level=... msg=...` lines
  with any extra fields as `key=value`; `err(exc)` returns `{"error": ...}`
  for use as a log record's `extra`.

## Data

- Hotel: `id`, `country`, `city`, `hotel_name`, `stars` (between 1 and 5,
  name unique)
- Hotel room: `id`, `hotels_id`, `rooms`, `meals`, `bar`, `services`, `busy`
- Visitor: `visitor_id`, `hotel_id`, `hotel_room_id`, `first_name`,
  `last_name`, `age` (between 18 and 100)

## What it does not do

- The HTTP API covers creating, listing and fetching hotels only. Updating
  or deleting hotels, and everything about hotel rooms and visitors, is
  available through `Storage` but has no HTTP route.
- There is no configuration file: the database URL comes from the command
  line or the `DATABASE_URL` environment variable.
- There is no authentication and no production-grade server; `bookings` runs
  Flask's development server.