"""Hotel booking service: SQL storage of hotels, rooms and visitors with an HTTP API for hotels."""

__version__ = "0.1.0"