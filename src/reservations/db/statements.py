"""Prepared statement templates, compiled once per process and reused for every call."""

import logging
from collections.abc import Sequence
from typing import Any

from cassandra import OperationTimedOut, Timeout

from reservations.errors import ErrorCode, StatementError, StorageError

logger = logging.getLogger(__name__)

EXIST_RESERVATION = "exist_reservation"
FIND_RESERVATION = "find_reservation"
FIND_ALL_RESERVATIONS = "find_all_reservations"
SEARCH_RESERVATIONS_BY_HOTEL_DATE = "search_reservations_by_hotel_date"
INSERT_RESERVATION_BY_HOTEL_DATE = "insert_reservation_by_hotel_date"
INSERT_RESERVATION_BY_CONFIRMATION = "insert_reservation_by_confirmation"
DELETE_RESERVATION_BY_HOTEL_DATE = "delete_reservation_by_hotel_date"
DELETE_RESERVATION_BY_CONFIRMATION = "delete_reservation_by_confirmation"
DELETE_RESERVATION_BY_GUEST = "delete_reservation_by_guest"
INSERT_RESERVATION_BY_GUEST = "insert_reservation_by_guest"
SEARCH_RESERVATIONS_BY_GUEST = "search_reservations_by_guest"
INSERT_GUEST = "insert_guest"
FIND_GUEST = "find_guest"
DELETE_GUEST = "delete_guest"

_RESERVATION_COLUMNS = "confirmation_number, hotel_id, start_date, end_date, room_number, guest_id"

QUERIES: dict[str, str] = {
    EXIST_RESERVATION: (
        "SELECT confirmation_number FROM {keyspace}.reservations_by_confirmation WHERE confirmation_number = ?"
    ),
    FIND_RESERVATION: "SELECT * FROM {keyspace}.reservations_by_confirmation WHERE confirmation_number = ?",
    FIND_ALL_RESERVATIONS: "SELECT * FROM {keyspace}.reservations_by_confirmation",
    SEARCH_RESERVATIONS_BY_HOTEL_DATE: (
        "SELECT * FROM {keyspace}.reservations_by_hotel_date WHERE hotel_id = ? AND start_date = ?"
    ),
    INSERT_RESERVATION_BY_HOTEL_DATE: (
        f"INSERT INTO {{keyspace}}.reservations_by_hotel_date ({_RESERVATION_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?)"
    ),
    INSERT_RESERVATION_BY_CONFIRMATION: (
        f"INSERT INTO {{keyspace}}.reservations_by_confirmation ({_RESERVATION_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?)"
    ),
    DELETE_RESERVATION_BY_HOTEL_DATE: (
        "DELETE FROM {keyspace}.reservations_by_hotel_date WHERE hotel_id = ? AND start_date = ? AND room_number = ?"
    ),
    DELETE_RESERVATION_BY_CONFIRMATION: (
        "DELETE FROM {keyspace}.reservations_by_confirmation WHERE confirmation_number = ?"
    ),
    INSERT_RESERVATION_BY_GUEST: (
        f"INSERT INTO {{keyspace}}.reservations_by_guest (guest_last_name, {_RESERVATION_COLUMNS}) "
        "VALUES (?, ?, ?, ?, ?, ?, ?)"
    ),
    SEARCH_RESERVATIONS_BY_GUEST: "SELECT * FROM {keyspace}.reservations_by_guest WHERE guest_last_name = ?",
    # Conditional: the guest-name partition holds one row per hotel, which a newer reservation may own
    DELETE_RESERVATION_BY_GUEST: (
        "DELETE FROM {keyspace}.reservations_by_guest WHERE guest_last_name = ? AND hotel_id = ? "
        "IF confirmation_number = ?"
    ),
    INSERT_GUEST: (
        "INSERT INTO {keyspace}.guests (guest_id, first_name, last_name, title, emails, phone_numbers, "
        "addresses, confirmation_number) VALUES (?, ?, ?, ?, ?, ?, ?, ?)"
    ),
    FIND_GUEST: "SELECT * FROM {keyspace}.guests WHERE guest_id = ?",
    DELETE_GUEST: "DELETE FROM {keyspace}.guests WHERE guest_id = ?",
}


class StatementCache:
    def __init__(self, session: Any, keyspace: str) -> None:
        self._session = session
        self._keyspace = keyspace
        self._statements: dict[str, Any] = {}

    @property
    def prepared(self) -> bool:
        return len(self._statements) == len(QUERIES)

    def prepare_all(self) -> None:
        """Prepare every template. Later calls are no-ops."""
        if self.prepared:
            return

        statements = {}
        for name, template in QUERIES.items():
            try:
                statements[name] = self._session.prepare(template.format(keyspace=self._keyspace))
            except Exception as e:
                raise StatementError(f"Failed to prepare statement '{name}': {e}") from e

        self._statements = statements
        logger.info("Statements have been successfully prepared (%d templates)", len(statements))

    def get(self, name: str) -> Any:
        try:
            return self._statements[name]
        except KeyError:
            raise StatementError(f"Statement '{name}' has not been prepared") from None


def execute_statement(session: Any, statements: StatementCache, name: str, values: Sequence[Any], table: str) -> Any:
    """Bind and execute one cached template. Driver failures become StorageError."""
    bound = statements.get(name).bind(values)
    try:
        return session.execute(bound)
    except (OperationTimedOut, Timeout) as e:
        raise StorageError(f"Timed out on {table}: {e}", code=ErrorCode.TIMEOUT) from e
    except Exception as e:
        raise StorageError(f"Statement '{name}' on {table} failed: {e}") from e
