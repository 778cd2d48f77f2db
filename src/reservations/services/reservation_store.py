"""Reservation store — keeps the denormalized reservation tables in step.

Cassandra has no joins and no multi-table transactions. Every reservation is
written to one table per query shape, and each read goes to the table whose
partition key the caller's arguments satisfy:

    reservations_by_confirmation  exists / find_by_confirmation_number / find_all
    reservations_by_hotel_date    find_by_hotel_and_date
    reservations_by_guest         find_by_guest_last_name

upsert and delete touch several tables in sequence. If a later step fails the
earlier ones are not rolled back; a PartialWriteError is raised instead. A
concurrent delete can also race the second step of an upsert for the same
confirmation number. Both writes are idempotent on their primary keys, so
retrying the whole operation converges.

Re-upserting a confirmation number with a different hotel_id, start_date or
room_number leaves the old reservations_by_hotel_date row behind: that table
is keyed by those columns and upsert does not read before writing. A later
delete only removes the row for the current values. The same holds for the
guest-name copy when the hotel changes.
"""

import logging
from collections.abc import Callable, Iterator, Sequence
from datetime import date
from typing import Any
from uuid import uuid4

from reservations.db.mapper import row_to_reservation
from reservations.db.schema import (
    TABLE_GUESTS,
    TABLE_RESERVATIONS_BY_CONFIRMATION,
    TABLE_RESERVATIONS_BY_GUEST,
    TABLE_RESERVATIONS_BY_HOTEL_DATE,
)
from reservations.db.statements import (
    DELETE_RESERVATION_BY_CONFIRMATION,
    DELETE_RESERVATION_BY_GUEST,
    DELETE_RESERVATION_BY_HOTEL_DATE,
    EXIST_RESERVATION,
    FIND_ALL_RESERVATIONS,
    FIND_GUEST,
    FIND_RESERVATION,
    INSERT_RESERVATION_BY_CONFIRMATION,
    INSERT_RESERVATION_BY_GUEST,
    INSERT_RESERVATION_BY_HOTEL_DATE,
    SEARCH_RESERVATIONS_BY_GUEST,
    SEARCH_RESERVATIONS_BY_HOTEL_DATE,
    StatementCache,
    execute_statement,
)
from reservations.errors import PartialWriteError, StatementError, StorageError, ValidationError
from reservations.models import Reservation

logger = logging.getLogger(__name__)


def _new_confirmation_number() -> str:
    return str(uuid4())


def _require(value: Any, name: str) -> None:
    if value is None:
        raise ValidationError(f"{name} must not be None")


def _reservation_values(reservation: Reservation) -> tuple:
    return (
        reservation.confirmation_number,
        reservation.hotel_id,
        reservation.start_date,
        reservation.end_date,
        reservation.room_number,
        reservation.guest_id,
    )


class ReservationStore:
    def __init__(
        self,
        session: Any,
        statements: StatementCache,
        id_factory: Callable[[], str] = _new_confirmation_number,
    ) -> None:
        if not statements.prepared:
            raise StatementError("ReservationStore requires prepared statements. Call prepare_all() first.")
        self._session = session
        self._statements = statements
        self._id_factory = id_factory

    def _execute(self, name: str, values: Sequence[Any], table: str) -> Any:
        return execute_statement(self._session, self._statements, name, values, table)

    def _execute_later_step(self, name: str, values: Sequence[Any], table: str, completed: list[str]) -> None:
        try:
            self._execute(name, values, table)
        except StorageError as e:
            logger.error("Partial write: %s applied, %s failed: %s", ", ".join(completed), table, e.message)
            raise PartialWriteError(
                f"{table} failed after {', '.join(completed)} already applied: {e.message}",
                completed=completed,
                failed=table,
            ) from e

    def exists(self, confirmation_number: str) -> bool:
        """True if reservations_by_confirmation has a row for this confirmation number."""
        _require(confirmation_number, "confirmation_number")
        result = self._execute(EXIST_RESERVATION, (confirmation_number,), TABLE_RESERVATIONS_BY_CONFIRMATION)
        return result.one() is not None

    def find_by_confirmation_number(self, confirmation_number: str) -> Reservation | None:
        _require(confirmation_number, "confirmation_number")
        result = self._execute(FIND_RESERVATION, (confirmation_number,), TABLE_RESERVATIONS_BY_CONFIRMATION)
        # An empty result is expected: delete() uses this lookup to check existence
        row = result.one()
        if row is None:
            logger.debug("Unable to load reservation with confirmation number: %s", confirmation_number)
            return None
        return row_to_reservation(row)

    def iter_all(self) -> Iterator[Reservation]:
        """Lazily map every row of the full scan. Each call starts a new scan."""
        result = self._execute(FIND_ALL_RESERVATIONS, (), TABLE_RESERVATIONS_BY_CONFIRMATION)
        for row in result:
            yield row_to_reservation(row)

    def find_all(self) -> list[Reservation]:
        # No paging exposed: the driver fetches every page while we iterate
        return list(self.iter_all())

    def find_by_hotel_and_date(self, hotel_id: str, start_date: date) -> list[Reservation]:
        """Reservations starting on start_date at hotel_id, ordered by room number."""
        _require(hotel_id, "hotel_id")
        _require(start_date, "start_date")
        result = self._execute(
            SEARCH_RESERVATIONS_BY_HOTEL_DATE,
            (hotel_id, start_date),
            TABLE_RESERVATIONS_BY_HOTEL_DATE,
        )
        return [row_to_reservation(row) for row in result]

    def upsert(self, reservation: Reservation) -> str:
        """Write the reservation to the hotel-date and confirmation tables.

        Assigns a new confirmation number to ``reservation`` in place when it
        has none, and returns the confirmation number.
        """
        _require(reservation, "reservation")
        if not reservation.confirmation_number:
            reservation.confirmation_number = self._id_factory()

        values = _reservation_values(reservation)
        self._execute(INSERT_RESERVATION_BY_HOTEL_DATE, values, TABLE_RESERVATIONS_BY_HOTEL_DATE)
        self._execute_later_step(
            INSERT_RESERVATION_BY_CONFIRMATION,
            values,
            TABLE_RESERVATIONS_BY_CONFIRMATION,
            completed=[TABLE_RESERVATIONS_BY_HOTEL_DATE],
        )
        return reservation.confirmation_number

    def _resolve_guest_last_name(self, reservation: Reservation) -> str | None:
        row = self._execute(FIND_GUEST, (reservation.guest_id,), TABLE_GUESTS).one()
        if row is None or not row.last_name:
            logger.debug("No guest last name for guest %s; guest-name copy not addressable", reservation.guest_id)
            return None
        return row.last_name

    def delete(self, confirmation_number: str, guest_last_name: str | None = None) -> bool:
        """Remove every copy of the reservation. False if it does not exist.

        The guest-name copy is keyed by last name, which the reservation does
        not carry. Pass ``guest_last_name`` when it was used with
        index_for_guest; otherwise it is read from the guest profile.
        """
        # The hotel-date primary key is not the confirmation number, so load the row first
        reservation = self.find_by_confirmation_number(confirmation_number)
        if reservation is None:
            return False
        if guest_last_name is None:
            guest_last_name = self._resolve_guest_last_name(reservation)

        self._execute(
            DELETE_RESERVATION_BY_HOTEL_DATE,
            (reservation.hotel_id, reservation.start_date, reservation.room_number),
            TABLE_RESERVATIONS_BY_HOTEL_DATE,
        )
        self._execute_later_step(
            DELETE_RESERVATION_BY_CONFIRMATION,
            (confirmation_number,),
            TABLE_RESERVATIONS_BY_CONFIRMATION,
            completed=[TABLE_RESERVATIONS_BY_HOTEL_DATE],
        )
        if guest_last_name:
            self._execute_later_step(
                DELETE_RESERVATION_BY_GUEST,
                (guest_last_name, reservation.hotel_id, confirmation_number),
                TABLE_RESERVATIONS_BY_GUEST,
                completed=[TABLE_RESERVATIONS_BY_HOTEL_DATE, TABLE_RESERVATIONS_BY_CONFIRMATION],
            )
        return True

    def index_for_guest(self, reservation: Reservation, guest_last_name: str) -> None:
        """Write the guest-name copy of an already upserted reservation."""
        _require(reservation, "reservation")
        _require(guest_last_name, "guest_last_name")
        if not reservation.confirmation_number:
            raise ValidationError("reservation must be upserted before it is indexed by guest")
        self._execute(
            INSERT_RESERVATION_BY_GUEST,
            (guest_last_name, *_reservation_values(reservation)),
            TABLE_RESERVATIONS_BY_GUEST,
        )

    def find_by_guest_last_name(self, guest_last_name: str) -> list[Reservation]:
        _require(guest_last_name, "guest_last_name")
        result = self._execute(SEARCH_RESERVATIONS_BY_GUEST, (guest_last_name,), TABLE_RESERVATIONS_BY_GUEST)
        return [row_to_reservation(row) for row in result]
