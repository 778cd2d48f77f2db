"""Guest profile store backed by the guests table."""

import logging
from collections.abc import Callable
from typing import Any
from uuid import UUID, uuid4

from reservations.db.mapper import row_to_guest
from reservations.db.schema import TABLE_GUESTS
from reservations.db.statements import DELETE_GUEST, FIND_GUEST, INSERT_GUEST, StatementCache, execute_statement
from reservations.errors import StatementError, ValidationError
from reservations.models import Guest

logger = logging.getLogger(__name__)


class GuestStore:
    def __init__(self, session: Any, statements: StatementCache, id_factory: Callable[[], UUID] = uuid4) -> None:
        if not statements.prepared:
            raise StatementError("GuestStore requires prepared statements. Call prepare_all() first.")
        self._session = session
        self._statements = statements
        self._id_factory = id_factory

    def _execute(self, name: str, values: tuple) -> Any:
        return execute_statement(self._session, self._statements, name, values, TABLE_GUESTS)

    def upsert(self, guest: Guest) -> UUID:
        """Insert or overwrite the guest row. Assigns a guest id in place when missing."""
        if guest is None:
            raise ValidationError("guest must not be None")
        if guest.guest_id is None:
            guest.guest_id = self._id_factory()

        self._execute(
            INSERT_GUEST,
            (
                guest.guest_id,
                guest.first_name,
                guest.last_name,
                guest.title,
                guest.emails,
                guest.phone_numbers,
                guest.addresses,
                guest.confirmation_number,
            ),
        )
        return guest.guest_id

    def find_by_id(self, guest_id: UUID) -> Guest | None:
        if guest_id is None:
            raise ValidationError("guest_id must not be None")
        row = self._execute(FIND_GUEST, (guest_id,)).one()
        if row is None:
            logger.debug("Unable to load guest with id: %s", guest_id)
            return None
        return row_to_guest(row)

    def delete(self, guest_id: UUID) -> bool:
        if self.find_by_id(guest_id) is None:
            return False
        self._execute(DELETE_GUEST, (guest_id,))
        return True
