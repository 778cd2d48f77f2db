"""In-memory stand-in for a Cassandra session.

Executes the prepared reservation and guest templates against dict-backed
tables so store behavior can be checked without a cluster.
"""

from collections import namedtuple

import pytest

from reservations.db.statements import QUERIES, StatementCache

KEYSPACE = "reservation"

ReservationRow = namedtuple(
    "ReservationRow", ["confirmation_number", "hotel_id", "start_date", "end_date", "room_number", "guest_id"]
)
GuestRow = namedtuple(
    "GuestRow",
    ["guest_id", "first_name", "last_name", "title", "emails", "phone_numbers", "addresses", "confirmation_number"],
)
ConfirmationOnlyRow = namedtuple("ConfirmationOnlyRow", ["confirmation_number"])


class FakePrepared:
    def __init__(self, query_string):
        self.query_string = query_string

    def bind(self, values):
        return FakeBound(self, tuple(values))


class FakeBound:
    def __init__(self, prepared_statement, values):
        self.prepared_statement = prepared_statement
        self.values = values


class FakeResult:
    def __init__(self, rows=()):
        self._rows = list(rows)

    def one(self):
        return self._rows[0] if self._rows else None

    def __iter__(self):
        return iter(self._rows)


class FakeSession:
    def __init__(self, keyspace=KEYSPACE):
        self._names = {template.format(keyspace=keyspace): name for name, template in QUERIES.items()}
        self.by_hotel_date = {}
        self.by_confirmation = {}
        self.by_guest = {}
        self.guests = {}
        self.executed = []
        self.prepared = []
        self.failures = {}

    def fail(self, statement_name, exc):
        """Make every execution of ``statement_name`` raise ``exc``."""
        self.failures[statement_name] = exc

    def prepare(self, query):
        self.prepared.append(query)
        return FakePrepared(query)

    def execute(self, bound):
        name = self._names[bound.prepared_statement.query_string]
        self.executed.append(name)
        if name in self.failures:
            raise self.failures[name]
        return getattr(self, "_" + name)(*bound.values)

    def _exist_reservation(self, confirmation_number):
        row = self.by_confirmation.get(confirmation_number)
        return FakeResult([ConfirmationOnlyRow(row.confirmation_number)] if row else [])

    def _find_reservation(self, confirmation_number):
        row = self.by_confirmation.get(confirmation_number)
        return FakeResult([row] if row else [])

    def _find_all_reservations(self):
        return FakeResult(self.by_confirmation.values())

    def _search_reservations_by_hotel_date(self, hotel_id, start_date):
        partition = self.by_hotel_date.get((hotel_id, start_date), {})
        return FakeResult(partition[room] for room in sorted(partition))

    def _insert_reservation_by_hotel_date(self, *values):
        row = ReservationRow(*values)
        self.by_hotel_date.setdefault((row.hotel_id, row.start_date), {})[row.room_number] = row
        return FakeResult()

    def _insert_reservation_by_confirmation(self, *values):
        row = ReservationRow(*values)
        self.by_confirmation[row.confirmation_number] = row
        return FakeResult()

    def _delete_reservation_by_hotel_date(self, hotel_id, start_date, room_number):
        self.by_hotel_date.get((hotel_id, start_date), {}).pop(room_number, None)
        return FakeResult()

    def _delete_reservation_by_confirmation(self, confirmation_number):
        self.by_confirmation.pop(confirmation_number, None)
        return FakeResult()

    def _insert_reservation_by_guest(self, guest_last_name, *values):
        row = ReservationRow(*values)
        self.by_guest.setdefault(guest_last_name, {})[row.hotel_id] = row
        return FakeResult()

    def _search_reservations_by_guest(self, guest_last_name):
        partition = self.by_guest.get(guest_last_name, {})
        return FakeResult(partition[hotel] for hotel in sorted(partition))

    def _delete_reservation_by_guest(self, guest_last_name, hotel_id, confirmation_number):
        partition = self.by_guest.get(guest_last_name, {})
        row = partition.get(hotel_id)
        if row is not None and row.confirmation_number == confirmation_number:
            del partition[hotel_id]
        return FakeResult()

    def _insert_guest(self, *values):
        row = GuestRow(*values)
        self.guests[row.guest_id] = row
        return FakeResult()

    def _find_guest(self, guest_id):
        row = self.guests.get(guest_id)
        return FakeResult([row] if row else [])

    def _delete_guest(self, guest_id):
        self.guests.pop(guest_id, None)
        return FakeResult()


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def fake_statements(fake_session):
    statements = StatementCache(fake_session, KEYSPACE)
    statements.prepare_all()
    return statements


@pytest.fixture
def store(fake_session, fake_statements):
    from reservations.services import ReservationStore

    return ReservationStore(fake_session, fake_statements)


@pytest.fixture
def guests(fake_session, fake_statements):
    from reservations.services import GuestStore

    return GuestStore(fake_session, fake_statements)
