"""Idempotent creation of the reservation keyspace objects.

Every table serves exactly one query shape; its partition key is the set of
columns a caller supplies for that query.
"""

import logging
from typing import Any

from cassandra import AlreadyExists

from reservations.errors import SchemaError

logger = logging.getLogger(__name__)

TYPE_ADDRESS = "address"
TABLE_RESERVATIONS_BY_HOTEL_DATE = "reservations_by_hotel_date"
TABLE_RESERVATIONS_BY_CONFIRMATION = "reservations_by_confirmation"
TABLE_RESERVATIONS_BY_GUEST = "reservations_by_guest"
TABLE_GUESTS = "guests"

_CREATE_KEYSPACE_CQL = """
    CREATE KEYSPACE IF NOT EXISTS {keyspace}
    WITH replication = {{'class': 'SimpleStrategy', 'replication_factor': {replication_factor}}}
"""

_CREATE_ADDRESS_TYPE_CQL = """
    CREATE TYPE IF NOT EXISTS {keyspace}.address (
        street text,
        city text,
        state_or_province text,
        postal_code text,
        country text
    )
"""

_CREATE_RESERVATIONS_BY_HOTEL_DATE_CQL = """
    CREATE TABLE IF NOT EXISTS {keyspace}.reservations_by_hotel_date (
        hotel_id text,
        start_date date,
        end_date date,
        room_number smallint,
        confirmation_number text,
        guest_id uuid,
        PRIMARY KEY ((hotel_id, start_date), room_number)
    ) WITH CLUSTERING ORDER BY (room_number ASC)
      AND comment = 'Q7. Find reservations by hotel and date'
"""

_CREATE_RESERVATIONS_BY_CONFIRMATION_CQL = """
    CREATE TABLE IF NOT EXISTS {keyspace}.reservations_by_confirmation (
        confirmation_number text PRIMARY KEY,
        hotel_id text,
        start_date date,
        end_date date,
        room_number smallint,
        guest_id uuid
    )
"""

_CREATE_RESERVATIONS_BY_GUEST_CQL = """
    CREATE TABLE IF NOT EXISTS {keyspace}.reservations_by_guest (
        guest_last_name text,
        hotel_id text,
        start_date date,
        end_date date,
        room_number smallint,
        confirmation_number text,
        guest_id uuid,
        PRIMARY KEY ((guest_last_name), hotel_id)
    ) WITH comment = 'Q8. Find reservations by guest name'
"""

_CREATE_GUESTS_CQL = """
    CREATE TABLE IF NOT EXISTS {keyspace}.guests (
        guest_id uuid PRIMARY KEY,
        first_name text,
        last_name text,
        title text,
        emails set<text>,
        phone_numbers list<text>,
        addresses map<text, frozen<address>>,
        confirmation_number text
    ) WITH comment = 'Q9. Find guest by ID'
"""

# Order matters: the guests table references the address type.
SCHEMA_OBJECTS: list[tuple[str, str, str]] = [
    ("Type", TYPE_ADDRESS, _CREATE_ADDRESS_TYPE_CQL),
    ("Table", TABLE_RESERVATIONS_BY_HOTEL_DATE, _CREATE_RESERVATIONS_BY_HOTEL_DATE_CQL),
    ("Table", TABLE_RESERVATIONS_BY_CONFIRMATION, _CREATE_RESERVATIONS_BY_CONFIRMATION_CQL),
    ("Table", TABLE_RESERVATIONS_BY_GUEST, _CREATE_RESERVATIONS_BY_GUEST_CQL),
    ("Table", TABLE_GUESTS, _CREATE_GUESTS_CQL),
]


def _execute_ddl(session: Any, kind: str, name: str, statement: str) -> None:
    try:
        session.execute(statement)
        logger.debug("+ %s '%s' has been created (if needed)", kind, name)
    except AlreadyExists:
        # Another process won the race between its existence check and ours
        logger.debug("+ %s '%s' already exists", kind, name)
    except Exception as e:
        raise SchemaError(f"Failed to create {kind.lower()} '{name}': {e}") from e


def ensure_schema(
    session: Any,
    keyspace: str,
    create_keyspace: bool = False,
    replication_factor: int = 1,
) -> None:
    """Create the address type and the four reservation tables if absent."""
    if create_keyspace:
        _execute_ddl(
            session,
            "Keyspace",
            keyspace,
            _CREATE_KEYSPACE_CQL.format(keyspace=keyspace, replication_factor=replication_factor),
        )

    for kind, name, template in SCHEMA_OBJECTS:
        _execute_ddl(session, kind, name, template.format(keyspace=keyspace))

    logger.info("Schema has been successfully initialized in keyspace '%s'", keyspace)
