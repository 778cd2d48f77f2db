"""Shared test fixtures for the reservation data layer."""

import sys
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Load .env file for test configuration
load_dotenv()

# Add src directory to Python path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

INTEGRATION_KEYSPACE = "reservation_test"


# Cassandra fixtures
@pytest.fixture(scope="session")
def cassandra_client():
    """Provide a connected client with the schema in a throwaway keyspace."""
    from cassandra.cluster import NoHostAvailable

    from reservations.config import get_config
    from reservations.db import CassandraClient, ensure_schema

    config = get_config().model_copy(update={"cassandra_keyspace": INTEGRATION_KEYSPACE})
    client = CassandraClient(config)
    try:
        client.connect()
    except NoHostAvailable:
        pytest.skip("Cassandra is not reachable")

    ensure_schema(client.session, INTEGRATION_KEYSPACE, create_keyspace=True)
    client.register_address_type(INTEGRATION_KEYSPACE)
    yield client

    client.session.execute(f"DROP KEYSPACE IF EXISTS {INTEGRATION_KEYSPACE}")
    client.disconnect()


@pytest.fixture(scope="session")
def cassandra_statements(cassandra_client):
    from reservations.db import StatementCache

    statements = StatementCache(cassandra_client.session, INTEGRATION_KEYSPACE)
    statements.prepare_all()
    return statements


@pytest.fixture
def reservation_store(cassandra_client, cassandra_statements):
    """Provide a ReservationStore backed by the integration keyspace."""
    from reservations.db.schema import SCHEMA_OBJECTS
    from reservations.services import ReservationStore

    yield ReservationStore(cassandra_client.session, cassandra_statements)

    # Cleanup: empty every table written during the test
    for kind, name, _ in SCHEMA_OBJECTS:
        if kind == "Table":
            cassandra_client.session.execute(f"TRUNCATE {INTEGRATION_KEYSPACE}.{name}")


@pytest.fixture
def guest_store(cassandra_client, cassandra_statements):
    from reservations.services import GuestStore

    yield GuestStore(cassandra_client.session, cassandra_statements)

    cassandra_client.session.execute(f"TRUNCATE {INTEGRATION_KEYSPACE}.guests")
