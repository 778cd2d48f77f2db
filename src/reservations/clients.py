"""Process-wide Cassandra session and stores — built once, released once at shutdown."""

import logging
from functools import lru_cache

from reservations.config import get_config
from reservations.db import CassandraClient, StatementCache, ensure_schema
from reservations.services import GuestStore, ReservationStore

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_cassandra_client() -> CassandraClient:
    config = get_config()
    client = CassandraClient(config)
    client.connect()
    try:
        ensure_schema(
            client.session,
            config.cassandra_keyspace,
            create_keyspace=config.create_keyspace,
            replication_factor=config.replication_factor,
        )
        client.register_address_type(config.cassandra_keyspace)
    except Exception:
        client.disconnect()
        raise
    return client


@lru_cache(maxsize=1)
def get_statement_cache() -> StatementCache:
    statements = StatementCache(get_cassandra_client().session, get_config().cassandra_keyspace)
    statements.prepare_all()
    return statements


@lru_cache(maxsize=1)
def get_reservation_store() -> ReservationStore:
    return ReservationStore(get_cassandra_client().session, get_statement_cache())


@lru_cache(maxsize=1)
def get_guest_store() -> GuestStore:
    return GuestStore(get_cassandra_client().session, get_statement_cache())


def shutdown() -> None:
    """Close the shared session if one was opened, and forget every cached handle."""
    if get_cassandra_client.cache_info().currsize:
        get_cassandra_client().disconnect()
    get_guest_store.cache_clear()
    get_reservation_store.cache_clear()
    get_statement_cache.cache_clear()
    get_cassandra_client.cache_clear()
    logger.info("Reservation data layer shut down")
