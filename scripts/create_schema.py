#!/usr/bin/env python3
"""Create the reservation keyspace objects for local development.

Creates the keyspace (SimpleStrategy), the address type and the four
reservation tables against the cluster named by CASSANDRA_CONTACT_POINTS.
Safe to run repeatedly.

Usage:
    python scripts/create_schema.py
"""

import sys
from pathlib import Path

# Add src to path for config import
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from reservations.config import get_config
from reservations.db import CassandraClient, ensure_schema
from reservations.errors import ReservationError


def main():
    """Create all keyspace objects."""
    config = get_config()

    hosts = ",".join(config.cassandra_contact_points)
    print(f"Creating schema in keyspace '{config.cassandra_keyspace}' at {hosts}:{config.cassandra_port}...")
    print()

    try:
        with CassandraClient(config) as client:
            ensure_schema(
                client.session,
                config.cassandra_keyspace,
                create_keyspace=True,
                replication_factor=config.replication_factor,
            )
            tables = client.session.cluster.metadata.keyspaces[config.cassandra_keyspace].tables
            for name in sorted(tables):
                print(f"✓ {name}")
    except ReservationError as e:
        print(f"✗ {e.message}")
        sys.exit(1)

    print()
    print("✅ Reservation schema ready")


if __name__ == "__main__":
    main()
