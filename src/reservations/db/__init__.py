"""
Cassandra client, schema and statement templates for the reservation tables.
"""

from reservations.db.cassandra import CassandraClient
from reservations.db.schema import ensure_schema
from reservations.db.statements import StatementCache

__all__ = ["CassandraClient", "StatementCache", "ensure_schema"]
