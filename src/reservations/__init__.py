"""
Hotel reservation data-access layer.

Keeps one logical reservation consistent across several denormalized Cassandra
tables. Each read is routed to the table whose partition key matches the query.
"""

__all__: list[str] = []
