"""Cassandra client — cluster connection and session lifecycle."""

import logging

from cassandra import ConsistencyLevel
from cassandra.auth import PlainTextAuthProvider
from cassandra.cluster import EXEC_PROFILE_DEFAULT, Cluster, ExecutionProfile, Session
from cassandra.policies import DCAwareRoundRobinPolicy, TokenAwarePolicy
from cassandra.query import named_tuple_factory

from reservations.config import Config
from reservations.db.schema import TYPE_ADDRESS
from reservations.errors import ErrorCode, ReservationError
from reservations.models.guest import Address

logger = logging.getLogger(__name__)


class CassandraClient:
    def __init__(self, config: Config) -> None:
        self._config = config
        self._cluster: Cluster | None = None
        self._session: Session | None = None

    def _execution_profile(self) -> ExecutionProfile:
        consistency = ConsistencyLevel.name_to_value.get(self._config.consistency)
        if consistency is None:
            raise ReservationError(f"Unknown consistency level: {self._config.consistency}")

        kwargs = {
            "request_timeout": self._config.request_timeout,
            "consistency_level": consistency,
            "row_factory": named_tuple_factory,
        }
        if self._config.cassandra_local_dc:
            kwargs["load_balancing_policy"] = TokenAwarePolicy(
                DCAwareRoundRobinPolicy(local_dc=self._config.cassandra_local_dc)
            )
        return ExecutionProfile(**kwargs)

    def connect(self) -> None:
        auth_provider = None
        if self._config.cassandra_username:
            auth_provider = PlainTextAuthProvider(
                username=self._config.cassandra_username,
                password=self._config.cassandra_password,
            )

        self._cluster = Cluster(
            contact_points=self._config.cassandra_contact_points,
            port=self._config.cassandra_port,
            auth_provider=auth_provider,
            execution_profiles={EXEC_PROFILE_DEFAULT: self._execution_profile()},
        )
        self._session = self._cluster.connect()
        logger.info(
            "Connected to Cassandra at %s:%d",
            ",".join(self._config.cassandra_contact_points),
            self._config.cassandra_port,
        )

    def disconnect(self) -> None:
        """Close all pooled connections. Safe to call more than once."""
        if self._cluster is not None:
            self._cluster.shutdown()
            logger.info("Cassandra session has been successfully closed")
        self._cluster = None
        self._session = None

    def _require_session(self) -> Session:
        """Return the active session or raise if not connected."""
        if self._session is None or self._session.is_shutdown:
            raise ReservationError(
                "CassandraClient is not connected. Call connect() first.",
                code=ErrorCode.NOT_CONNECTED,
            )
        return self._session

    @property
    def session(self) -> Session:
        return self._require_session()

    def _require_cluster(self) -> Cluster:
        """Return the connected cluster or raise if not connected."""
        if self._cluster is None:
            raise ReservationError(
                "CassandraClient is not connected. Call connect() first.",
                code=ErrorCode.NOT_CONNECTED,
            )
        return self._cluster

    def register_address_type(self, keyspace: str) -> None:
        """Decode frozen<address> values as Address models. Requires the type to exist."""
        self._require_cluster().register_user_type(keyspace, TYPE_ADDRESS, Address)

    def health_check(self) -> bool:
        try:
            session = self._require_session()
            session.execute("SELECT release_version FROM system.local")
            return True
        except Exception:
            return False

    def __enter__(self) -> "CassandraClient":
        self.connect()
        return self

    def __exit__(self, *args: object) -> None:
        self.disconnect()
