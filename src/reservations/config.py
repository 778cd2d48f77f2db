import json
from os import environ

import boto3
from pydantic import BaseModel, ConfigDict

_cached_credentials: dict[str, str] | None = None


def _resolve_credentials() -> dict[str, str]:
    """Fetch Cassandra credentials at runtime, with caching.

    A plain CASSANDRA_PASSWORD wins. Otherwise the secret referenced by
    CASSANDRA_SECRET_ARN is read from Secrets Manager; it may hold a JSON
    document with "username"/"password" keys or just the password string.
    """
    global _cached_credentials
    if _cached_credentials is not None:
        return _cached_credentials

    # Local dev: use env vars directly
    direct = environ.get("CASSANDRA_PASSWORD", "")
    if direct:
        _cached_credentials = {"password": direct}
        return _cached_credentials

    # Deployed: fetch from Secrets Manager by ARN
    arn = environ.get("CASSANDRA_SECRET_ARN", "")
    if not arn:
        return {}

    client = boto3.client("secretsmanager", region_name=environ.get("AWS_REGION", "us-east-1"))
    raw = client.get_secret_value(SecretId=arn)["SecretString"]
    try:
        secret = json.loads(raw)
    except json.JSONDecodeError:
        secret = {"password": raw}
    if not isinstance(secret, dict):
        secret = {"password": raw}
    _cached_credentials = {k: str(v) for k, v in secret.items() if k in ("username", "password")}
    return _cached_credentials


class Config(BaseModel):
    model_config = ConfigDict(frozen=True)

    cassandra_contact_points: list[str]
    cassandra_port: int
    cassandra_keyspace: str
    cassandra_local_dc: str | None = None
    cassandra_username: str | None = None
    cassandra_password: str = ""
    cassandra_secret_arn: str | None = None
    request_timeout: float = 10.0
    consistency: str = "LOCAL_QUORUM"
    create_keyspace: bool = False
    replication_factor: int = 1
    aws_region: str
    environment: str


_cached_config: Config | None = None


def _reset_config() -> None:
    """Reset cached config — for testing only."""
    global _cached_config, _cached_credentials
    _cached_config = None
    _cached_credentials = None


def _split_hosts(value: str) -> list[str]:
    return [host.strip() for host in value.split(",") if host.strip()]


def get_config() -> Config:
    global _cached_config
    if _cached_config is not None:
        return _cached_config

    credentials = _resolve_credentials()
    _cached_config = Config(
        cassandra_contact_points=_split_hosts(environ.get("CASSANDRA_CONTACT_POINTS", "127.0.0.1")),
        cassandra_port=int(environ.get("CASSANDRA_PORT", "9042")),
        cassandra_keyspace=environ.get("CASSANDRA_KEYSPACE", "reservation"),
        cassandra_local_dc=environ.get("CASSANDRA_LOCAL_DC"),
        cassandra_username=environ.get("CASSANDRA_USERNAME") or credentials.get("username"),
        cassandra_password=credentials.get("password", ""),
        cassandra_secret_arn=environ.get("CASSANDRA_SECRET_ARN"),
        request_timeout=float(environ.get("CASSANDRA_REQUEST_TIMEOUT", "10")),
        consistency=environ.get("CASSANDRA_CONSISTENCY", "LOCAL_QUORUM").upper(),
        create_keyspace=environ.get("CASSANDRA_CREATE_KEYSPACE", "false").lower() in ("1", "true", "yes"),
        replication_factor=int(environ.get("CASSANDRA_REPLICATION_FACTOR", "1")),
        aws_region=environ.get("AWS_REGION", "us-east-1"),
        environment=environ.get("ENVIRONMENT", "local"),
    )
    return _cached_config
