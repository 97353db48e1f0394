"""Cassandra session lifecycle for the comment store.

Sessions come from cassandra-asyncio-driver's ``Cluster``, which adds
``session.aexecute()`` on top of cassandra-driver so queries can be
awaited from request handlers. Startup also creates the keyspace and the
comment tables when they are missing.
"""

import structlog
from cassandra import DriverException
from cassandra.auth import PlainTextAuthProvider
from cassandra.cluster import NoHostAvailable
from cassandra.policies import DCAwareRoundRobinPolicy, TokenAwarePolicy
from cassandra_asyncio.cluster import Cluster

from comment_api.comments.models import COMMENTS_TABLES_CQL
from comment_api.config.settings import Settings, get_settings


logger = structlog.get_logger(__name__)


def replication_options(settings: Settings) -> dict[str, str | int]:
    """Keyspace replication map for the configured strategy."""
    options: dict[str, str | int] = {"class": settings.cassandra_replication_strategy}
    if settings.cassandra_replication_strategy == "NetworkTopologyStrategy":
        for datacenter in settings.cassandra_datacenters:
            options[datacenter] = settings.cassandra_replication_factor
    else:
        options["replication_factor"] = settings.cassandra_replication_factor
    return options


def keyspace_cql(settings: Settings) -> str:
    """CREATE KEYSPACE statement for the comment keyspace."""
    replication = ", ".join(
        f"'{key}': {value}" if isinstance(value, int) else f"'{key}': '{value}'"
        for key, value in replication_options(settings).items()
    )
    return (
        f"CREATE KEYSPACE IF NOT EXISTS {settings.cassandra_keyspace} "
        f"WITH replication = {{{replication}}} AND durable_writes = true"
    )


def build_cluster(settings: Settings) -> Cluster:
    auth_provider = None
    if settings.cassandra_username and settings.cassandra_password:
        auth_provider = PlainTextAuthProvider(
            username=settings.cassandra_username,
            password=settings.cassandra_password,
        )

    return Cluster(
        contact_points=settings.cassandra_hosts,
        port=settings.cassandra_port,
        auth_provider=auth_provider,
        protocol_version=settings.cassandra_protocol_version,
        load_balancing_policy=TokenAwarePolicy(DCAwareRoundRobinPolicy()),
        connect_timeout=settings.cassandra_connect_timeout,
    )


class AsyncCassandraConnection:
    """Process-wide cluster and session, opened once at startup."""

    _cluster: Cluster | None = None
    _session = None

    @classmethod
    def connect(cls, settings: Settings):
        """Open the session, or return the one already open.

        Raises:
            ConnectionError: If no contact point accepts the connection
        """
        if cls._session is not None:
            return cls._session

        cluster = build_cluster(settings)
        try:
            session = cluster.connect()
        except (NoHostAvailable, DriverException) as e:
            cluster.shutdown()
            logger.error(
                "cassandra_connection_failed",
                hosts=settings.cassandra_hosts,
                error=str(e),
            )
            raise ConnectionError(f"Failed to connect to Cassandra: {e}") from e

        session.default_timeout = settings.cassandra_request_timeout
        cls._cluster, cls._session = cluster, session
        logger.info(
            "cassandra_connected",
            hosts=settings.cassandra_hosts,
            port=settings.cassandra_port,
        )
        return session

    @classmethod
    def disconnect(cls) -> None:
        if cls._session is not None:
            cls._session.shutdown()
        if cls._cluster is not None:
            cls._cluster.shutdown()
        if cls._session is not None or cls._cluster is not None:
            logger.info("cassandra_disconnected")
        cls._cluster, cls._session = None, None

    @classmethod
    def is_connected(cls) -> bool:
        return cls._session is not None and not cls._session.is_shutdown


async def init_async_cassandra(settings: Settings | None = None):
    """Connect and make sure the keyspace and comment tables exist.

    Returns:
        Session bound to the comment keyspace, with ``aexecute()``
    """
    settings = settings or get_settings()
    keyspace = settings.cassandra_keyspace

    session = AsyncCassandraConnection.connect(settings)
    await session.aexecute(keyspace_cql(settings))
    session.set_keyspace(keyspace)
    for table_cql in COMMENTS_TABLES_CQL:
        await session.aexecute(table_cql.format(keyspace=keyspace))

    logger.info(
        "cassandra_schema_ready",
        keyspace=keyspace,
        replication=replication_options(settings),
    )
    return session


async def shutdown_async_cassandra() -> None:
    AsyncCassandraConnection.disconnect()
