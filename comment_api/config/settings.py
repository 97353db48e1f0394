"""Comment API settings, read from the environment and ``.env``."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Every knob of the service; env var names are the field names."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="comment-api", description="Service name in logs")
    app_version: str = Field(default="0.1.0", description="Reported by /health")
    environment: Literal["development", "staging", "production", "testing"] = Field(
        default="development", description="Deployment stage"
    )
    debug: bool = Field(default=True, description="Reported by /health/ready")

    # Uvicorn
    api_host: str = Field(default="0.0.0.0", description="Bind address")
    api_port: int = Field(default=8000, description="Bind port")
    api_workers: int = Field(default=1, description="Worker processes")
    api_reload: bool = Field(
        default=True, description="Reload on code changes (development only)"
    )

    # Comment resource
    comments_base_path: str = Field(
        default="/api/comments", description="Mount path of the comment routes"
    )
    comment_store_backend: Literal["cassandra", "memory"] = Field(
        default="cassandra", description="Where comments are kept"
    )

    # Cassandra connection
    cassandra_hosts: list[str] = Field(
        default=["localhost"], description="Contact points"
    )
    cassandra_port: int = Field(default=9042, description="Native protocol port")
    cassandra_username: str | None = Field(default=None, description="Auth user")
    cassandra_password: str | None = Field(default=None, description="Auth password")
    cassandra_protocol_version: int = Field(default=4, description="Protocol version")
    cassandra_connect_timeout: float = Field(
        default=10.0, description="Seconds to wait for the initial connection"
    )
    cassandra_request_timeout: float = Field(
        default=10.0, description="Seconds before a query fails as a store error"
    )

    # Cassandra schema
    cassandra_keyspace: str = Field(
        default="comment_api", description="Keyspace holding the comment tables"
    )
    cassandra_replication_strategy: Literal[
        "SimpleStrategy", "NetworkTopologyStrategy"
    ] = Field(default="SimpleStrategy", description="Keyspace replication class")
    cassandra_replication_factor: int = Field(
        default=1, ge=1, description="Replicas (per datacenter for NetworkTopology)"
    )
    cassandra_datacenters: list[str] = Field(
        default=["datacenter1"],
        description="Datacenters replicated to under NetworkTopologyStrategy",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="DEBUG", description="Root log level"
    )
    log_format: Literal["json", "console"] = Field(
        default="console", description="Console renderer"
    )
    log_include_caller_info: bool = Field(
        default=True, description="Add the caller location to events"
    )
    log_to_file: bool = Field(default=True, description="Also write rotating JSON logs")
    log_dir: str = Field(default="logs", description="Directory for log files")
    log_file_max_bytes: int = Field(
        default=10 * 1024 * 1024, description="Rotate after this many bytes"
    )
    log_file_backup_count: int = Field(default=5, description="Rotated files kept")
    log_requests: bool = Field(default=True, description="Log every HTTP request")
    log_exclude_paths: list[str] = Field(
        default=["/health"], description="Path prefixes left out of request logs"
    )

    # CORS
    cors_origins: list[str] = Field(default=["*"])
    cors_allow_credentials: bool = Field(default=True)
    cors_allow_methods: list[str] = Field(default=["*"])
    cors_allow_headers: list[str] = Field(default=["*"])
    cors_max_age: int = Field(default=600)

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
