"""
Environment configuration loader with validation for the flight ledger.
"""

import os
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field, ValidationError, field_validator
from dotenv import load_dotenv

from ..store.backend import DEFAULT_NAMESPACE, InMemoryStore, KeyValueStore, ValkeyStore
from ..store.client import ValkeyClient
from ..store.config import ValkeyConfig

STORE_BACKENDS = ("memory", "valkey")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class LedgerConfig(BaseModel):
    """Configuration model for the flight ledger with validation."""

    # Storage
    store_backend: str = Field(default="valkey", description="Key-value store backend")
    key_namespace: str = Field(
        default=DEFAULT_NAMESPACE, min_length=1, description="Prefix for every store key"
    )

    # Valkey connection
    valkey_host: str = Field(default="localhost", description="Valkey server host")
    valkey_port: int = Field(default=6379, ge=1, le=65535, description="Valkey server port")
    valkey_password: Optional[str] = Field(default=None, description="Valkey server password")
    valkey_database: int = Field(default=0, ge=0, le=15, description="Valkey database number")
    valkey_max_connections: int = Field(default=10, ge=1, description="Maximum Valkey connections")
    valkey_socket_timeout: float = Field(default=5.0, gt=0, description="Valkey socket timeout in seconds")
    valkey_socket_connect_timeout: float = Field(
        default=5.0, gt=0, description="Valkey connection timeout in seconds"
    )
    valkey_retry_on_timeout: bool = Field(default=True, description="Retry Valkey commands that time out")
    valkey_health_check_interval: int = Field(
        default=30, ge=0, description="Seconds between Valkey connection health checks"
    )

    # Settlement
    escrow_account: str = Field(
        default="escrow", min_length=1, description="Account holding fares in escrow"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("store_backend")
    @classmethod
    def validate_store_backend(cls, v: str) -> str:
        if v.lower() not in STORE_BACKENDS:
            raise ValueError(f"Store backend must be one of: {list(STORE_BACKENDS)}")
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard levels."""
        if v.upper() not in LOG_LEVELS:
            raise ValueError(f"Log level must be one of: {list(LOG_LEVELS)}")
        return v.upper()

    def valkey_config(self) -> ValkeyConfig:
        return ValkeyConfig(
            host=self.valkey_host,
            port=self.valkey_port,
            password=self.valkey_password,
            database=self.valkey_database,
            max_connections=self.valkey_max_connections,
            socket_timeout=self.valkey_socket_timeout,
            socket_connect_timeout=self.valkey_socket_connect_timeout,
            retry_on_timeout=self.valkey_retry_on_timeout,
            health_check_interval=self.valkey_health_check_interval,
        )

    def build_store(self) -> KeyValueStore:
        """Create the configured store. The Valkey store connects immediately."""
        if self.store_backend == "memory":
            return InMemoryStore(namespace=self.key_namespace)
        client = ValkeyClient(self.valkey_config())
        client.connect()
        return ValkeyStore(client, namespace=self.key_namespace)


def load_config(env_file: Optional[str] = None) -> LedgerConfig:
    """
    Load configuration from environment variables and .env file.

    Args:
        env_file: Optional path to .env file. If None, looks for .env in current directory.

    Returns:
        LedgerConfig: Validated configuration object

    Raises:
        ValueError: If configuration is invalid
    """
    if env_file is None:
        env_file = ".env"

    if os.path.exists(env_file):
        load_dotenv(env_file)

    config_data: Dict[str, Any] = {
        "store_backend": os.getenv("LEDGER_STORE_BACKEND", "valkey"),
        "key_namespace": os.getenv("LEDGER_KEY_NAMESPACE", DEFAULT_NAMESPACE),
        "valkey_host": os.getenv("VALKEY_HOST", "localhost"),
        "valkey_port": os.getenv("VALKEY_PORT", "6379"),
        "valkey_password": os.getenv("VALKEY_PASSWORD") or None,
        "valkey_database": os.getenv("VALKEY_DATABASE", "0"),
        "valkey_max_connections": os.getenv("VALKEY_MAX_CONNECTIONS", "10"),
        "valkey_socket_timeout": os.getenv("VALKEY_SOCKET_TIMEOUT", "5.0"),
        "valkey_socket_connect_timeout": os.getenv("VALKEY_SOCKET_CONNECT_TIMEOUT", "5.0"),
        "valkey_retry_on_timeout": os.getenv("VALKEY_RETRY_ON_TIMEOUT", "true"),
        "valkey_health_check_interval": os.getenv("VALKEY_HEALTH_CHECK_INTERVAL", "30"),
        "escrow_account": os.getenv("LEDGER_ESCROW_ACCOUNT", "escrow"),
        "log_level": os.getenv("LEDGER_LOG_LEVEL", "INFO"),
    }

    try:
        return LedgerConfig(**config_data)
    except ValidationError as e:
        raise ValueError(f"Configuration validation failed: {e}") from e


# Global configuration instance
_config: Optional[LedgerConfig] = None


def get_config() -> LedgerConfig:
    """
    Get the global configuration instance, loading it if necessary.

    Returns:
        LedgerConfig: The global configuration object
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Forget the cached configuration so the next get_config() reloads it."""
    global _config
    _config = None
