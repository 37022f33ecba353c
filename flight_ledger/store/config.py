"""
Connection settings for the Valkey-backed ledger store.

Values come from LedgerConfig (see flight_ledger.utils.config), which is the
only place VALKEY_* environment variables are read.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ValkeyConfig:
    """Where the ledger keyspace lives and how the connection pool behaves."""

    host: str = "localhost"
    port: int = 6379
    password: Optional[str] = None
    database: int = 0
    max_connections: int = 10
    socket_timeout: float = 5.0
    socket_connect_timeout: float = 5.0
    retry_on_timeout: bool = True
    health_check_interval: int = 30

    def pool_kwargs(self) -> Dict[str, Any]:
        """
        Keyword arguments for valkey's ConnectionPool.

        Responses are always decoded: every ledger value is a JSON document.
        """
        kwargs: Dict[str, Any] = {
            "host": self.host,
            "port": self.port,
            "db": self.database,
            "max_connections": self.max_connections,
            "socket_timeout": self.socket_timeout,
            "socket_connect_timeout": self.socket_connect_timeout,
            "retry_on_timeout": self.retry_on_timeout,
            "decode_responses": True,
        }
        if self.password:
            kwargs["password"] = self.password
        return kwargs

    def __str__(self) -> str:
        password_display = "***" if self.password else "None"
        return (
            f"ValkeyConfig({self.host}:{self.port}/{self.database}, "
            f"password={password_display})"
        )


class ValkeyConnectionError(Exception):
    """Raised when the Valkey server cannot be reached."""
    pass
