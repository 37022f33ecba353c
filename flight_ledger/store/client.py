"""
Valkey connection used by ValkeyStore.

Ledger calls are synchronous and short, so the store keeps one pooled
connection, pings it at most once per health-check interval, and reconnects
with bounded exponential backoff when the ping fails.
"""

import logging
import time
from typing import Optional

import valkey
from valkey.connection import ConnectionPool
from valkey.exceptions import ConnectionError, TimeoutError

from .config import ValkeyConfig, ValkeyConnectionError

logger = logging.getLogger(__name__)


class ValkeyClient:
    """
    Pooled Valkey connection with retrying connect and periodic health checks.

    Args:
        config: Connection settings
        max_connection_attempts: Attempts made by connect() before giving up
        reconnect_delay: Delay before the second attempt, doubled after each failure
        max_reconnect_delay: Upper bound for the delay between attempts
    """

    def __init__(
        self,
        config: ValkeyConfig,
        max_connection_attempts: int = 5,
        reconnect_delay: float = 1.0,
        max_reconnect_delay: float = 30.0,
    ):
        self.config = config
        self.max_connection_attempts = max_connection_attempts
        self.reconnect_delay = reconnect_delay
        self.max_reconnect_delay = max_reconnect_delay
        self._client: Optional[valkey.Valkey] = None
        self._connected = False
        self._last_health_check = 0.0

    def connect(self) -> None:
        """
        Open the pool and ping the server, retrying on failure.

        Raises:
            ValkeyConnectionError: If every attempt failed
        """
        if self._connected:
            return

        for attempt in range(1, self.max_connection_attempts + 1):
            try:
                logger.info(f"Connecting to {self.config} (attempt {attempt})")
                pool = ConnectionPool(**self.config.pool_kwargs())
                self._client = valkey.Valkey(connection_pool=pool)
                self._ping()
            except (ConnectionError, TimeoutError, OSError, ValkeyConnectionError) as e:
                logger.warning(f"Valkey connection attempt {attempt} failed: {e}")
                if attempt == self.max_connection_attempts:
                    raise ValkeyConnectionError(
                        f"Failed to connect to Valkey after {attempt} attempts: {e}"
                    ) from e
                delay = min(self.reconnect_delay * 2 ** (attempt - 1), self.max_reconnect_delay)
                time.sleep(delay)
            else:
                self._connected = True
                self._last_health_check = time.time()
                logger.info("Connected to Valkey")
                return

    def _ping(self) -> None:
        try:
            if not self._client.ping():
                raise ValkeyConnectionError("Ping returned False")
        except (ConnectionError, TimeoutError, OSError) as e:
            raise ValkeyConnectionError(f"Ping failed: {e}") from e

    def health_check(self, force: bool = False) -> bool:
        """Ping the server unless it was checked within the health-check interval."""
        if not self._connected:
            return False

        now = time.time()
        if not force and now - self._last_health_check < self.config.health_check_interval:
            return True
        self._last_health_check = now

        try:
            self._ping()
            return True
        except ValkeyConnectionError as e:
            logger.warning(f"Valkey health check failed: {e}")
            self._connected = False
            return False

    def ensure_connection(self) -> None:
        """
        Reconnect if the connection is missing or unhealthy.

        Raises:
            ValkeyConnectionError: If reconnection fails
        """
        if not self.health_check():
            logger.info("Valkey connection unhealthy, reconnecting")
            self.connect()

    @property
    def client(self) -> valkey.Valkey:
        """
        The underlying Valkey client.

        Raises:
            ValkeyConnectionError: If connect() has not succeeded
        """
        if not self._connected or self._client is None:
            raise ValkeyConnectionError("Client not connected. Call connect() first.")
        return self._client
