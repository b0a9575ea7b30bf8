"""Lazily created, cached clients for several DataHub servers."""

from __future__ import annotations

import threading
from collections.abc import Mapping

from mcp_datahub.client.client import DataHubClient
from mcp_datahub.client.config import ClientConfig
from mcp_datahub.client.errors import ConfigError, DataHubError
from mcp_datahub.multiserver.config import (
    DEFAULT_CONNECTION_NAME,
    ConnectionInfo,
    MultiServerConfig,
)
from mcp_datahub.multiserver.config import from_env as _config_from_env


class ConnectionManager:
    """Hands out one client per named connection, creating each on first use."""

    def __init__(self, config: MultiServerConfig) -> None:
        self._config = config
        self._clients: dict[str, DataHubClient] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ConnectionManager:
        """Create a manager configured from environment variables."""
        return cls(_config_from_env(environ))

    def client(self, name: str = "") -> DataHubClient:
        """Return the client of a connection; an empty name means the default."""
        name = name or self._config.default
        with self._lock:
            cached = self._clients.get(name)
            if cached is not None:
                return cached

            cfg = self._config.client_config(name)
            try:
                cfg.validate()
            except ConfigError as exc:
                raise ConfigError(f"invalid config for connection {name!r}: {exc}") from exc
            try:
                created = DataHubClient(cfg)
            except ConfigError as exc:
                raise ConfigError(f"creating client for connection {name!r}: {exc}") from exc
            self._clients[name] = created
            return created

    def default_client(self) -> DataHubClient:
        """Return the client of the default connection."""
        return self.client(self._config.default)

    def connections(self) -> list[str]:
        """Return the names of all configured connections."""
        return self._config.connection_names()

    def connection_infos(self) -> list[ConnectionInfo]:
        """Return display information about all configured connections."""
        return self._config.connection_infos()

    def connection_count(self) -> int:
        """Return the number of configured connections."""
        return self._config.connection_count()

    def has_connection(self, name: str) -> bool:
        """Return whether a connection of that name exists; empty means the default."""
        return not name or name == self._config.default or name in self._config.connections

    @property
    def config(self) -> MultiServerConfig:
        """The manager's configuration."""
        return self._config

    def close(self) -> None:
        """Close every open client and forget them.

        All clients are closed even if some fail; the first failure is raised.
        """
        with self._lock:
            clients, self._clients = self._clients, {}
        first_error: DataHubError | None = None
        for name, open_client in clients.items():
            try:
                open_client.close()
            except Exception as exc:  # noqa: BLE001 - every client must be closed
                if first_error is None:
                    first_error = DataHubError(f"closing connection {name!r}: {exc}")
                    first_error.__cause__ = exc
        if first_error is not None:
            raise first_error

    def __enter__(self) -> ConnectionManager:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


def single_client_manager(client: DataHubClient, config: ClientConfig) -> ConnectionManager:
    """Wrap one existing client as the default connection of a manager."""
    manager = ConnectionManager(
        MultiServerConfig(default=DEFAULT_CONNECTION_NAME, primary=config, connections={})
    )
    manager._clients[DEFAULT_CONNECTION_NAME] = client
    return manager