"""Configuration for connections to several DataHub servers."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from mcp_datahub.client.config import ClientConfig
from mcp_datahub.client.config import from_env as _client_from_env
from mcp_datahub.client.errors import ConfigError, UnknownConnectionError

DEFAULT_CONNECTION_NAME = "datahub"

_TEXT_KEYS = ("url", "token")
_INT_KEYS = ("timeout", "retry_max", "default_limit", "max_limit", "max_lineage_depth")


@dataclass(frozen=True)
class ConnectionConfig:
    """Settings of one additional connection.

    Empty or zero fields inherit from the primary connection; ``timeout`` is
    in whole seconds.
    """

    url: str = ""
    token: str = field(default="", repr=False)
    timeout: int = 0
    retry_max: int = 0
    default_limit: int = 0
    max_limit: int = 0
    max_lineage_depth: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> ConnectionConfig:
        """Build settings from a decoded JSON object, checking value types."""
        if not isinstance(data, Mapping):
            raise ConfigError("connection settings must be a JSON object")
        values: dict[str, Any] = {}
        for key in _TEXT_KEYS:
            value = data.get(key)
            if value is None:
                continue
            if not isinstance(value, str):
                raise ConfigError(f"connection setting {key!r} must be a string")
            values[key] = value
        for key in _INT_KEYS:
            value = data.get(key)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"connection setting {key!r} must be an integer")
            values[key] = value
        return cls(**values)


@dataclass(frozen=True)
class ConnectionInfo:
    """Display information about a connection."""

    name: str
    url: str
    is_default: bool


@dataclass
class MultiServerConfig:
    """The primary connection plus any named additional connections."""

    default: str = DEFAULT_CONNECTION_NAME
    primary: ClientConfig = field(default_factory=ClientConfig)
    connections: dict[str, ConnectionConfig] = field(default_factory=dict)

    def client_config(self, name: str = "") -> ClientConfig:
        """Return the client settings of a connection.

        An empty name or the default name gives the primary settings; other
        connections inherit every setting they leave unset from the primary.
        """
        if not name or name == self.default:
            return self.primary
        try:
            conn = self.connections[name]
        except KeyError:
            raise UnknownConnectionError(name, self.connection_names()) from None

        overrides: dict[str, Any] = {}
        if conn.url:
            overrides["url"] = conn.url
        if conn.token:
            overrides["token"] = conn.token
        if conn.timeout > 0:
            overrides["timeout"] = float(conn.timeout)
        for key in ("retry_max", "default_limit", "max_limit", "max_lineage_depth"):
            value = getattr(conn, key)
            if value > 0:
                overrides[key] = value
        return replace(self.primary, **overrides)

    def connection_names(self) -> list[str]:
        """Return all connection names, the default one first."""
        return [self.default, *self.connections]

    def connection_count(self) -> int:
        """Return the number of connections, the default one included."""
        return 1 + len(self.connections)

    def connection_infos(self) -> list[ConnectionInfo]:
        """Return display information for every connection, the default first."""
        infos = [ConnectionInfo(name=self.default, url=self.primary.url, is_default=True)]
        infos.extend(
            ConnectionInfo(name=name, url=self.client_config(name).url, is_default=False)
            for name in self.connections
        )
        return infos


def _parse_additional(raw: str) -> dict[str, ConnectionConfig]:
    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"parsing DATAHUB_ADDITIONAL_SERVERS: {exc}") from exc
    if decoded is None:
        return {}
    if not isinstance(decoded, dict):
        raise ConfigError("parsing DATAHUB_ADDITIONAL_SERVERS: expected a JSON object")
    try:
        return {name: ConnectionConfig.from_dict(value) for name, value in decoded.items()}
    except ConfigError as exc:
        raise ConfigError(f"parsing DATAHUB_ADDITIONAL_SERVERS: {exc}") from exc


def from_env(environ: Mapping[str, str] | None = None) -> MultiServerConfig:
    """Build the configuration from environment variables.

    The primary connection comes from the ``DATAHUB_*`` variables, its name
    from ``DATAHUB_CONNECTION_NAME``, and additional connections from the JSON
    object in ``DATAHUB_ADDITIONAL_SERVERS``.
    """
    env = os.environ if environ is None else environ
    try:
        primary = _client_from_env(env)
    except ConfigError as exc:
        raise ConfigError(f"loading primary config: {exc}") from exc

    additional = env.get("DATAHUB_ADDITIONAL_SERVERS", "")
    return MultiServerConfig(
        default=env.get("DATAHUB_CONNECTION_NAME", "") or DEFAULT_CONNECTION_NAME,
        primary=primary,
        connections=_parse_additional(additional) if additional else {},
    )