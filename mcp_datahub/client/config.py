"""Client configuration and its loading from the environment."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field, replace

from mcp_datahub.client.errors import ConfigError

_DEFAULT_TIMEOUT = 30.0
_DEFAULT_RETRY_MAX = 3
_DEFAULT_LIMIT = 10
_DEFAULT_MAX_LIMIT = 100
_DEFAULT_MAX_LINEAGE_DEPTH = 5

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class ClientConfig:
    """Settings for a DataHub client.

    Numeric fields left at zero take their defaults in ``with_defaults``.
    ``timeout`` is in seconds.
    """

    url: str = ""
    token: str = field(default="", repr=False)
    timeout: float = 0.0
    retry_max: int = 0
    default_limit: int = 0
    max_limit: int = 0
    max_lineage_depth: int = 0

    def validate(self) -> None:
        """Raise ConfigError if the URL or token is missing."""
        if not self.url:
            raise ConfigError("DATAHUB_URL is required")
        if not self.token:
            raise ConfigError("DATAHUB_TOKEN is required")

    def with_defaults(self) -> ClientConfig:
        """Return a copy with zero-valued settings replaced by defaults."""
        defaults = default_config()
        return replace(
            self,
            timeout=self.timeout or defaults.timeout,
            retry_max=self.retry_max or defaults.retry_max,
            default_limit=self.default_limit or defaults.default_limit,
            max_limit=self.max_limit or defaults.max_limit,
            max_lineage_depth=self.max_lineage_depth or defaults.max_lineage_depth,
        )


def default_config() -> ClientConfig:
    """Return a configuration holding the default settings and no URL or token."""
    return ClientConfig(
        timeout=_DEFAULT_TIMEOUT,
        retry_max=_DEFAULT_RETRY_MAX,
        default_limit=_DEFAULT_LIMIT,
        max_limit=_DEFAULT_MAX_LIMIT,
        max_lineage_depth=_DEFAULT_MAX_LINEAGE_DEPTH,
    )


def _parse_int(variable: str, raw: str) -> int:
    if not _INT_PATTERN.fullmatch(raw):
        raise ConfigError(f"invalid {variable}: {raw!r} is not an integer")
    return int(raw)


_NUMERIC_VARIABLES = (
    ("DATAHUB_TIMEOUT", "timeout", float),
    ("DATAHUB_RETRY_MAX", "retry_max", int),
    ("DATAHUB_DEFAULT_LIMIT", "default_limit", int),
    ("DATAHUB_MAX_LIMIT", "max_limit", int),
    ("DATAHUB_MAX_LINEAGE_DEPTH", "max_lineage_depth", int),
)


def from_env(environ: Mapping[str, str] | None = None) -> ClientConfig:
    """Build a configuration from ``DATAHUB_*`` variables.

    Unset or empty variables keep their defaults; a numeric variable that is
    not an integer raises ConfigError.
    """
    env = os.environ if environ is None else environ
    overrides: dict[str, object] = {
        "url": env.get("DATAHUB_URL", ""),
        "token": env.get("DATAHUB_TOKEN", ""),
    }
    for variable, field_name, convert in _NUMERIC_VARIABLES:
        raw = env.get(variable, "")
        if raw:
            overrides[field_name] = convert(_parse_int(variable, raw))
    return replace(default_config(), **overrides)