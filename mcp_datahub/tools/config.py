"""Settings that shape the DataHub tools' behaviour."""

from __future__ import annotations

from dataclasses import dataclass, replace

_DEFAULT_LIMIT = 10
_DEFAULT_MAX_LIMIT = 100
_DEFAULT_MAX_LINEAGE_DEPTH = 5


@dataclass(frozen=True)
class ToolkitConfig:
    """Limits applied by the toolkit to searches and lineage queries."""

    default_limit: int = _DEFAULT_LIMIT
    max_limit: int = _DEFAULT_MAX_LIMIT
    max_lineage_depth: int = _DEFAULT_MAX_LINEAGE_DEPTH


def default_config() -> ToolkitConfig:
    """Return the default toolkit settings."""
    return ToolkitConfig()


def normalize_config(config: ToolkitConfig) -> ToolkitConfig:
    """Return a copy with non-positive settings replaced by their defaults."""
    return replace(
        config,
        default_limit=config.default_limit if config.default_limit > 0 else _DEFAULT_LIMIT,
        max_limit=config.max_limit if config.max_limit > 0 else _DEFAULT_MAX_LIMIT,
        max_lineage_depth=(
            config.max_lineage_depth
            if config.max_lineage_depth > 0
            else _DEFAULT_MAX_LINEAGE_DEPTH
        ),
    )