"""Extension points that embedding servers implement to customise behaviour.

The protocols here are consumed by the DataHub tools and implemented by
applications that embed them.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from mcp_datahub.integration.query_types import (
    ExecutionContext,
    QueryExample,
    TableAvailability,
    TableIdentifier,
)


@runtime_checkable
class URNResolver(Protocol):
    """Maps external identifiers to DataHub URNs."""

    def resolve_to_datahub_urn(self, external_id: str) -> str:
        """Return the DataHub URN for an external identifier."""


@runtime_checkable
class AccessFilter(Protocol):
    """Decides which DataHub entities the current user may see."""

    def can_access(self, urn: str) -> bool:
        """Return whether the current user may access ``urn``."""

    def filter_urns(self, urns: list[str]) -> list[str]:
        """Return the subset of ``urns`` the current user may access."""


@runtime_checkable
class AuditLogger(Protocol):
    """Records tool invocations for auditing."""

    def log_tool_call(self, tool: str, params: Mapping[str, Any], user_id: str) -> None:
        """Record that ``user_id`` called ``tool`` with ``params``."""


@runtime_checkable
class MetadataEnricher(Protocol):
    """Adds custom metadata to entity responses."""

    def enrich_entity(self, urn: str, data: Mapping[str, Any]) -> dict[str, Any]:
        """Return ``data`` with extra metadata for ``urn``."""


@runtime_checkable
class QueryProvider(Protocol):
    """Supplies query-engine context for DataHub entities.

    Methods return None (or an empty result) when nothing is known and raise
    only for connection or authentication failures. Implementations must be
    safe for concurrent use.
    """

    def name(self) -> str:
        """Return the provider name, such as ``trino``."""

    def resolve_table(self, urn: str) -> TableIdentifier | None:
        """Map a DataHub URN to a table identifier."""

    def get_table_availability(self, urn: str) -> TableAvailability | None:
        """Report whether the entity is available as a queryable table."""

    def get_query_examples(self, urn: str) -> list[QueryExample] | None:
        """Return sample SQL statements for the entity."""

    def get_execution_context(self, urns: list[str]) -> ExecutionContext | None:
        """Return execution context linking the entities to queries."""

    def close(self) -> None:
        """Release held resources; calling it twice is harmless."""


@dataclass
class QueryProviderFunc:
    """A query provider assembled from individual callables.

    Any callable left as None yields an empty answer instead of an error.
    """

    name_fn: Callable[[], str] | None = None
    resolve_table_fn: Callable[[str], TableIdentifier | None] | None = None
    get_table_availability_fn: Callable[[str], TableAvailability | None] | None = None
    get_query_examples_fn: Callable[[str], list[QueryExample] | None] | None = None
    get_execution_context_fn: Callable[[list[str]], ExecutionContext | None] | None = None
    close_fn: Callable[[], None] | None = None

    def name(self) -> str:
        if self.name_fn is None:
            return "func"
        return self.name_fn()

    def resolve_table(self, urn: str) -> TableIdentifier | None:
        if self.resolve_table_fn is None:
            return None
        return self.resolve_table_fn(urn)

    def get_table_availability(self, urn: str) -> TableAvailability | None:
        if self.get_table_availability_fn is None:
            return None
        return self.get_table_availability_fn(urn)

    def get_query_examples(self, urn: str) -> list[QueryExample] | None:
        if self.get_query_examples_fn is None:
            return None
        return self.get_query_examples_fn(urn)

    def get_execution_context(self, urns: list[str]) -> ExecutionContext | None:
        if self.get_execution_context_fn is None:
            return None
        return self.get_execution_context_fn(urns)

    def close(self) -> None:
        if self.close_fn is not None:
            self.close_fn()


def _noop_name() -> str:
    return "noop"


class NoOpQueryProvider(QueryProviderFunc):
    """A query provider that knows nothing: every lookup comes back empty."""

    def __init__(self) -> None:
        super().__init__(name_fn=_noop_name)

    def name(self) -> str:
        return super().name()

    def resolve_table(self, urn: str) -> TableIdentifier | None:
        return super().resolve_table(urn)

    def get_table_availability(self, urn: str) -> TableAvailability | None:
        return super().get_table_availability(urn)

    def get_query_examples(self, urn: str) -> list[QueryExample] | None:
        return super().get_query_examples(urn)

    def get_execution_context(self, urns: list[str]) -> ExecutionContext | None:
        return super().get_execution_context(urns)

    def close(self) -> None:
        super().close()