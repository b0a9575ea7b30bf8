"""Records exchanged with query engines that back DataHub entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class TableIdentifier:
    """A table in a query engine, optionally on a named connection."""

    catalog: str = ""
    schema: str = ""
    table: str = ""
    connection: str = ""

    def __str__(self) -> str:
        qualified = f"{self.catalog}.{self.schema}.{self.table}"
        if self.connection:
            return f"{self.connection}:{qualified}"
        return qualified


@dataclass
class TableAvailability:
    """Whether a DataHub entity can be queried as a table."""

    available: bool = False
    table: TableIdentifier | None = None
    connection: str = ""
    error: str = ""
    last_checked: datetime | None = None
    row_count: int | None = None
    last_updated: datetime | None = None


@dataclass
class QueryExample:
    """A sample SQL statement for a DataHub entity."""

    name: str = ""
    sql: str = ""
    description: str = ""
    category: str = ""
    source: str = ""


@dataclass
class ExecutionQuery:
    """A query that reads or writes entities found through lineage."""

    sql: str = ""
    sources: list[str] = field(default_factory=list)
    targets: list[str] = field(default_factory=list)
    executed_at: datetime | None = None
    query_id: str = ""


@dataclass
class ExecutionContext:
    """How a set of DataHub entities relates to query execution."""

    tables: dict[str, TableIdentifier] = field(default_factory=dict)
    connections: list[str] = field(default_factory=list)
    queries: list[ExecutionQuery] = field(default_factory=list)
    source: str = ""