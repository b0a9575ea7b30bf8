"""Records returned by the DataHub client."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class MatchedField:
    """A field of a search hit that matched the query."""

    name: str = ""
    value: str = ""


@dataclass
class SearchEntity:
    """One entity in a search result."""

    urn: str = ""
    type: str = ""
    name: str = ""
    description: str = ""
    platform: str = ""
    matched_fields: list[MatchedField] = field(default_factory=list)


@dataclass
class SearchResult:
    """A page of search hits."""

    total: int = 0
    offset: int = 0
    limit: int = 0
    entities: list[SearchEntity] = field(default_factory=list)


@dataclass
class Deprecation:
    """Deprecation status of an entity."""

    deprecated: bool = False
    note: str = ""
    decommission_time: int = 0


@dataclass
class Entity:
    """A single catalogue entity."""

    urn: str = ""
    type: str = ""
    name: str = ""
    platform: str = ""
    description: str = ""
    deprecation: Deprecation | None = None


@dataclass
class SchemaField:
    """A column of a dataset schema."""

    field_path: str = ""
    type: str = ""
    native_type: str = ""
    description: str = ""
    nullable: bool = False
    is_partition_key: bool = False


@dataclass
class SchemaMetadata:
    """The schema of a dataset."""

    name: str = ""
    version: int = 0
    hash: str = ""
    primary_keys: list[str] = field(default_factory=list)
    fields: list[SchemaField] = field(default_factory=list)


@dataclass
class LineageNode:
    """An entity reached while following lineage."""

    urn: str = ""
    type: str = ""
    name: str = ""
    description: str = ""
    platform: str = ""
    level: int = 0


@dataclass
class LineageResult:
    """Entities upstream or downstream of a starting entity."""

    start: str = ""
    direction: str = ""
    depth: int = 0
    nodes: list[LineageNode] = field(default_factory=list)


@dataclass
class Query:
    """A SQL statement run against a dataset."""

    statement: str = ""


@dataclass
class QueryList:
    """Queries recorded for a dataset."""

    queries: list[Query] = field(default_factory=list)
    total: int = 0


@dataclass
class GlossaryTerm:
    """A business glossary term."""

    urn: str = ""
    name: str = ""
    description: str = ""


@dataclass
class Tag:
    """A tag that can be attached to entities."""

    urn: str = ""
    name: str = ""
    description: str = ""


@dataclass
class Domain:
    """A data domain."""

    urn: str = ""
    name: str = ""
    description: str = ""
    entity_count: int = 0


@dataclass
class Owner:
    """An owner of an entity; ``type`` is the ownership type."""

    urn: str = ""
    name: str = ""
    type: str = ""


@dataclass
class DataProduct:
    """A data product grouping datasets for a business use."""

    urn: str = ""
    name: str = ""
    description: str = ""
    domain: Domain | None = None
    owners: list[Owner] = field(default_factory=list)
    properties: dict[str, str] = field(default_factory=dict)