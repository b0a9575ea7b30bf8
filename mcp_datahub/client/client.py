"""GraphQL client for DataHub with authentication and retries."""

from __future__ import annotations

import json
import time
from collections.abc import Mapping
from typing import Any

import httpx

from mcp_datahub.client import queries
from mcp_datahub.client.config import ClientConfig
from mcp_datahub.client.config import from_env as _config_from_env
from mcp_datahub.client.errors import (
    ConfigError,
    DataHubError,
    ForbiddenError,
    NotFoundError,
    RateLimitedError,
    RequestTimeoutError,
    UnauthorizedError,
)
from mcp_datahub.client.models import (
    DataProduct,
    Deprecation,
    Domain,
    Entity,
    GlossaryTerm,
    LineageNode,
    LineageResult,
    MatchedField,
    Owner,
    Query,
    QueryList,
    SchemaField,
    SchemaMetadata,
    SearchEntity,
    SearchResult,
    Tag,
)
from mcp_datahub.client.options import LineageDirection, LineageOptions, SearchOptions

_GRAPHQL_SUFFIX = "/api/graphql"
_RETRY_BASE_DELAY = 0.1
_NON_RETRYABLE = (UnauthorizedError, ForbiddenError, NotFoundError)


def _section(data: Any, *keys: str) -> Mapping[str, Any]:
    current = data
    for key in keys:
        if not isinstance(current, Mapping):
            return {}
        current = current.get(key)
    return current if isinstance(current, Mapping) else {}


def _text(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value)


def _int(data: Mapping[str, Any], key: str) -> int:
    return int(data.get(key) or 0)


def _items(data: Mapping[str, Any], key: str) -> list[Any]:
    value = data.get(key)
    return list(value) if isinstance(value, list) else []


def _custom_properties(properties: Mapping[str, Any]) -> dict[str, str]:
    return {
        _text(item, "key"): _text(item, "value")
        for item in _items(properties, "customProperties")
        if isinstance(item, Mapping)
    }


def _owners(ownership: Mapping[str, Any], *, prefer_display_name: bool) -> list[Owner]:
    owners = []
    for entry in _items(ownership, "owners"):
        owner = _section(entry, "owner")
        display = _text(_section(owner, "info"), "displayName") if prefer_display_name else ""
        owners.append(
            Owner(
                urn=_text(owner, "urn"),
                name=display or _text(owner, "name") or _text(owner, "username"),
                type=_text(entry, "type") if isinstance(entry, Mapping) else "",
            )
        )
    return owners


class DataHubClient:
    """A client for the DataHub GraphQL API."""

    def __init__(self, config: ClientConfig) -> None:
        try:
            config.validate()
        except ConfigError as exc:
            raise ConfigError(f"invalid configuration: {exc}") from exc
        self._config = config.with_defaults()
        url = self._config.url
        if not url.endswith(_GRAPHQL_SUFFIX):
            url = url.removesuffix("/") + _GRAPHQL_SUFFIX
        self._endpoint = url
        self._http = httpx.Client(timeout=self._config.timeout)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> DataHubClient:
        """Create a client configured from ``DATAHUB_*`` variables."""
        return cls(_config_from_env(environ))

    @property
    def config(self) -> ClientConfig:
        """The configuration in effect, defaults applied."""
        return self._config

    @property
    def endpoint(self) -> str:
        """The GraphQL endpoint URL."""
        return self._endpoint

    def execute(
        self, query: str, variables: Mapping[str, Any] | None = None
    ) -> dict[str, Any] | None:
        """Run a GraphQL query, retrying transient failures, and return its data."""
        payload: dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = dict(variables)
        body = json.dumps(payload)

        last_error: DataHubError | None = None
        for attempt in range(self._config.retry_max + 1):
            if attempt:
                time.sleep(attempt * attempt * _RETRY_BASE_DELAY)
            try:
                return self._send(body)
            except _NON_RETRYABLE:
                raise
            except DataHubError as exc:
                last_error = exc
        if last_error is not None:
            raise last_error
        return None

    def _send(self, body: str) -> dict[str, Any] | None:
        try:
            response = self._http.post(
                self._endpoint,
                content=body,
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {self._config.token}",
                },
            )
        except httpx.TimeoutException as exc:
            raise RequestTimeoutError() from exc
        except httpx.HTTPError as exc:
            raise DataHubError(f"failed to execute request: {exc}") from exc

        status = response.status_code
        if status == 401:
            raise UnauthorizedError()
        if status == 403:
            raise ForbiddenError()
        if status == 429:
            raise RateLimitedError()
        if status != 200:
            raise DataHubError(f"unexpected status {status}: {response.text}")

        try:
            document = response.json()
        except ValueError as exc:
            raise DataHubError(f"failed to unmarshal response: {exc}") from exc
        if not isinstance(document, dict):
            raise DataHubError("failed to unmarshal response: expected a JSON object")

        errors = document.get("errors") or []
        if errors:
            first = errors[0]
            message = _text(first, "message") if isinstance(first, Mapping) else str(first)
            if "not found" in message.lower():
                raise NotFoundError(message)
            raise DataHubError(f"graphql error: {message}")

        data = document.get("data")
        return data if isinstance(data, dict) else None

    def close(self) -> None:
        """Release the underlying HTTP connections."""
        self._http.close()

    def __enter__(self) -> DataHubClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def ping(self) -> None:
        """Check that DataHub answers a trivial query."""
        self.execute(queries.PING_QUERY)

    def search(
        self,
        query: str,
        *,
        entity_type: str = "",
        limit: int | None = None,
        offset: int = 0,
        filters: dict[str, list[str]] | None = None,
    ) -> SearchResult:
        """Search entities; datasets are searched when no type is given."""
        options = SearchOptions(
            entity_type=entity_type, limit=limit, offset=offset, filters=filters
        )
        count = self._config.default_limit if options.limit is None else options.limit
        count = min(count, self._config.max_limit)
        variables = {
            "input": {
                "type": options.entity_type or "DATASET",
                "query": query,
                "start": options.offset,
                "count": count,
            }
        }
        search = _section(self.execute(queries.SEARCH_QUERY, variables), "search")

        result = SearchResult(
            total=_int(search, "total"),
            offset=_int(search, "start"),
            limit=_int(search, "count"),
        )
        for hit in _items(search, "searchResults"):
            entity = _section(hit, "entity")
            properties = _section(entity, "properties")
            result.entities.append(
                SearchEntity(
                    urn=_text(entity, "urn"),
                    type=_text(entity, "type"),
                    name=_text(properties, "name") or _text(entity, "name"),
                    description=_text(properties, "description")
                    or _text(entity, "description"),
                    platform=_text(_section(entity, "platform"), "name"),
                    matched_fields=[
                        MatchedField(name=_text(mf, "name"), value=_text(mf, "value"))
                        for mf in _items(_section(hit), "matchedFields")
                        if isinstance(mf, Mapping)
                    ]
                    if isinstance(hit, Mapping)
                    else [],
                )
            )
        return result

    def get_entity(self, urn: str) -> Entity:
        """Fetch one entity by URN."""
        entity = _section(self.execute(queries.GET_ENTITY_QUERY, {"urn": urn}), "entity")
        if not _text(entity, "urn"):
            raise NotFoundError(urn)

        properties = _section(entity, "properties")
        result = Entity(
            urn=_text(entity, "urn"),
            type=_text(entity, "type"),
            name=_text(properties, "name") or _text(entity, "name"),
            platform=_text(_section(entity, "platform"), "name"),
            description=_text(properties, "description") or _text(entity, "description"),
        )
        deprecation = _section(entity, "deprecation")
        if deprecation.get("deprecated"):
            result.deprecation = Deprecation(
                deprecated=True,
                note=_text(deprecation, "note"),
                decommission_time=_int(deprecation, "decommissionTime"),
            )
        return result

    def get_schema(self, urn: str) -> SchemaMetadata:
        """Fetch the schema of a dataset."""
        data = self.execute(queries.GET_SCHEMA_QUERY, {"urn": urn})
        schema = _section(data, "dataset", "schemaMetadata")
        return SchemaMetadata(
            name=_text(schema, "name"),
            version=_int(schema, "version"),
            hash=_text(schema, "hash"),
            primary_keys=[str(key) for key in _items(schema, "primaryKeys")],
            fields=[
                SchemaField(
                    field_path=_text(item, "fieldPath"),
                    type=_text(item, "type"),
                    native_type=_text(item, "nativeDataType"),
                    description=_text(item, "description"),
                    nullable=bool(item.get("nullable")),
                    is_partition_key=bool(item.get("isPartOfKey")),
                )
                for item in _items(schema, "fields")
                if isinstance(item, Mapping)
            ],
        )

    def get_lineage(
        self,
        urn: str,
        *,
        direction: str | LineageDirection = LineageDirection.DOWNSTREAM,
        depth: int = 1,
    ) -> LineageResult:
        """Fetch entities upstream or downstream of ``urn``."""
        options = LineageOptions(direction=direction, depth=depth)
        options.depth = min(options.depth, self._config.max_lineage_depth)

        data = self.execute(
            queries.GET_LINEAGE_QUERY, {"urn": urn, "direction": options.direction}
        )
        lineage = _section(data, "searchAcrossLineage")
        result = LineageResult(start=urn, direction=options.direction, depth=options.depth)
        for hit in _items(lineage, "searchResults"):
            entity = _section(hit, "entity")
            result.nodes.append(
                LineageNode(
                    urn=_text(entity, "urn"),
                    type=_text(entity, "type"),
                    name=_text(entity, "name"),
                    description=_text(entity, "description"),
                    platform=_text(_section(entity, "platform"), "name"),
                    level=_int(_section(hit), "degree") if isinstance(hit, Mapping) else 0,
                )
            )
        return result

    def get_queries(self, urn: str) -> QueryList:
        """Fetch top SQL queries of a dataset; empty when usage stats are unavailable."""
        try:
            data = self.execute(queries.GET_QUERIES_QUERY, {"urn": urn})
        except DataHubError:
            return QueryList(total=0)

        buckets = _items(_section(data, "dataset", "usageStats"), "buckets")
        statements = [
            Query(statement=str(statement))
            for bucket in buckets
            for statement in _items(_section(bucket, "metrics"), "topSqlQueries")
        ]
        return QueryList(queries=statements, total=len(statements))

    def get_glossary_term(self, urn: str) -> GlossaryTerm:
        """Fetch a glossary term by URN."""
        data = self.execute(queries.GET_GLOSSARY_TERM_QUERY, {"urn": urn})
        term = _section(data, "glossaryTerm")
        if not _text(term, "urn"):
            raise NotFoundError(urn)
        properties = _section(term, "properties")
        return GlossaryTerm(
            urn=_text(term, "urn"),
            name=_text(properties, "name") or _text(term, "name"),
            description=_text(properties, "description"),
        )

    def list_tags(self, filter_text: str = "") -> list[Tag]:
        """List tags, optionally narrowed by a search filter."""
        variables = {
            "input": {
                "type": "TAG",
                "query": filter_text or "*",
                "start": 0,
                "count": self._config.max_limit,
            }
        }
        search = _section(self.execute(queries.LIST_TAGS_QUERY, variables), "search")
        tags = []
        for hit in _items(search, "searchResults"):
            entity = _section(hit, "entity")
            properties = _section(entity, "properties")
            tags.append(
                Tag(
                    urn=_text(entity, "urn"),
                    name=_text(properties, "name") or _text(entity, "name"),
                    description=_text(properties, "description")
                    or _text(entity, "description"),
                )
            )
        return tags

    def list_domains(self) -> list[Domain]:
        """List all domains."""
        listing = _section(self.execute(queries.LIST_DOMAINS_QUERY), "listDomains")
        domains = []
        for item in _items(listing, "domains"):
            properties = _section(item, "properties")
            domains.append(
                Domain(
                    urn=_text(_section(item), "urn") if isinstance(item, Mapping) else "",
                    name=_text(properties, "name"),
                    description=_text(properties, "description"),
                    entity_count=_int(_section(item, "entities"), "total"),
                )
            )
        return domains

    def list_data_products(self) -> list[DataProduct]:
        """List data products, falling back to search on servers without the listing query."""
        try:
            data = self.execute(queries.LIST_DATA_PRODUCTS_QUERY)
        except DataHubError as list_error:
            try:
                hits = self.search(
                    "*", entity_type="DATA_PRODUCT", limit=self._config.max_limit
                )
            except DataHubError as search_error:
                raise DataHubError(
                    f"ListDataProducts: {list_error} "
                    f"(search fallback also failed: {search_error})"
                ) from search_error
            return [
                DataProduct(urn=hit.urn, name=hit.name, description=hit.description)
                for hit in hits.entities
            ]

        products = []
        for item in _items(_section(data, "listDataProducts"), "dataProducts"):
            product = self._data_product(item, prefer_display_name=False)
            if product.domain is not None:
                product.domain.description = ""
            products.append(product)
        return products

    def get_data_product(self, urn: str) -> DataProduct:
        """Fetch a data product by URN."""
        data = self.execute(queries.GET_DATA_PRODUCT_QUERY, {"urn": urn})
        item = _section(data, "dataProduct")
        if not _text(item, "urn"):
            raise NotFoundError(urn)
        return self._data_product(item, prefer_display_name=True)

    @staticmethod
    def _data_product(item: Any, *, prefer_display_name: bool) -> DataProduct:
        record = _section(item)
        properties = _section(record, "properties")
        product = DataProduct(
            urn=_text(record, "urn"),
            name=_text(properties, "name"),
            description=_text(properties, "description"),
            owners=_owners(
                _section(record, "ownership"), prefer_display_name=prefer_display_name
            ),
            properties=_custom_properties(properties),
        )
        domain = _section(record, "domain", "domain")
        if _text(domain, "urn"):
            domain_properties = _section(domain, "properties")
            product.domain = Domain(
                urn=_text(domain, "urn"),
                name=_text(domain_properties, "name"),
                description=_text(domain_properties, "description"),
            )
        return product