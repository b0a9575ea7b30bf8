# mcp-datahub

A Python client for the DataHub metadata catalog. It talks to DataHub's
GraphQL API and covers searching the catalog and reading entities, schemas,
lineage, usage queries, glossary terms, tags, domains and data products. It
also manages connections to several DataHub servers at once and defines
extension points for query engines that can run SQL against catalogued
tables.

## Installation

```
pip install .
pip install ".[test]"   # with the test tools
```

## Configuration

`mcp_datahub.client.config.from_env()` reads the primary connection from the
environment (or from a mapping passed to it):

| Variable | Meaning | Default |
| --- | --- | --- |
| `DATAHUB_URL` | DataHub GMS URL (required) | |
| `DATAHUB_TOKEN` | Personal access token (required) | |
| `DATAHUB_TIMEOUT` | Request timeout in whole seconds | 30 |
| `DATAHUB_RETRY_MAX` | Maximum retry attempts | 3 |
| `DATAHUB_DEFAULT_LIMIT` | Default search result limit | 10 |
| `DATAHUB_MAX_LIMIT` | Maximum allowed limit | 100 |
| `DATAHUB_MAX_LINEAGE_DEPTH` | Maximum lineage depth | 5 |

A numeric variable that is not an integer raises `ConfigError`. The result
is a frozen `ClientConfig`; `validate()` raises `ConfigError` when the URL or
token is missing, and `with_defaults()` fills zero-valued settings with the
defaults above.

`mcp_datahub.multiserver.config.from_env()` adds two more variables:

| Variable | Meaning | Default |
| --- | --- | --- |
| `DATAHUB_CONNECTION_NAME` | Name of the primary connection | `datahub` |
| `DATAHUB_ADDITIONAL_SERVERS` | JSON object of further named servers | |

Each additional server may set `url`, `token`, `timeout`, `retry_max`,
`default_limit`, `max_limit` and `max_lineage_depth`; whatever it leaves out
is inherited from the primary connection:

```json
{"staging": {"url": "https://staging.datahub.example.com", "token": "token"}}
```

## Using the client

```python
from mcp_datahub.client.client import DataHubClient

environ = {
    "DATAHUB_URL": "https://datahub.example.com",
    "DATAHUB_TOKEN": "token",
}

with DataHubClient.from_env(environ) as client:
    client.ping()
    result = client.search("orders", entity_type="DATASET", limit=5)
    for entity in result.entities:
        print(entity.urn, entity.name)

    urn = result.entities[0].urn
    entity = client.get_entity(urn)
    schema = client.get_schema(urn)
    lineage = client.get_lineage(urn, direction="upstream", depth=2)
    queries = client.get_queries(urn)
```

Other calls are `get_glossary_term(urn)`, `list_tags(filter_text)`,
`list_domains()`, `list_data_products()` and `get_data_product(urn)`, and
`execute(query, variables)` runs any GraphQL document and returns its `data`.
Results are dataclasses from `mcp_datahub.client.models`.

Behaviour worth knowing:

- The endpoint always ends in `/api/graphql`; it is appended to the
  configured URL when missing (`client.endpoint` shows it).
- Search defaults to datasets; the limit defaults to the configured default
  limit and is capped at the maximum limit. Lineage depth is capped at the
  maximum lineage depth, and the direction is upper-cased.
- Failed requests are retried up to `retry_max` times with growing back-off,
  except `UnauthorizedError`, `ForbiddenError` and `NotFoundError`, which
  are raised at once. A timeout raises `RequestTimeoutError`, HTTP 429
  `RateLimitedError`, and other failures `DataHubError`; all live in
  `mcp_datahub.client.errors`.
- `get_entity`, `get_glossary_term` and `get_data_product` raise
  `NotFoundError` when the server returns no entity.
- `get_queries` returns an empty `QueryList` when usage statistics cannot be
  read.
- `list_data_products` falls back to a search for `DATA_PRODUCT` entities
  when the server does not support the listing query.

## URNs

```python
from mcp_datahub.client.urn import build_dataset_urn, parse_urn

urn = build_dataset_urn("snowflake", "db.schema.table", "PROD")
# 'urn:li:dataset:(urn:li:dataPlatform:snowflake,db.schema.table,PROD)'

parsed = parse_urn(urn)
parsed.entity_type, parsed.platform, parsed.name, parsed.env
# ('dataset', 'snowflake', 'db.schema.table', 'PROD')
```

Dataset names are percent-encoded when built and decoded when parsed, and
the environment defaults to `PROD`. There are builders for dashboards,
charts, data flows, data jobs, glossary terms, tags and domains as well.
Malformed URNs raise `InvalidURNError`.

## Several servers

```python
from mcp_datahub.multiserver.manager import ConnectionManager

environ = {
    "DATAHUB_URL": "https://prod.datahub.example.com",
    "DATAHUB_TOKEN": "token",
    "DATAHUB_ADDITIONAL_SERVERS": '{"staging": {"url": "https://staging.datahub.example.com"}}',
}

with ConnectionManager.from_env(environ) as manager:
    print(manager.connections())        # ['datahub', 'staging']
    for info in manager.connection_infos():
        print(info.name, info.url, info.is_default)
    staging = manager.client("staging")
    default = manager.default_client()
```

Clients are created on first use, cached, and safe to request from several
threads; closing the manager closes them all. An unknown connection name
raises `UnknownConnectionError`. `single_client_manager(client, config)`
wraps an existing client as the only, default connection.

## Query engine integration

`mcp_datahub.integration.providers` defines `QueryProvider`, the protocol a
query engine implements to resolve URNs to tables, report availability,
supply example SQL and relate lineage to executed queries. The records it
exchanges (`TableIdentifier`, `TableAvailability`, `QueryExample`,
`ExecutionContext`, `ExecutionQuery`) are in
`mcp_datahub.integration.query_types`. `NoOpQueryProvider` answers every
lookup with nothing, and `QueryProviderFunc` builds a provider from
individual callables; any callable left unset yields an empty result. The
same module defines the `URNResolver`, `AccessFilter`, `AuditLogger` and
`MetadataEnricher` protocols for embedding applications to implement.

`mcp_datahub.tools` holds `ToolkitConfig` (search and lineage limits, with
`default_config()` and `normalize_config()`) and `ToolContext`, a per-call
record with a start time, elapsed `duration()` and a `set`/`get` store for
passing data between steps.

## What this package does not do

It has no command and runs no server: there is no tool registration, no
request handlers for tools and no middleware chain. `ToolkitConfig` and
`ToolContext` are building blocks for such a layer, and the integration
protocols are defined here but not called by anything in the package. It
also only reads from DataHub; it does not write metadata.