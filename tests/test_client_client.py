import json
import time

import httpx
import pytest
import respx

from mcp_datahub.client.client import DataHubClient
from mcp_datahub.client.config import ClientConfig
from mcp_datahub.client.errors import (
    ConfigError,
    DataHubError,
    ForbiddenError,
    NotFoundError,
    RateLimitedError,
    RequestTimeoutError,
    UnauthorizedError,
)

BASE_URL = "https://datahub.example.com"
ENDPOINT = BASE_URL + "/api/graphql"
DATASET_URN = "urn:li:dataset:(urn:li:dataPlatform:snowflake,db.schema.table,PROD)"


@pytest.fixture
def router():
    with respx.mock(assert_all_called=False) as mock:
        yield mock


@pytest.fixture(autouse=True)
def sleeps(monkeypatch):
    recorded = []
    monkeypatch.setattr(time, "sleep", recorded.append)
    return recorded


def make_client(**overrides):
    settings = {"url": BASE_URL, "token": "token", "retry_max": 1}
    settings.update(overrides)
    return DataHubClient(ClientConfig(**settings))


def respond_data(router, data):
    return router.post(ENDPOINT).mock(return_value=httpx.Response(200, json={"data": data}))


def sent_body(route, index=-1):
    return json.loads(route.calls[index].request.content)


def test_new_valid_config():
    client = make_client()
    assert client.config.url == BASE_URL
    assert client.config.token == "token"


@pytest.mark.parametrize(
    "settings, message",
    [
        ({"token": "token"}, "DATAHUB_URL is required"),
        ({"url": BASE_URL}, "DATAHUB_TOKEN is required"),
    ],
)
def test_new_invalid_config(settings, message):
    with pytest.raises(ConfigError, match=message):
        DataHubClient(ClientConfig(**settings))


@pytest.mark.parametrize(
    "url",
    [BASE_URL, BASE_URL + "/", BASE_URL + "/api/graphql"],
)
def test_endpoint_normalised(url):
    assert make_client(url=url).endpoint == ENDPOINT


def test_client_defaults():
    client = DataHubClient(ClientConfig(url=BASE_URL, token="token"))
    config = client.config
    assert config.timeout == 30
    assert config.retry_max == 3
    assert config.default_limit == 10
    assert config.max_limit == 100
    assert config.max_lineage_depth == 5


def test_context_manager_returns_client():
    client = make_client()
    with client as entered:
        assert entered is client


def test_execute_success_and_headers(router):
    route = respond_data(router, {"test": "value"})
    client = make_client()
    assert client.execute("query { test }") == {"test": "value"}
    request = route.calls[0].request
    assert request.method == "POST"
    assert request.headers["Content-Type"] == "application/json"
    assert request.headers["Authorization"] == "Bearer token"
    assert sent_body(route) == {"query": "query { test }"}


@pytest.mark.parametrize(
    "status, error",
    [(401, UnauthorizedError), (403, ForbiddenError), (429, RateLimitedError)],
)
def test_execute_status_errors(router, status, error):
    router.post(ENDPOINT).mock(return_value=httpx.Response(status, json={}))
    with pytest.raises(error):
        make_client(retry_max=0).execute("query { test }")


def test_execute_graphql_error(router):
    router.post(ENDPOINT).mock(
        return_value=httpx.Response(200, json={"errors": [{"message": "some graphql error"}]})
    )
    with pytest.raises(DataHubError, match="graphql error: some graphql error"):
        make_client().execute("query { test }")


def test_execute_graphql_not_found(router):
    router.post(ENDPOINT).mock(
        return_value=httpx.Response(200, json={"errors": [{"message": "Entity not found"}]})
    )
    with pytest.raises(NotFoundError, match="entity not found"):
        make_client().execute("query { test }")


def test_unauthorized_is_not_retried(router):
    route = router.post(ENDPOINT).mock(return_value=httpx.Response(401, json={}))
    with pytest.raises(UnauthorizedError):
        make_client(retry_max=3).execute("query { test }")
    assert route.call_count == 1


def test_rate_limit_is_retried_with_backoff(router, sleeps):
    route = router.post(ENDPOINT).mock(return_value=httpx.Response(429, json={}))
    with pytest.raises(RateLimitedError):
        make_client(retry_max=2).execute("query { test }")
    assert route.call_count == 3
    assert sleeps == pytest.approx([0.1, 0.4])


def test_retry_then_success(router):
    route = router.post(ENDPOINT).mock(
        side_effect=[
            httpx.Response(500, text="boom"),
            httpx.Response(200, json={"data": {"ok": True}}),
        ]
    )
    assert make_client(retry_max=1).execute("query { ok }") == {"ok": True}
    assert route.call_count == 2


def test_server_error(router):
    router.post(ENDPOINT).mock(return_value=httpx.Response(500, text="Internal Server Error"))
    with pytest.raises(DataHubError, match="unexpected status 500: Internal Server Error"):
        make_client().ping()


def test_invalid_json_response(router):
    router.post(ENDPOINT).mock(return_value=httpx.Response(200, text="not json"))
    with pytest.raises(DataHubError, match="failed to unmarshal response"):
        make_client().ping()


def test_timeout(router):
    router.post(ENDPOINT).mock(side_effect=httpx.ReadTimeout("timed out"))
    with pytest.raises(RequestTimeoutError):
        make_client().ping()


def test_ping(router):
    route = respond_data(router, {"__typename": "Query"})
    result = make_client().ping()
    assert result is None
    assert route.call_count == 1
    assert "__typename" in sent_body(route)["query"]


SEARCH_RESPONSE = {
    "search": {
        "start": 0,
        "count": 10,
        "total": 1,
        "searchResults": [
            {
                "entity": {
                    "urn": DATASET_URN,
                    "type": "DATASET",
                    "name": "table",
                    "description": "Test table",
                    "platform": {"name": "snowflake"},
                    "properties": {"name": "", "description": ""},
                },
                "matchedFields": [{"name": "name", "value": "table"}],
            }
        ],
    }
}


def test_search(router):
    route = respond_data(router, SEARCH_RESPONSE)
    result = make_client().search("table")
    assert result.total == 1
    assert result.limit == 10
    assert len(result.entities) == 1
    entity = result.entities[0]
    assert entity.name == "table"
    assert entity.description == "Test table"
    assert entity.platform == "snowflake"
    assert entity.matched_fields[0].value == "table"
    assert sent_body(route)["variables"]["input"] == {
        "type": "DATASET",
        "query": "table",
        "start": 0,
        "count": 10,
    }


def test_search_options(router):
    route = respond_data(
        router, {"search": {"start": 0, "count": 0, "total": 0, "searchResults": []}}
    )
    result = make_client().search("test", entity_type="DASHBOARD", limit=50, offset=10)
    assert result.total == 0
    assert result.limit == 0
    assert len(result.entities) == 0
    sent = sent_body(route)["variables"]["input"]
    assert sent["type"] == "DASHBOARD"
    assert sent["count"] == 50
    assert sent["start"] == 10


def test_search_limit_clamped(router):
    route = respond_data(router, {"search": {"searchResults": []}})
    result = make_client().search("test", limit=500)
    assert result.total == 0
    assert len(result.entities) == 0
    assert sent_body(route)["variables"]["input"]["count"] == 100


def test_search_properties_override(router):
    respond_data(
        router,
        {
            "search": {
                "searchResults": [
                    {
                        "entity": {
                            "urn": "urn:li:dataProduct:p",
                            "type": "DATA_PRODUCT",
                            "properties": {"name": "Product", "description": "Desc"},
                        }
                    }
                ]
            }
        },
    )
    entity = make_client().search("*").entities[0]
    assert (entity.name, entity.description) == ("Product", "Desc")


def test_get_entity(router):
    respond_data(
        router,
        {
            "entity": {
                "urn": DATASET_URN,
                "type": "DATASET",
                "name": "table",
                "description": "Test description",
                "platform": {"name": "snowflake"},
                "properties": {"name": "", "description": ""},
                "subTypes": {"typeNames": []},
                "deprecation": {"deprecated": False, "note": "", "decommissionTime": 0},
            }
        },
    )
    entity = make_client().get_entity(DATASET_URN)
    assert entity.name == "table"
    assert entity.type == "DATASET"
    assert entity.platform == "snowflake"
    assert entity.deprecation is None


def test_get_entity_not_found(router):
    respond_data(router, {"entity": {"urn": ""}})
    with pytest.raises(NotFoundError):
        make_client().get_entity("urn:li:dataset:nonexistent")


def test_get_entity_with_properties_and_deprecation(router):
    respond_data(
        router,
        {
            "entity": {
                "urn": "urn:li:dataset:test",
                "type": "DATASET",
                "name": "original_name",
                "description": "original_desc",
                "platform": {"name": "snowflake"},
                "properties": {"name": "Property Name", "description": "Property Description"},
                "subTypes": {"typeNames": []},
                "deprecation": {
                    "deprecated": True,
                    "note": "This entity is deprecated",
                    "decommissionTime": 1704067200000,
                },
            }
        },
    )
    entity = make_client().get_entity("urn:li:dataset:test")
    assert entity.name == "Property Name"
    assert entity.description == "Property Description"
    assert entity.deprecation is not None
    assert entity.deprecation.deprecated is True
    assert entity.deprecation.note == "This entity is deprecated"
    assert entity.deprecation.decommission_time == 1704067200000


def test_get_schema(router):
    respond_data(
        router,
        {
            "dataset": {
                "schemaMetadata": {
                    "name": "schema",
                    "version": 1,
                    "hash": "abc123",
                    "primaryKeys": ["id"],
                    "fields": [
                        {
                            "fieldPath": "id",
                            "type": "NUMBER",
                            "nativeDataType": "INT64",
                            "description": "Primary key",
                            "nullable": False,
                            "isPartOfKey": True,
                        },
                        {
                            "fieldPath": "name",
                            "type": "STRING",
                            "nativeDataType": "VARCHAR",
                            "description": "Name field",
                            "nullable": True,
                            "isPartOfKey": False,
                        },
                    ],
                }
            }
        },
    )
    schema = make_client().get_schema("urn:li:dataset:test")
    assert len(schema.fields) == 2
    assert schema.fields[0].field_path == "id"
    assert schema.fields[0].native_type == "INT64"
    assert schema.fields[0].is_partition_key is True
    assert schema.fields[1].nullable is True
    assert schema.primary_keys == ["id"]
    assert schema.version == 1


LINEAGE_RESPONSE = {
    "searchAcrossLineage": {
        "searchResults": [
            {
                "entity": {
                    "urn": "urn:li:dataset:downstream",
                    "type": "DATASET",
                    "name": "downstream_table",
                    "description": "Downstream table",
                    "platform": {"name": "snowflake"},
                },
                "degree": 1,
            }
        ]
    }
}


def test_get_lineage(router):
    route = respond_data(router, LINEAGE_RESPONSE)
    result = make_client().get_lineage("urn:li:dataset:test")
    assert len(result.nodes) == 1
    assert result.nodes[0].level == 1
    assert result.nodes[0].name == "downstream_table"
    assert result.direction == "DOWNSTREAM"
    assert result.depth == 1
    assert result.start == "urn:li:dataset:test"
    assert sent_body(route)["variables"]["direction"] == "DOWNSTREAM"


def test_get_lineage_direction_and_depth_clamp(router):
    route = respond_data(router, LINEAGE_RESPONSE)
    result = make_client().get_lineage("urn:li:dataset:test", direction="upstream", depth=50)
    assert result.direction == "UPSTREAM"
    assert result.depth == 5
    assert sent_body(route)["variables"]["direction"] == "UPSTREAM"


def test_get_queries(router):
    respond_data(
        router,
        {
            "dataset": {
                "usageStats": {
                    "buckets": [
                        {
                            "metrics": {
                                "topSqlQueries": [
                                    "SELECT * FROM table",
                                    "SELECT id FROM table WHERE active = true",
                                ]
                            }
                        }
                    ]
                }
            }
        },
    )
    result = make_client().get_queries("urn:li:dataset:test")
    assert result.total == 2
    assert result.queries[0].statement == "SELECT * FROM table"


def test_get_queries_error_gives_empty(router):
    router.post(ENDPOINT).mock(
        return_value=httpx.Response(200, json={"errors": [{"message": "usage disabled"}]})
    )
    result = make_client().get_queries("urn:li:dataset:test")
    assert result.total == 0
    assert result.queries == []


TAGS_RESPONSE = {
    "search": {
        "searchResults": [
            {
                "entity": {
                    "urn": "urn:li:tag:PII",
                    "name": "PII",
                    "description": "Personal info",
                    "properties": {"name": "", "description": ""},
                }
            }
        ]
    }
}


def test_list_tags(router):
    route = respond_data(router, TAGS_RESPONSE)
    tags = make_client().list_tags("")
    assert len(tags) == 1
    assert tags[0].name == "PII"
    assert tags[0].description == "Personal info"
    sent = sent_body(route)["variables"]["input"]
    assert sent["query"] == "*"
    assert sent["type"] == "TAG"
    assert sent["count"] == 100


def test_list_tags_filter(router):
    route = respond_data(router, TAGS_RESPONSE)
    tags = make_client().list_tags("pii")
    assert [(tag.urn, tag.name) for tag in tags] == [("urn:li:tag:PII", "PII")]
    assert sent_body(route)["variables"]["input"]["query"] == "pii"


def test_list_domains(router):
    respond_data(
        router,
        {
            "listDomains": {
                "total": 1,
                "domains": [
                    {
                        "urn": "urn:li:domain:marketing",
                        "properties": {"name": "Marketing", "description": "Marketing domain"},
                        "entities": {"total": 10},
                    }
                ],
            }
        },
    )
    domains = make_client().list_domains()
    assert len(domains) == 1
    assert domains[0].name == "Marketing"
    assert domains[0].entity_count == 10


def test_get_glossary_term(router):
    respond_data(
        router,
        {
            "glossaryTerm": {
                "urn": "urn:li:glossaryTerm:business.revenue",
                "name": "Revenue",
                "hierarchicalName": "Business.Revenue",
                "properties": {
                    "name": "Revenue",
                    "description": "Total revenue from all sources",
                },
            }
        },
    )
    term = make_client().get_glossary_term("urn:li:glossaryTerm:business.revenue")
    assert term.name == "Revenue"
    assert term.description == "Total revenue from all sources"


def test_get_glossary_term_not_found(router):
    respond_data(router, {"glossaryTerm": {"urn": ""}})
    with pytest.raises(NotFoundError):
        make_client().get_glossary_term("urn:li:glossaryTerm:nonexistent")


def test_list_data_products(router):
    respond_data(
        router,
        {
            "listDataProducts": {
                "total": 1,
                "dataProducts": [
                    {
                        "urn": "urn:li:dataProduct:product1",
                        "properties": {
                            "name": "Product 1",
                            "description": "First product",
                            "customProperties": [
                                {"key": "team", "value": "data-engineering"}
                            ],
                        },
                        "domain": {
                            "domain": {
                                "urn": "urn:li:domain:marketing",
                                "properties": {"name": "Marketing"},
                            }
                        },
                        "ownership": {
                            "owners": [
                                {
                                    "owner": {
                                        "urn": "urn:li:corpuser:john",
                                        "username": "john",
                                        "name": "John Doe",
                                    },
                                    "type": "TECHNICAL_OWNER",
                                }
                            ]
                        },
                    }
                ],
            }
        },
    )
    products = make_client().list_data_products()
    assert len(products) == 1
    product = products[0]
    assert product.name == "Product 1"
    assert product.domain is not None and product.domain.name == "Marketing"
    assert len(product.owners) == 1
    assert product.owners[0].name == "John Doe"
    assert product.owners[0].type == "TECHNICAL_OWNER"
    assert product.properties["team"] == "data-engineering"


def test_list_data_products_search_fallback(router):
    def handler(request):
        body = json.loads(request.content)
        if "listDataProducts" in body["query"]:
            return httpx.Response(
                200, json={"errors": [{"message": "Unknown field listDataProducts"}]}
            )
        return httpx.Response(
            200,
            json={
                "data": {
                    "search": {
                        "total": 1,
                        "searchResults": [
                            {
                                "entity": {
                                    "urn": "urn:li:dataProduct:legacy",
                                    "type": "DATA_PRODUCT",
                                    "properties": {
                                        "name": "Legacy",
                                        "description": "Old server product",
                                    },
                                }
                            }
                        ],
                    }
                }
            },
        )

    route = router.post(ENDPOINT).mock(side_effect=handler)
    products = make_client(retry_max=1).list_data_products()
    assert [(p.urn, p.name, p.description) for p in products] == [
        ("urn:li:dataProduct:legacy", "Legacy", "Old server product")
    ]
    search_input = sent_body(route)["variables"]["input"]
    assert search_input["type"] == "DATA_PRODUCT"
    assert search_input["count"] == 100


def test_list_data_products_both_fail(router):
    router.post(ENDPOINT).mock(
        return_value=httpx.Response(200, json={"errors": [{"message": "broken"}]})
    )
    with pytest.raises(DataHubError, match="search fallback also failed"):
        make_client(retry_max=1).list_data_products()


def test_get_data_product(router):
    respond_data(
        router,
        {
            "dataProduct": {
                "urn": "urn:li:dataProduct:test",
                "properties": {
                    "name": "Test Product",
                    "description": "A test data product",
                    "customProperties": [{"key": "team", "value": "data-platform"}],
                },
                "domain": {
                    "domain": {
                        "urn": "urn:li:domain:sales",
                        "properties": {"name": "Sales", "description": "Sales domain"},
                    }
                },
                "ownership": {
                    "owners": [
                        {
                            "owner": {
                                "urn": "urn:li:corpuser:jane",
                                "username": "jane",
                                "name": "",
                                "info": {
                                    "displayName": "Jane Smith",
                                    "email": "jane@example.com",
                                },
                            },
                            "type": "DATA_STEWARD",
                        }
                    ]
                },
            }
        },
    )
    product = make_client().get_data_product("urn:li:dataProduct:test")
    assert product.name == "Test Product"
    assert product.domain is not None
    assert product.domain.name == "Sales"
    assert product.domain.description == "Sales domain"
    assert len(product.owners) == 1 and product.owners[0].name == "Jane Smith"
    assert product.properties["team"] == "data-platform"


def test_get_data_product_not_found(router):
    respond_data(router, {"dataProduct": {"urn": ""}})
    with pytest.raises(NotFoundError):
        make_client().get_data_product("urn:li:dataProduct:nonexistent")


def test_from_env():
    client = DataHubClient.from_env({"DATAHUB_URL": BASE_URL, "DATAHUB_TOKEN": "token"})
    assert client.endpoint == ENDPOINT


def test_from_env_missing_config():
    with pytest.raises(ConfigError):
        DataHubClient.from_env({})