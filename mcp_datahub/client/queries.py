"""GraphQL documents sent to DataHub.

The documents are assembled from nested selections so that shared fragments
(ownership, domains, tags) are written once.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Union

Selection = Union[str, tuple]


def _block(items: Sequence[Selection]) -> str:
    return "{ " + " ".join(_item(item) for item in items) + " }"


def _item(item: Selection) -> str:
    if isinstance(item, str):
        return item
    name, children = item
    return f"{name} {_block(children)}"


def _document(header: str, selection: Sequence[Selection]) -> str:
    return f"{header} {_block(selection)}\n"


_NAME_DESC = ["name", "description"]
_PLATFORM = ("platform", ["name"])
_PROPS = ("properties", _NAME_DESC)
_CUSTOM = ("customProperties", ["key", "value"])
_CORP_USER = ("... on CorpUser", ["urn", "username"])
_CORP_USER_INFO = (
    "... on CorpUser",
    ["urn", "username", ("info", ["displayName", "email"])],
)
_CORP_GROUP = ("... on CorpGroup", ["urn", "name"])


def _ownership(*owner_fragments: Selection) -> Selection:
    return ("ownership", [("owners", [("owner", list(owner_fragments)), "type"])])


def _domain(properties: Sequence[Selection]) -> Selection:
    return ("domain", [("domain", ["urn", ("properties", list(properties))])])


def _tags(tag_fields: Sequence[Selection]) -> Selection:
    return ("tags", [("tags", [("tag", list(tag_fields))])])


SEARCH_QUERY = _document(
    "query search($input: SearchInput!)",
    [
        (
            "search(input: $input)",
            [
                "start",
                "count",
                "total",
                (
                    "searchResults",
                    [
                        (
                            "entity",
                            [
                                "urn",
                                "type",
                                (
                                    "... on Dataset",
                                    [
                                        "name",
                                        "description",
                                        _PLATFORM,
                                        _ownership(_CORP_USER, _CORP_GROUP),
                                        _tags(["urn", "name", "description"]),
                                        _domain(_NAME_DESC),
                                    ],
                                ),
                                ("... on Dashboard", ["dashboardId", ("info", _NAME_DESC), _PLATFORM]),
                                ("... on DataFlow", ["flowId", ("info", _NAME_DESC), _PLATFORM]),
                                ("... on DataProduct", [_PROPS]),
                                ("... on GlossaryTerm", [_PROPS]),
                                ("... on Tag", [_PROPS]),
                            ],
                        ),
                        ("matchedFields", ["name", "value"]),
                    ],
                ),
            ],
        )
    ],
)

GET_ENTITY_QUERY = _document(
    "query getEntity($urn: String!)",
    [
        (
            "entity(urn: $urn)",
            [
                "urn",
                "type",
                (
                    "... on Dataset",
                    [
                        "name",
                        "description",
                        _PLATFORM,
                        _ownership(_CORP_USER_INFO, _CORP_GROUP),
                        _tags(["urn", "name", "description"]),
                        ("glossaryTerms", [("terms", [("term", ["urn", _PROPS])])]),
                        _domain(_NAME_DESC),
                        ("deprecation", ["deprecated", "note", "decommissionTime"]),
                        ("properties", ["name", "description", _CUSTOM]),
                        ("subTypes", ["typeNames"]),
                    ],
                ),
                (
                    "... on Dashboard",
                    [
                        "dashboardId",
                        ("info", ["name", "description", "externalUrl"]),
                        _PLATFORM,
                        _ownership(_CORP_USER),
                    ],
                ),
            ],
        )
    ],
)

GET_SCHEMA_QUERY = _document(
    "query getSchema($urn: String!)",
    [
        (
            "dataset(urn: $urn)",
            [
                (
                    "schemaMetadata",
                    [
                        "name",
                        ("platformSchema", [("... on TableSchema", ["schema"])]),
                        "version",
                        "hash",
                        (
                            "fields",
                            [
                                "fieldPath",
                                "type",
                                "nativeDataType",
                                "description",
                                "nullable",
                                "isPartOfKey",
                                _tags(["urn", "name"]),
                                ("glossaryTerms", [("terms", [("term", ["urn", "name"])])]),
                            ],
                        ),
                        "primaryKeys",
                        (
                            "foreignKeys",
                            [
                                "name",
                                ("sourceFields", ["fieldPath"]),
                                ("foreignDataset", ["urn"]),
                                ("foreignFields", ["fieldPath"]),
                            ],
                        ),
                    ],
                )
            ],
        )
    ],
)

GET_LINEAGE_QUERY = _document(
    "query getLineage($urn: String!, $direction: LineageDirection!)",
    [
        (
            "searchAcrossLineage(input: {urn: $urn, direction: $direction})",
            [
                (
                    "searchResults",
                    [
                        (
                            "entity",
                            [
                                "urn",
                                "type",
                                ("... on Dataset", ["name", _PLATFORM, "description"]),
                                (
                                    "... on DataJob",
                                    ["jobId", ("info", ["name"]), ("dataFlow", ["urn", "flowId"])],
                                ),
                            ],
                        ),
                        "degree",
                    ],
                )
            ],
        )
    ],
)

GET_QUERIES_QUERY = _document(
    "query getQueries($urn: String!)",
    [
        (
            "dataset(urn: $urn)",
            [
                (
                    "usageStats",
                    [("buckets", ["bucket", "duration", ("metrics", ["topSqlQueries"])])],
                )
            ],
        )
    ],
)

GET_GLOSSARY_TERM_QUERY = _document(
    "query getGlossaryTerm($urn: String!)",
    [
        (
            "glossaryTerm(urn: $urn)",
            [
                "urn",
                "name",
                "hierarchicalName",
                ("properties", ["name", "description", _CUSTOM]),
                ("parentNodes", [("nodes", ["urn", ("properties", ["name"])])]),
                _ownership(_CORP_USER),
            ],
        )
    ],
)

LIST_TAGS_QUERY = _document(
    "query listTags($input: SearchInput!)",
    [
        (
            "search(input: $input)",
            [
                "total",
                (
                    "searchResults",
                    [("entity", [("... on Tag", ["urn", "name", "description", _PROPS])])],
                ),
            ],
        )
    ],
)

LIST_DOMAINS_QUERY = _document(
    "query listDomains",
    [
        (
            "listDomains(input: {start: 0, count: 100})",
            [
                "total",
                (
                    "domains",
                    [
                        "urn",
                        _PROPS,
                        _ownership(_CORP_USER),
                        ("entities(input: {start: 0, count: 0})", ["total"]),
                    ],
                ),
            ],
        )
    ],
)

PING_QUERY = _document("query ping", ["__typename"])

LIST_DATA_PRODUCTS_QUERY = _document(
    "query listDataProducts",
    [
        (
            "listDataProducts(input: {start: 0, count: 100})",
            [
                "total",
                (
                    "dataProducts",
                    [
                        "urn",
                        ("properties", ["name", "description", _CUSTOM]),
                        _domain(["name"]),
                        _ownership(_CORP_USER, _CORP_GROUP),
                    ],
                ),
            ],
        )
    ],
)

GET_DATA_PRODUCT_QUERY = _document(
    "query getDataProduct($urn: String!)",
    [
        (
            "dataProduct(urn: $urn)",
            [
                "urn",
                ("properties", ["name", "description", _CUSTOM]),
                _domain(_NAME_DESC),
                _ownership(_CORP_USER_INFO, _CORP_GROUP),
            ],
        )
    ],
)