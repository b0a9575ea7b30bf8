"""Building and parsing DataHub URNs."""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import quote, unquote

from mcp_datahub.client.errors import InvalidURNError

_URN_PREFIX = "urn:li:"
_PLATFORM_PREFIX = "urn:li:dataPlatform:"

# Characters left unescaped in a path segment besides the unreserved ones.
_PATH_SEGMENT_SAFE = "$&+:=@"
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


@dataclass(frozen=True)
class ParsedURN:
    """The components of a DataHub URN."""

    raw: str
    entity_type: str
    platform: str = ""
    name: str = ""
    env: str = ""


def build_dataset_urn(platform: str, qualified_name: str, env: str = "") -> str:
    """Build a dataset URN; the name is percent-encoded and env defaults to PROD."""
    encoded = quote(qualified_name, safe=_PATH_SEGMENT_SAFE)
    return f"urn:li:dataset:({_PLATFORM_PREFIX}{platform},{encoded},{env or 'PROD'})"


def build_dashboard_urn(platform: str, dashboard_id: str) -> str:
    """Build a dashboard URN."""
    return f"urn:li:dashboard:({platform},{dashboard_id})"


def build_chart_urn(platform: str, chart_id: str) -> str:
    """Build a chart URN."""
    return f"urn:li:chart:({platform},{chart_id})"


def build_data_flow_urn(orchestrator: str, flow_id: str, cluster: str) -> str:
    """Build a data flow URN."""
    return f"urn:li:dataFlow:({orchestrator},{flow_id},{cluster})"


def build_data_job_urn(data_flow_urn: str, job_id: str) -> str:
    """Build a data job URN from its data flow URN."""
    return f"urn:li:dataJob:({data_flow_urn},{job_id})"


def build_glossary_term_urn(term_path: str) -> str:
    """Build a glossary term URN."""
    return f"urn:li:glossaryTerm:{term_path}"


def build_tag_urn(tag_name: str) -> str:
    """Build a tag URN."""
    return f"urn:li:tag:{tag_name}"


def build_domain_urn(domain_id: str) -> str:
    """Build a domain URN."""
    return f"urn:li:domain:{domain_id}"


def _tuple_inner(remainder: str, kind: str) -> str:
    if not (remainder.startswith("(") and remainder.endswith(")")):
        raise InvalidURNError(f"{kind} URN must have parentheses")
    return remainder[1:-1]


def _decode_name(encoded: str) -> str:
    if _BAD_ESCAPE.search(encoded):
        return encoded
    return unquote(encoded)


def _parse_dataset(urn: str, remainder: str) -> ParsedURN:
    parts = _tuple_inner(remainder, "dataset").split(",", 2)
    if len(parts) != 3:
        raise InvalidURNError("dataset URN must have 3 parts")
    platform_urn, encoded_name, env = parts
    if not platform_urn.startswith(_PLATFORM_PREFIX):
        raise InvalidURNError("invalid platform URN")
    return ParsedURN(
        raw=urn,
        entity_type="dataset",
        platform=platform_urn[len(_PLATFORM_PREFIX):],
        name=_decode_name(encoded_name),
        env=env,
    )


def _parse_tuple(urn: str, entity_type: str, remainder: str) -> ParsedURN:
    parts = _tuple_inner(remainder, "tuple").split(",", 1)
    if len(parts) != 2:
        raise InvalidURNError("tuple URN must have 2 parts")
    platform, name = parts
    return ParsedURN(raw=urn, entity_type=entity_type, platform=platform, name=name)


def parse_urn(urn: str) -> ParsedURN:
    """Split a DataHub URN into its parts, raising InvalidURNError if malformed."""
    if not urn.startswith(_URN_PREFIX):
        raise InvalidURNError("must start with 'urn:li:'")

    rest = urn[len(_URN_PREFIX):]
    colon = rest.find(":")
    paren = rest.find("(")

    if colon == -1 and paren == -1:
        entity_type, remainder = rest, ""
    elif paren != -1 and (colon == -1 or paren < colon):
        entity_type, remainder = rest[:paren], rest[paren:]
    else:
        entity_type, remainder = rest[:colon], rest[colon + 1:]

    if entity_type == "dataset":
        return _parse_dataset(urn, remainder)
    if entity_type in ("dashboard", "chart"):
        return _parse_tuple(urn, entity_type, remainder)
    return ParsedURN(raw=urn, entity_type=entity_type, name=remainder)