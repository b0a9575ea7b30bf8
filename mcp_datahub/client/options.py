"""Options for search and lineage requests."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class LineageDirection(str, Enum):
    """Direction in which lineage is traversed."""

    UPSTREAM = "UPSTREAM"
    DOWNSTREAM = "DOWNSTREAM"


@dataclass
class SearchOptions:
    """Parameters of an entity search.

    An empty ``entity_type`` searches datasets; a ``limit`` of None uses the
    client's default limit.
    """

    entity_type: str = ""
    limit: int | None = None
    offset: int = 0
    filters: dict[str, list[str]] | None = None


@dataclass
class LineageOptions:
    """Parameters of a lineage query; the direction is normalised to upper case."""

    direction: str = LineageDirection.DOWNSTREAM.value
    depth: int = 1

    def __post_init__(self) -> None:
        direction = self.direction
        if isinstance(direction, LineageDirection):
            direction = direction.value
        self.direction = direction.upper()