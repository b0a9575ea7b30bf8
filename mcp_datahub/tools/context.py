"""Per-call context shared between tool middleware steps."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any


@dataclass
class ToolContext:
    """Describes one tool execution; ``extra`` carries data between middleware."""

    tool_name: str
    input: Any = None
    start_time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    extra: dict[str, Any] = field(default_factory=dict)
    _started: float = field(default_factory=time.monotonic, init=False, repr=False)

    def duration(self) -> timedelta:
        """Return the time elapsed since the tool started."""
        return timedelta(seconds=time.monotonic() - self._started)

    def set(self, key: str, value: Any) -> None:
        """Store a value under ``key``."""
        self.extra[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under ``key``, or ``default``."""
        return self.extra.get(key, default)