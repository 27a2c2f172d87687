"""Shared type definitions for the thinking engine."""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from .errors import InvalidRequestError

# camelCase names advertised by the tool schema, mapped to field names
CONFIG_KEY_ALIASES: dict[str, str] = {
    "maxDepth": "max_depth",
    "minConfidence": "min_confidence",
    "maxIterations": "max_iterations",
}

# (minimum, maximum) accepted for each numeric option
CONFIG_BOUNDS: dict[str, tuple[float, float]] = {
    "max_depth": (1, 10),
    "min_confidence": (0.0, 1.0),
    "max_iterations": (1, 20),
}


class StopReason(Enum):
    """Condition that completed a thinking session"""

    PRODUCTION_READY = "production_ready"
    MAX_DEPTH = "max_depth"
    MAX_ITERATIONS = "max_iterations"
    CONFIDENCE_THRESHOLD = "confidence_threshold"


@dataclass(frozen=True)
class ThinkingConfig:
    """Per-session limits for the thinking loop"""

    max_depth: int = 5
    min_confidence: float = 0.85
    max_iterations: int = 8
    temperature: float = 0.7  # not read by the engine

    @classmethod
    def from_overrides(cls, overrides: Mapping[str, Any] | None = None) -> "ThinkingConfig":
        """Build a config from partial overrides, applying defaults for the rest."""
        return cls().merged(overrides)

    def merged(self, overrides: Mapping[str, Any] | None) -> "ThinkingConfig":
        """
        Return a copy with the given overrides applied.

        Keys may use the advertised camelCase names or the field names.
        None values are ignored.

        Raises:
            InvalidRequestError: On unknown keys, non-numeric or out-of-range values
        """
        if not overrides:
            return self

        changes: dict[str, Any] = {}
        for key, value in overrides.items():
            if value is None:
                continue
            name = CONFIG_KEY_ALIASES.get(key, key)
            if name == "temperature":
                changes[name] = _as_number(name, value, float)
                continue
            if name not in CONFIG_BOUNDS:
                raise InvalidRequestError(f"Unknown config option: {key}")

            kind = float if name == "min_confidence" else int
            number = _as_number(name, value, kind)
            low, high = CONFIG_BOUNDS[name]
            if not low <= number <= high:
                raise InvalidRequestError(f"Config option {key} must be between {low} and {high}")
            changes[name] = number

        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "maxDepth": self.max_depth,
            "minConfidence": self.min_confidence,
            "maxIterations": self.max_iterations,
            "temperature": self.temperature,
        }


def _as_number(name: str, value: Any, kind: type) -> Any:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidRequestError(f"Config option {name} must be a number")
    if not math.isfinite(value):
        raise InvalidRequestError(f"Config option {name} must be a number")
    if kind is int:
        if value != int(value):
            raise InvalidRequestError(f"Config option {name} must be a whole number")
        return int(value)
    return float(value)


@dataclass
class ThinkingState:
    """State of one thinking session between calls"""

    depth: int = 0
    confidence: float = 0.0
    iterations: list[str] = field(default_factory=list)
    last_result: str = ""
    is_complete: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "depth": self.depth,
            "confidence": self.confidence,
            "iterations": list(self.iterations),
            "lastResult": self.last_result,
            "isComplete": self.is_complete,
        }


@dataclass
class IterationResult:
    """Outcome of processing one agent response"""

    next_prompt: str | None
    state: ThinkingState
    stop_reason: StopReason | None = None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SessionRecord:
    """Everything the store keeps for one session"""

    session_id: str
    task: str
    config: ThinkingConfig
    state: ThinkingState = field(default_factory=ThinkingState)
    stop_reason: StopReason | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def to_dict(self, preview_length: int = 50) -> dict[str, Any]:
        """Convert record to dictionary for JSON serialization"""
        task_preview = (
            self.task[:preview_length] + "..." if len(self.task) > preview_length else self.task
        )
        return {
            "sessionId": self.session_id,
            "taskPreview": task_preview,
            "depth": self.state.depth,
            "confidence": self.state.confidence,
            "isComplete": self.state.is_complete,
            "stopReason": self.stop_reason.value if self.stop_reason else None,
            "config": self.config.to_dict(),
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }
