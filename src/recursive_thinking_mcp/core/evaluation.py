"""
Response evaluation policies.

The thinking loop needs two judgements about each agent response: the
confidence the agent reported, and whether the answer looks finished.
Both are keyword heuristics today, kept behind ResponseEvaluator so a
real parser or classifier can replace them without touching the loop.
"""

import re
from typing import Protocol

DEFAULT_CONFIDENCE = 0.5
PRODUCTION_CONFIDENCE = 0.85
MIN_PRODUCTION_LENGTH = 50

CONFIDENCE_PATTERN = re.compile(r"confidence[:\s]*(\d+(?:\.\d+)?|\.\d+)", re.IGNORECASE)

PRODUCTION_INDICATORS = (
    "implement",
    "complete",
    "final",
    "solution",
    "ready",
    "tested",
    "handle",
    "error",
    "edge case",
    "deploy",
)


class ResponseEvaluator(Protocol):
    """Strategy used by the iteration processor to judge agent responses."""

    def parse_confidence(self, text: str) -> float: ...

    def is_production_ready(self, text: str, confidence: float) -> bool: ...


def parse_confidence(text: str, default: float = DEFAULT_CONFIDENCE) -> float:
    """
    Extract a self-reported confidence such as "confidence: 0.92".

    Args:
        text: Agent response
        default: Value used when the response reports no confidence

    Returns:
        The first reported value, clamped to [0, 1]
    """
    match = CONFIDENCE_PATTERN.search(text)
    if not match:
        return default
    return min(max(float(match.group(1)), 0.0), 1.0)


def is_production_ready(result: str, confidence: float) -> bool:
    """Check whether a response looks like a finished, shippable answer."""
    lowered = result.lower()
    has_indicator = any(keyword in lowered for keyword in PRODUCTION_INDICATORS)
    return (
        confidence >= PRODUCTION_CONFIDENCE
        and has_indicator
        and len(result) > MIN_PRODUCTION_LENGTH
    )


class HeuristicEvaluator:
    """Default keyword-based evaluator"""

    def __init__(self, default_confidence: float = DEFAULT_CONFIDENCE):
        self.default_confidence = default_confidence

    def parse_confidence(self, text: str) -> float:
        return parse_confidence(text, self.default_confidence)

    def is_production_ready(self, text: str, confidence: float) -> bool:
        return is_production_ready(text, confidence)
