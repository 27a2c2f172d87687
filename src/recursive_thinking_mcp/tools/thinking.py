"""
Thinking tool: start and iterate a recursive thinking session
"""

import logging
import sys
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

from ..core import format_output, handle_tool_errors  # noqa: E402
from ..core.server import mcp  # noqa: E402
from ..core.service import get_thinking_service  # noqa: E402
from ..formatting import format_iteration_result, format_start_result  # noqa: E402

RECURSIVE_THINKING_DESCRIPTION = """Token-efficient recursive thinking engine for production-ready solutions.

HOW IT WORKS:
1. Start with action='start' and your task
2. Get a focused prompt back
3. Provide your response with action='iterate'
4. Repeat until isComplete=true

TOKEN OPTIMIZATION:
- Compresses insights automatically (~70% reduction)
- Uses minimal context per iteration
- Stops early when confidence threshold met (default: 85%)
- Limits iterations to maxDepth (default: 5)

EXAMPLE CONFIGURATION:
{
  "maxDepth": 5,
  "minConfidence": 0.85,
  "maxIterations": 8
}

USAGE:
Call with action='start' to begin, then action='iterate' to refine."""


class ThinkingOptions(BaseModel):
    """Optional per-session limits"""

    model_config = ConfigDict(populate_by_name=True)

    max_depth: int | None = Field(
        default=None,
        alias="maxDepth",
        ge=1,
        le=10,
        description="Maximum recursion depth (default: 5)",
    )
    min_confidence: float | None = Field(
        default=None,
        alias="minConfidence",
        ge=0,
        le=1,
        description="Confidence threshold to stop (default: 0.85)",
    )
    max_iterations: int | None = Field(
        default=None,
        alias="maxIterations",
        ge=1,
        le=20,
        description="Max iterations (default: 8)",
    )


def _overrides(config: ThinkingOptions | dict[str, Any] | None) -> dict[str, Any] | None:
    if config is None:
        return None
    if isinstance(config, ThinkingOptions):
        return config.model_dump(exclude_none=True)
    return dict(config)


@mcp.tool(description=RECURSIVE_THINKING_DESCRIPTION)
@format_output
@handle_tool_errors
async def recursive_thinking(
    action: str,
    task: str = "",
    response: str = "",
    sessionId: str = "",  # noqa: N803
    config: ThinkingOptions | None = None,
) -> str:
    """
    Start or iterate a recursive thinking session.

    Args:
        action: 'start' to begin new thinking or 'iterate' to refine an existing session
        task: The problem/task to solve (required for start)
        response: Agent response to the previous thinking prompt (required for iterate)
        sessionId: Session identifier (auto-generated on start if not provided)
        config: Optional limits (maxDepth, minConfidence, maxIterations)

    Returns:
        JSON with the next prompt, or the final result once isComplete is true
    """
    service = get_thinking_service()

    result = await service.handle(
        action,
        task=task,
        response=response,
        session_id=sessionId,
        config=_overrides(config),
    )

    if action == "start":
        return format_start_result(result)
    return format_iteration_result(result)
