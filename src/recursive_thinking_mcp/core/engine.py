#!/usr/bin/env python3
# MIT License
#
# Copyright (c) 2025 Recursive Thinking MCP Contributors
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""
Token-efficient recursive thinking engine.

Pure functions over an explicit ThinkingState: the caller supplies the
previous state and stores the one returned. Nothing here performs I/O.
"""

import logging

from .evaluation import HeuristicEvaluator, ResponseEvaluator
from .thinking_types import IterationResult, StopReason, ThinkingConfig, ThinkingState

logger = logging.getLogger(__name__)

INSIGHT_KEYWORDS = (
    "therefore",
    "conclusion",
    "solution",
    "approach",
    "error",
    "issue",
    "fixed",
    "implement",
)
MAX_INSIGHT_LENGTH = 500
INITIAL_TASK_PREVIEW = 200
REFINE_TASK_PREVIEW = 100

_default_evaluator = HeuristicEvaluator()


def compress_insights(text: str) -> str:
    """
    Reduce a response to the lines that carry conclusions or problems.

    Args:
        text: Free text to compress

    Returns:
        Keyword-bearing lines joined by newlines, at most 500 characters
    """
    lines = [line for line in text.split("\n") if line.strip()]
    kept = [line for line in lines if any(kw in line.lower() for kw in INSIGHT_KEYWORDS)]
    return "\n".join(kept)[:MAX_INSIGHT_LENGTH]


def generate_thinking_prompt(
    original_task: str, state: ThinkingState, config: ThinkingConfig
) -> str:
    """
    Generate the next prompt for the agent.

    Depth 0 asks for a baseline analysis; later depths ask the agent to
    refine its previous answer, carrying only its compressed insights.
    """
    if state.depth == 0:
        return (
            f'Analyze task: "{original_task[:INITIAL_TASK_PREVIEW]}"\n'
            "Provide: [approach][potential_issues][confidence_0-1]\n"
            "Format: Single paragraph, minimal words."
        )

    previous_insights = compress_insights(state.last_result)

    return (
        f"Refine solution (depth {state.depth}/{config.max_depth}):\n"
        f'Task: "{original_task[:REFINE_TASK_PREVIEW]}..."\n'
        f'Previous: "{previous_insights}"\n'
        f"Current confidence: {state.confidence}\n"
        "Provide: [refinement][what_to_improve][new_confidence]\n"
        "Format: Concise, action-oriented."
    )


def start_thinking(task: str, config: ThinkingConfig | None = None) -> str:
    """Return the initial prompt for a fresh session."""
    return generate_thinking_prompt(task, ThinkingState(), config or ThinkingConfig())


def _stop_reason(
    response: str,
    state: ThinkingState,
    config: ThinkingConfig,
    evaluator: ResponseEvaluator,
) -> StopReason | None:
    if evaluator.is_production_ready(response, state.confidence):
        return StopReason.PRODUCTION_READY
    if state.depth >= config.max_depth:
        return StopReason.MAX_DEPTH
    if state.depth >= config.max_iterations:
        return StopReason.MAX_ITERATIONS
    if state.confidence >= config.min_confidence:
        return StopReason.CONFIDENCE_THRESHOLD
    return None


def process_iteration(
    original_task: str,
    agent_response: str,
    previous_state: ThinkingState,
    config: ThinkingConfig | None = None,
    evaluator: ResponseEvaluator | None = None,
) -> IterationResult:
    """
    Fold one agent response into the session state.

    Args:
        original_task: Task given at session start
        agent_response: The agent's answer to the previous prompt
        previous_state: State returned by the previous call (left untouched)
        config: Session limits, defaults when omitted
        evaluator: Confidence/readiness policy, heuristic when omitted

    Returns:
        IterationResult with the new state and either the next prompt or,
        once a stop condition fires, no prompt and the reason
    """
    config = config or ThinkingConfig()
    evaluator = evaluator or _default_evaluator

    confidence = evaluator.parse_confidence(agent_response)
    new_state = ThinkingState(
        depth=previous_state.depth + 1,
        confidence=confidence,
        iterations=[*previous_state.iterations, agent_response],
        last_result=agent_response,
        is_complete=False,
    )

    reason = _stop_reason(agent_response, new_state, config, evaluator)
    if reason is not None:
        new_state.is_complete = True
        logger.debug(f"Thinking complete at depth {new_state.depth}: {reason.value}")
        return IterationResult(next_prompt=None, state=new_state, stop_reason=reason)

    return IterationResult(
        next_prompt=generate_thinking_prompt(original_task, new_state, config),
        state=new_state,
    )
