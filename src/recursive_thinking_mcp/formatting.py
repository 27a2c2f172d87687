"""
Response formatting utilities for LLM-optimized output
"""

import json
from typing import Any

START_INSTRUCTION = "Provide your response to this prompt, then call again with action=iterate"
CONTINUE_INSTRUCTION = "Continue iterating until isComplete=true"
FINAL_INSTRUCTION = "Production-ready solution achieved. Review iterations for full context."


def _dump(payload: dict[str, Any]) -> str:
    return json.dumps(payload, indent=2)


def format_start_result(result: dict[str, Any]) -> str:
    """Format recursive_thinking action=start response"""
    return _dump(
        {
            "sessionId": result["session_id"],
            "prompt": result["prompt"],
            "depth": result.get("depth", 0),
            "isComplete": False,
            "config": result.get("config", {}),
            "instruction": START_INSTRUCTION,
        }
    )


def format_iteration_result(result: dict[str, Any]) -> str:
    """Format recursive_thinking action=iterate response"""
    if result.get("is_complete"):
        return _dump(
            {
                "sessionId": result["session_id"],
                "isComplete": True,
                "depth": result["depth"],
                "confidence": result["confidence"],
                "stopReason": result.get("stop_reason"),
                "iterations": result.get("iterations", []),
                "finalSolution": result.get("final_solution", ""),
                "instruction": FINAL_INSTRUCTION,
            }
        )

    return _dump(
        {
            "sessionId": result["session_id"],
            "prompt": result["prompt"],
            "depth": result["depth"],
            "confidence": result["confidence"],
            "isComplete": False,
            "instruction": CONTINUE_INSTRUCTION,
        }
    )


def format_session_status(result: dict[str, Any]) -> str:
    """Format get_thinking_status response"""
    session = dict(result["session"])
    state = result.get("state", {})
    session["iterations"] = len(state.get("iterations", []))
    session["lastResult"] = state.get("lastResult", "")
    if not session.get("isComplete"):
        session["instruction"] = "Continue with action=iterate and this sessionId"
    return _dump(session)


def format_session_list(result: dict[str, Any]) -> str:
    """Format list_thinking_sessions response"""
    total = result.get("total", 0)
    sessions = result.get("sessions", [])
    payload: dict[str, Any] = {"total": total, "sessions": sessions}

    if total == 0:
        payload["message"] = "No active sessions. Start one with action=start."
    elif total > len(sessions):
        payload["message"] = f"... and {total - len(sessions)} more sessions"

    return _dump(payload)
