"""
CLI entry point for Recursive Thinking MCP server
"""

if __name__ == "__main__":
    from . import run_from_env

    run_from_env()
