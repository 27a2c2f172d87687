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
Configuration module for Recursive Thinking MCP Server
Centralizes all configuration values and environment variables
"""

import os
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ServerConfig:
    """Configuration for the MCP server"""

    # Server Identity
    server_name: str = field(
        default_factory=lambda: os.getenv("MCP_SERVER_NAME", "recursive-thinking")
    )

    # Input Limits
    max_task_length: int = field(default_factory=lambda: int(os.getenv("MAX_TASK_LENGTH", "2000")))
    max_response_length: int = field(
        default_factory=lambda: int(os.getenv("MAX_RESPONSE_LENGTH", "3000"))
    )

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "WARNING").upper())

    # Display Configuration
    task_preview_length: int = 50
    max_sessions_display: int = 10

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary"""
        return {
            "server_name": self.server_name,
            "max_task_length": self.max_task_length,
            "max_response_length": self.max_response_length,
            "log_level": self.log_level,
            "task_preview_length": self.task_preview_length,
            "max_sessions_display": self.max_sessions_display,
        }


# Global configuration instance
config = ServerConfig()
