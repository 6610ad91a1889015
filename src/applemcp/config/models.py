"""Pydantic configuration models with code-baked defaults.

Each class is one table of applemcp.toml. Defaults live here, so the file
only lists overrides and an empty (or missing) file is valid.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class BridgeConfig(BaseModel):
    """[bridge] section."""

    model_config = {"frozen": True}

    osascript_path: str = "/usr/bin/osascript"
    timeout_seconds: float = Field(default=30.0, gt=0)


class MessagesConfig(BaseModel):
    """[messages] section."""

    model_config = {"frozen": True}

    chat_db: Path = Path("~/Library/Messages/chat.db")
    default_limit: int = Field(default=10, ge=1)
    max_limit: int = Field(default=50, ge=1)

    def clamp(self, limit: int | None) -> int:
        """Apply the default and the upper bound to a requested limit."""
        return min(limit or self.default_limit, self.max_limit)


class McpConfig(BaseModel):
    """[mcp] section."""

    model_config = {"frozen": True}

    name: str = "Apple MCP tools"
    transport: str = "stdio"
    host: str = "127.0.0.1"
    port: int = 8000
