"""Header configuration loaded from environment variables.

Uses pydantic-settings so deployments can override the identifier
domains without code changes.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class HeaderConfig(BaseSettings):
    """Settings shared by the header builder and the CLI."""

    model_config = {"env_prefix": "MIME_HEADER_"}

    internal_id_domain: str = Field(
        default="protonmail.internalid",
        description="Domain suffix for Message-Id/References built from internal IDs",
    )
    conversation_id_domain: str = Field(
        default="protonmail.conversationid",
        description="Domain suffix for References built from conversation IDs",
    )
    log_level: str = Field(default="INFO", description="Root log level name")
    log_json: bool = Field(
        default=True,
        description="Emit JSON log lines (False for a human-friendly console renderer)",
    )
