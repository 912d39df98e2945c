"""
Base configuration for all type-dependencies front ends.

Uses Pydantic Settings for environment-based configuration.
Each front end extends BaseTypeDepSettings with its own prefix.
"""

import tempfile

from pydantic_settings import BaseSettings


class BaseTypeDepSettings(BaseSettings):
    """Base settings shared by the CLI, the MCP server and the gateway."""

    component_name: str = "base"

    # Session state
    state_directory: str = tempfile.gettempdir()
    state_file_prefix: str = "typedep-"

    # Edge ingestion
    framework_namespaces: list[str] = ["System", "Microsoft"]
    extractor_command: list[str] = []

    # Export
    default_export_format: str = "dot"

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
