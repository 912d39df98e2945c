"""CLI and MCP server configuration."""

from type_dependencies.shared.config import BaseTypeDepSettings


class ToolSettings(BaseTypeDepSettings):
    """Settings for the ``type-dep`` CLI and the MCP server."""

    component_name: str = "tools"
    host: str = "0.0.0.0"
    port: int = 8010
    hide_anonymous_types: bool = True

    class Config(BaseTypeDepSettings.Config):
        env_prefix = "TYPEDEP_"
