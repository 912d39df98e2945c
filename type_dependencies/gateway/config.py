"""Gateway configuration."""

from type_dependencies.shared.config import BaseTypeDepSettings


class GatewaySettings(BaseTypeDepSettings):
    """Settings specific to the HTTP gateway."""

    component_name: str = "gateway"
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = ["*"]
    hide_anonymous_types: bool = True

    class Config(BaseTypeDepSettings.Config):
        env_prefix = "TYPEDEP_GATEWAY_"
