"""
Shared configuration management for the Versioned Gateway.
"""

from typing import List, Optional

from pydantic import Field, SecretStr
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared.errors import ConfigurationError


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="GATEWAY_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = "local"
    log_level: str = "info"

    # Service
    host: str = "0.0.0.0"
    port: int = 8000


class GatewayConfig(BaseConfig):
    """Settings for the versioned gateway."""

    # Security
    signing_key: SecretStr
    token_algorithms: List[str] = Field(default_factory=lambda: ["HS256", "HS384", "HS512"])
    # Issuer/audience checks are off unless explicitly enabled.
    validate_issuer: bool = False
    issuer: Optional[str] = None
    validate_audience: bool = False
    audience: Optional[str] = None

    # Versioning
    default_api_version: str = "1.0"
    version_header: str = "x-api-version"
    version_query_param: str = "api-version"
    api_prefix: str = "/api"
    report_api_versions: bool = True

    # Documentation
    api_title: str = "Gateway API"
    api_description: str = "Versioned API with bearer token authentication."


def get_config(**overrides) -> GatewayConfig:
    """Load gateway configuration from the environment.

    Keyword overrides take precedence over environment values. A missing or
    invalid setting is fatal and surfaces as ConfigurationError.
    """
    try:
        return GatewayConfig(**overrides)
    except PydanticValidationError as exc:
        fields = sorted({".".join(str(part) for part in err["loc"]) for err in exc.errors()})
        raise ConfigurationError(f"Invalid gateway configuration: {', '.join(fields)}") from exc
