from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..datastructures.type_aliases import HostAddress, PortNumber, TimeoutMs


class ServerPulseSettings(BaseSettings):
    """ServerPulse process configuration, read once at startup."""

    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore", populate_by_name=True
    )

    ping_timeout_ms: TimeoutMs = Field(
        4000,
        gt=0,
        validation_alias=AliasChoices("PING_TIMEOUT_MS", "ping_timeout_ms"),
        description="Deadline for a single status probe, in milliseconds.",
    )
    host: HostAddress = Field(
        "127.0.0.1",
        validation_alias=AliasChoices("HOST", "host"),
        description="The host address for the status server to listen on.",
    )
    port: PortNumber = Field(
        3000,
        ge=0,
        le=65535,
        validation_alias=AliasChoices("PORT", "port"),
        description="The port for the status server to listen on (0 picks a free port).",
    )
    roster_path: str | None = Field(
        None,
        validation_alias=AliasChoices("ROSTER_PATH", "roster_path"),
        description="JSON roster file to load. The bundled roster is used when unset.",
    )
    log_level: str = Field(
        "INFO",
        validation_alias=AliasChoices("LOG_LEVEL", "log_level"),
        description="Minimum loguru level written to stderr.",
    )

    @property
    def ping_timeout_seconds(self) -> float:
        return self.ping_timeout_ms / 1000.0
