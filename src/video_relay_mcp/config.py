"""Server configuration via environment variables."""

from __future__ import annotations

import os

from pydantic import BaseModel, Field, field_validator

VALID_TRANSPORTS = {"http", "sse", "stdio"}
DEFAULT_MODEL = "gemini-2.0-flash-exp"

CREDENTIAL_VARS = ("GOOGLE_API_KEY", "GEMINI_API_KEY")
# Every variable ServerConfig.from_env reads; the .env loader injects only these.
ENV_VARS = CREDENTIAL_VARS + (
    "GEMINI_MODEL",
    "GEMINI_TEMPERATURE",
    "GEMINI_TOP_K",
    "GEMINI_TOP_P",
    "GEMINI_MAX_OUTPUT_TOKENS",
    "RELAY_HOST",
    "RELAY_PORT",
    "RELAY_TRANSPORT",
    "RELAY_ROUTE_PATH",
    "GEMINI_TRACING_ENABLED",
    "MLFLOW_TRACKING_URI",
    "MLFLOW_EXPERIMENT_NAME",
)


def is_env_placeholder(value: str) -> bool:
    """Return True when *value* looks like an unresolved shell placeholder."""
    if value.startswith("${") and value.endswith("}"):
        inner = value[2:-1].strip()
        if ":-" in inner:
            inner = inner.split(":-", 1)[0].strip()
        return bool(inner) and all(ch.isalnum() or ch == "_" for ch in inner)
    if value.startswith("$"):
        inner = value[1:].strip()
        return bool(inner) and all(ch.isalnum() or ch == "_" for ch in inner)
    return False


def _resolve_api_key() -> str:
    """Read the Gemini credential, preferring GOOGLE_API_KEY over GEMINI_API_KEY.

    Blank values and unresolved placeholders are skipped so the fallback
    variable still gets a chance.
    """
    for name in CREDENTIAL_VARS:
        value = os.getenv(name, "").strip()
        if value and not is_env_placeholder(value):
            return value
    return ""


def _resolve_tracing_enabled(flag_value: str, tracking_uri: str) -> bool:
    """Derive tracing_enabled from env vars.

    - ``GEMINI_TRACING_ENABLED=false`` → always disabled (explicit opt-out).
    - Otherwise enabled when ``MLFLOW_TRACKING_URI`` is non-empty.
    """
    if flag_value.lower() == "false":
        return False
    return bool(tracking_uri)


class ServerConfig(BaseModel):
    """Runtime configuration resolved from environment."""

    gemini_api_key: str = Field(default="")
    model: str = Field(default=DEFAULT_MODEL)
    temperature: float = Field(default=0.9)
    top_k: int = Field(default=1)
    top_p: float = Field(default=1.0)
    max_output_tokens: int = Field(default=8192)
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000)
    transport: str = Field(default="http")
    route_path: str = Field(default="/analyze-video")
    tracing_enabled: bool = Field(default=False)
    mlflow_tracking_uri: str = Field(default="")
    mlflow_experiment_name: str = Field(default="video-relay-mcp")

    @field_validator("temperature")
    @classmethod
    def validate_temperature(cls, value: float) -> float:
        if not 0.0 <= value <= 2.0:
            raise ValueError("temperature must be between 0.0 and 2.0")
        return value

    @field_validator("top_p")
    @classmethod
    def validate_top_p(cls, value: float) -> float:
        if not 0.0 <= value <= 1.0:
            raise ValueError("top_p must be between 0.0 and 1.0")
        return value

    @field_validator("top_k", "max_output_tokens", "port")
    @classmethod
    def validate_positive_ints(cls, value: int) -> int:
        if value < 1:
            raise ValueError("Configuration values must be >= 1")
        return value

    @field_validator("transport")
    @classmethod
    def validate_transport(cls, value: str) -> str:
        transport = value.strip().lower()
        if transport not in VALID_TRANSPORTS:
            allowed = ", ".join(sorted(VALID_TRANSPORTS))
            raise ValueError(f"Invalid transport '{value}'. Allowed: {allowed}")
        return transport

    @field_validator("route_path")
    @classmethod
    def validate_route_path(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("route_path must start with '/'")
        return value

    @property
    def has_credential(self) -> bool:
        return bool(self.gemini_api_key)

    @classmethod
    def from_env(cls) -> ServerConfig:
        """Build config from environment variables."""
        return cls(
            gemini_api_key=_resolve_api_key(),
            model=os.getenv("GEMINI_MODEL", DEFAULT_MODEL),
            temperature=float(os.getenv("GEMINI_TEMPERATURE", "0.9")),
            top_k=int(os.getenv("GEMINI_TOP_K", "1")),
            top_p=float(os.getenv("GEMINI_TOP_P", "1.0")),
            max_output_tokens=int(os.getenv("GEMINI_MAX_OUTPUT_TOKENS", "8192")),
            host=os.getenv("RELAY_HOST", "127.0.0.1"),
            port=int(os.getenv("RELAY_PORT", "8000")),
            transport=os.getenv("RELAY_TRANSPORT", "http"),
            route_path=os.getenv("RELAY_ROUTE_PATH", "/analyze-video"),
            tracing_enabled=_resolve_tracing_enabled(
                os.getenv("GEMINI_TRACING_ENABLED", ""),
                os.getenv("MLFLOW_TRACKING_URI", ""),
            ),
            mlflow_tracking_uri=os.getenv("MLFLOW_TRACKING_URI", ""),
            mlflow_experiment_name=os.getenv("MLFLOW_EXPERIMENT_NAME", "video-relay-mcp"),
        )


_config: ServerConfig | None = None


def get_config() -> ServerConfig:
    """Return the global config singleton, creating it on first access.

    Loads ``~/.config/video-relay-mcp/.env`` before reading env vars.
    Process environment always takes precedence over the config file.
    """
    global _config
    if _config is None:
        import logging

        from .dotenv import load_dotenv

        injected = load_dotenv()
        if injected:
            logger = logging.getLogger(__name__)
            logger.info(
                "Loaded %d var(s) from config: %s",
                len(injected),
                ", ".join(injected.keys()),
            )
        _config = ServerConfig.from_env()
    return _config


def reset_config() -> None:
    """Drop the cached singleton so the next ``get_config()`` re-reads the environment."""
    global _config
    _config = None
