"""Configuration management for the Argo Workflows MCP server."""

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

VALID_TRANSPORTS = ("stdio", "http")
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off"}


def _env_bool(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    logger.warning(f"Invalid boolean value {raw!r} for {key}, using default {default}")
    return default


@dataclass
class ArgoServerConfig:
    """Configuration class for the Argo Workflows MCP server."""

    # Argo Server connection
    argo_server: str = "localhost:2746"
    argo_token: str = ""
    namespace: str = "default"
    secure: bool = True
    insecure_skip_verify: bool = False
    request_timeout: float = 30.0  # seconds

    # MCP server
    server_name: str = "argo-workflows"
    transport: str = "stdio"
    http_host: str = "127.0.0.1"
    http_port: int = 8080

    # Failure diagnosis
    log_tail_lines: int = 50
    max_log_bytes: int = 50_000

    # Runtime
    log_level: str = "INFO"

    @classmethod
    def from_environment(cls) -> "ArgoServerConfig":
        """Create configuration from environment variables."""
        return cls(
            argo_server=os.getenv("ARGO_SERVER", "localhost:2746").strip(),
            argo_token=os.getenv("ARGO_TOKEN", ""),
            namespace=os.getenv("ARGO_NAMESPACE", "").strip() or "default",
            secure=_env_bool("ARGO_SECURE", True),
            insecure_skip_verify=_env_bool("ARGO_INSECURE_SKIP_VERIFY", False),
            request_timeout=float(os.getenv("ARGO_REQUEST_TIMEOUT", "30")),

            server_name=os.getenv("ARGO_MCP_SERVER_NAME", "argo-workflows"),
            transport=os.getenv("MCP_TRANSPORT", "stdio").strip().lower(),
            http_host=os.getenv("MCP_HTTP_HOST", "127.0.0.1"),
            http_port=int(os.getenv("MCP_HTTP_PORT", "8080")),

            log_tail_lines=int(os.getenv("DIAGNOSIS_LOG_TAIL_LINES", "50")),
            max_log_bytes=int(os.getenv("DIAGNOSIS_MAX_LOG_BYTES", "50000")),

            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    @property
    def base_url(self) -> str:
        """Base URL of the Argo Server REST API."""
        if "://" in self.argo_server:
            return self.argo_server.rstrip("/")
        scheme = "https" if self.secure else "http"
        return f"{scheme}://{self.argo_server}"

    def validate(self) -> tuple[bool, list[str]]:
        """Validate configuration settings."""
        errors = []

        if not self.argo_server:
            errors.append("argo_server cannot be empty")

        if not self.namespace:
            errors.append("namespace cannot be empty")

        if self.request_timeout <= 0:
            errors.append("request_timeout must be positive")

        if self.transport not in VALID_TRANSPORTS:
            errors.append(f"transport must be one of {list(VALID_TRANSPORTS)}")

        if self.transport == "http" and not 0 < self.http_port < 65536:
            errors.append("http_port must be between 1 and 65535")

        if self.log_tail_lines <= 0:
            errors.append("log_tail_lines must be positive")

        if self.max_log_bytes <= 0:
            errors.append("max_log_bytes must be positive")

        if self.log_level not in VALID_LOG_LEVELS:
            errors.append(f"log_level must be one of {list(VALID_LOG_LEVELS)}")

        return len(errors) == 0, errors

    def __post_init__(self):
        """Post-initialization validation."""
        is_valid, errors = self.validate()
        if not is_valid:
            raise ValueError(f"Invalid configuration: {', '.join(errors)}")


# Global configuration instance
_config: ArgoServerConfig | None = None


def get_config() -> ArgoServerConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = ArgoServerConfig.from_environment()
    return _config


def set_config(config: ArgoServerConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset the global configuration instance."""
    global _config
    _config = None
