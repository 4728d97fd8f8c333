"""Runtime configuration loaded from environment variables."""

import os
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, List, Mapping, Optional

from .models.dry_run import DEFAULT_SAMPLE_SIZE

logger = logging.getLogger(__name__)

ENV_PREFIX = "CRM_MIGRATION_"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _parse_tokens(value: str) -> Dict[str, str]:
    """Parse 'token:org_id,token2:org_id2' into a token -> org map."""
    tokens = {}
    for pair in value.split(","):
        pair = pair.strip()
        if not pair:
            continue
        token, sep, org_id = pair.partition(":")
        if not sep or not token.strip() or not org_id.strip():
            logger.warning("Ignoring malformed API token entry")
            continue
        tokens[token.strip()] = org_id.strip()
    return tokens


@dataclass
class Settings:
    """Configuration for the dry-run engine and its HTTP surface."""

    jobnimbus_base_url: str = "https://app.jobnimbus.com/api1"
    acculynx_base_url: str = "https://api.acculynx.com/api/v2"

    # Per HTTP call to a source CRM
    http_timeout: float = 30.0
    # Wall-clock ceiling for a whole dry-run request
    request_timeout: float = 60.0

    default_sample_size: int = DEFAULT_SAMPLE_SIZE

    # JSON seed for the in-memory internal store
    store_path: Optional[str] = None

    # Bearer token -> organization id
    api_tokens: Dict[str, str] = field(default_factory=dict)

    log_level: str = "INFO"
    cors_origins: List[str] = field(default_factory=lambda: ["http://localhost:3000"])

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Settings":
        """Create from a dictionary of environment-style values."""

        def get(name: str, default: Any = None) -> Any:
            return data.get(f"{ENV_PREFIX}{name}", default)

        defaults = cls()
        origins = get("CORS_ORIGINS")
        return cls(
            jobnimbus_base_url=get("JOBNIMBUS_BASE_URL", defaults.jobnimbus_base_url).rstrip("/"),
            acculynx_base_url=get("ACCULYNX_BASE_URL", defaults.acculynx_base_url).rstrip("/"),
            http_timeout=float(get("HTTP_TIMEOUT", defaults.http_timeout)),
            request_timeout=float(get("REQUEST_TIMEOUT", defaults.request_timeout)),
            default_sample_size=int(get("DEFAULT_SAMPLE_SIZE", defaults.default_sample_size)),
            store_path=get("STORE_PATH") or None,
            api_tokens=_parse_tokens(get("API_TOKENS", "")),
            log_level=str(get("LOG_LEVEL", defaults.log_level)).upper(),
            cors_origins=(
                [o.strip() for o in origins.split(",") if o.strip()]
                if origins else defaults.cors_origins
            ),
        )

    @classmethod
    def from_env(cls) -> "Settings":
        """Create from the process environment."""
        return cls.from_dict(os.environ)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, read once."""
    return Settings.from_env()


def configure_logging(level: Optional[str] = None) -> None:
    """Set up root logging the same way for the CLI and the API."""
    logging.basicConfig(
        level=getattr(logging, (level or get_settings().log_level).upper(), logging.INFO),
        format=LOG_FORMAT,
    )
