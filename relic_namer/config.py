"""
Relic Namer — Configuration
=============================

What:  Settings loaded from the environment, plus the immutable NamingConfig
       snapshot handed to the middleware.
How:   Pydantic Settings reads RELIC_NAMER_* environment variables (or .env),
       validates them, and NamingConfig.from_settings() freezes the subset the
       naming logic needs.
Who:   main.instrument() builds both once at startup.
When:  Loaded at import time (settings singleton); snapshot built once per app.

Environment layout (nested delimiter "__"):
    RELIC_NAMER_ENABLED=true
    RELIC_NAMER_HTTP__PREFIX=myapp/
    RELIC_NAMER_HTTP__IGNORE='["health", "docs*"]'
    RELIC_NAMER_HTTP__REWRITE='{"admin/users": "admin.dashboard"}'
    RELIC_NAMER_HTTP__VISITORS__RECORD_IP_ADDRESS=false
    RELIC_NAMER_HTTP__VISITORS__RECORD_USER_ID=true
    RELIC_NAMER_HTTP__VISITORS__GUEST_LABEL=Guest
"""

from types import MappingProxyType
from typing import Dict, List, Mapping, Tuple

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


def normalize_path(path: str) -> str:
    """
    Strip leading and trailing slashes; the empty path becomes "/".

    >>> normalize_path("/admin/users/")
    'admin/users'
    >>> normalize_path("///")
    '/'
    """
    return path.strip("/") or "/"


# ══════════════════════════════════════════════════════════════════════════
# Environment Settings
# ══════════════════════════════════════════════════════════════════════════


class VisitorSettings(BaseModel):
    """Which visitor details are attached to each transaction."""

    record_ip_address: bool = Field(default=True)
    record_user_id: bool = Field(default=True)

    # user_type parameter when no principal is resolved
    guest_label: str = Field(default="Guest")


class HttpSettings(BaseModel):
    """Naming rules for HTTP transactions."""

    # Prepended verbatim to every transaction name, no separator added
    prefix: str = Field(default="")

    # Path, route-name or full-URL glob patterns that are never instrumented
    ignore: List[str] = Field(default_factory=list)

    # Request path → custom transaction name
    rewrite: Dict[str, str] = Field(default_factory=dict)

    visitors: VisitorSettings = Field(default_factory=VisitorSettings)


class Settings(BaseSettings):
    """
    Relic Namer settings loaded from environment variables.

    All settings have defaults suitable for a development box where the
    New Relic agent may or may not be installed.
    """

    # ── Agent ─────────────────────────────────────────────────────────────
    # Master switch; when false the middleware is a pure passthrough
    enabled: bool = Field(default=True)

    # New Relic groups names as WebTransaction/<group>/<name>
    transaction_group: str = Field(default="Function")

    # ── Naming ────────────────────────────────────────────────────────────
    http: HttpSettings = Field(default_factory=HttpSettings)

    # ── Logging ───────────────────────────────────────────────────────────
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    model_config = {
        "env_prefix": "RELIC_NAMER_",
        "env_nested_delimiter": "__",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


# ══════════════════════════════════════════════════════════════════════════
# Naming Snapshot
# ══════════════════════════════════════════════════════════════════════════


class NamingConfig(BaseModel):
    """
    Immutable naming configuration injected into the middleware.

    Rewrite keys are normalized on construction, so lookups only need to
    normalize the request path. Duplicate keys after normalization keep the
    last value given. The rules are exposed as a read-only mapping.
    """

    prefix: str = ""
    rewrite_rules: Mapping[str, str] = Field(default_factory=dict)
    ignore_patterns: Tuple[str, ...] = ()
    record_ip_address: bool = True
    record_user_id: bool = True
    guest_label: str = "Guest"

    model_config = {"frozen": True}

    @field_validator("rewrite_rules")
    @classmethod
    def normalize_rewrite_keys(cls, v: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType({normalize_path(path): name for path, name in v.items()})

    @field_validator("ignore_patterns")
    @classmethod
    def drop_duplicate_patterns(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        return tuple(dict.fromkeys(p for p in v if p))

    @classmethod
    def from_settings(cls, source: "Settings") -> "NamingConfig":
        http = source.http
        return cls(
            prefix=http.prefix,
            rewrite_rules=http.rewrite,
            ignore_patterns=tuple(http.ignore),
            record_ip_address=http.visitors.record_ip_address,
            record_user_id=http.visitors.record_user_id,
            guest_label=http.visitors.guest_label,
        )


# Singleton instance read by main.instrument() when no settings are passed
settings = Settings()
