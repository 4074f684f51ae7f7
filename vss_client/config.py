"""
Client configuration: VSS endpoint, timeouts, response ceiling and retry tuning.

- Loads sane defaults and supports overrides via environment variables (VSS_*).
- Validates the endpoint scheme and normalizes the base URL.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .version import user_agent

_DEFAULT_BASE_URL = "http://127.0.0.1:8080/vss"

DEFAULT_TIMEOUT_SECS = 10.0
MAX_RESPONSE_BODY_SIZE = 1024 * 1024 * 1024  # 1 GiB
DEFAULT_CLIENT_CAPACITY = 10


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v if v is not None else default


def _normalize_base_url(url: str) -> str:
    lower = url.lower()
    if not (lower.startswith("http://") or lower.startswith("https://")):
        raise ValueError(f"base URL must start with http:// or https://, got: {url!r}")
    return url.rstrip("/")


@dataclass(slots=True)
class ClientConfig:
    # Endpoint
    base_url: str = field(default_factory=lambda: _DEFAULT_BASE_URL)
    # Transport behavior
    timeout: float = DEFAULT_TIMEOUT_SECS
    max_response_size: int = MAX_RESPONSE_BODY_SIZE
    client_capacity: int = DEFAULT_CLIENT_CAPACITY
    # Retry tuning (used by utils.retry.default_retry_policy)
    retry_base_delay: float = 0.01
    max_attempts: int = 10
    max_total_delay: float = 15.0
    max_jitter: float = 0.01
    # Identity
    user_agent: str = field(default_factory=user_agent)

    def __post_init__(self) -> None:
        self.base_url = _normalize_base_url(self.base_url)
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.max_response_size <= 0:
            raise ValueError("max_response_size must be positive")
        if self.client_capacity < 1:
            raise ValueError("client_capacity must be at least 1")
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    @classmethod
    def from_env(cls, prefix: str = "VSS_") -> "ClientConfig":
        """
        Create config from environment variables:

        VSS_BASE_URL            (http/https)
        VSS_TIMEOUT             (float seconds, per request)
        VSS_MAX_RESPONSE_SIZE   (int bytes)
        VSS_CLIENT_CAPACITY     (int, max pooled connections)
        VSS_RETRY_BASE_DELAY    (float seconds)
        VSS_MAX_ATTEMPTS        (int)
        VSS_MAX_TOTAL_DELAY     (float seconds)
        VSS_MAX_JITTER          (float seconds)
        VSS_USER_AGENT          (str)
        """
        return cls(
            base_url=_env(f"{prefix}BASE_URL", _DEFAULT_BASE_URL) or _DEFAULT_BASE_URL,
            timeout=float(_env(f"{prefix}TIMEOUT", str(DEFAULT_TIMEOUT_SECS))),
            max_response_size=int(_env(f"{prefix}MAX_RESPONSE_SIZE", str(MAX_RESPONSE_BODY_SIZE))),
            client_capacity=int(_env(f"{prefix}CLIENT_CAPACITY", str(DEFAULT_CLIENT_CAPACITY))),
            retry_base_delay=float(_env(f"{prefix}RETRY_BASE_DELAY", "0.01")),
            max_attempts=int(_env(f"{prefix}MAX_ATTEMPTS", "10")),
            max_total_delay=float(_env(f"{prefix}MAX_TOTAL_DELAY", "15.0")),
            max_jitter=float(_env(f"{prefix}MAX_JITTER", "0.01")),
            user_agent=_env(f"{prefix}USER_AGENT", None) or user_agent(),
        )

    @classmethod
    def with_overrides(
        cls, base: Optional["ClientConfig"] = None, **overrides: Any
    ) -> "ClientConfig":
        """
        Build from an existing config plus keyword overrides.
        Unknown keys are ignored.
        """
        base = base or cls.from_env()
        data = base.to_dict()
        data.update({k: v for k, v in overrides.items() if k in data})
        return cls(**data)

    def endpoint(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "base_url": self.base_url,
            "timeout": float(self.timeout),
            "max_response_size": int(self.max_response_size),
            "client_capacity": int(self.client_capacity),
            "retry_base_delay": float(self.retry_base_delay),
            "max_attempts": int(self.max_attempts),
            "max_total_delay": float(self.max_total_delay),
            "max_jitter": float(self.max_jitter),
            "user_agent": self.user_agent,
        }


__all__ = [
    "ClientConfig",
    "DEFAULT_TIMEOUT_SECS",
    "MAX_RESPONSE_BODY_SIZE",
    "DEFAULT_CLIENT_CAPACITY",
]
