#!/usr/bin/env python3
"""Gateway main configuration

Combines all sub-configs for the homestay BFF gateway.
"""
import os
from dataclasses import dataclass, field

from .backend_config import BackendConfig
from .logging_config import LoggingConfig
from .payment_config import PaymentConfig
from .session_config import SessionConfig


def _bool(val: str) -> bool:
    return val.lower() == "true"

def _int(val: str, default: int) -> int:
    try:
        return int(val) if val else default
    except ValueError:
        return default


@dataclass
class GatewayConfig:
    """Main gateway configuration with all sub-configs"""

    # Environment
    environment: str = "development"
    debug: bool = False

    host: str = "0.0.0.0"
    port: int = 8000

    # File-backed sitemap cache
    sitemap_cache_path: str = "data/sitemap-cache.json"

    # Sub-configurations
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    backend: BackendConfig = field(default_factory=BackendConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    payments: PaymentConfig = field(default_factory=PaymentConfig)

    @classmethod
    def from_env(cls) -> 'GatewayConfig':
        """Load complete configuration from environment"""
        env = os.getenv("ENV") or os.getenv("ENVIRONMENT", "development")
        return cls(
            environment=env,
            debug=_bool(os.getenv("DEBUG", "true" if env == "development" else "false")),
            host=os.getenv("HOST", "0.0.0.0"),
            port=_int(os.getenv("SERVICE_PORT") or os.getenv("PORT", "8000"), 8000),
            sitemap_cache_path=os.getenv("SITEMAP_CACHE_PATH", "data/sitemap-cache.json"),
            logging=LoggingConfig.from_env(),
            backend=BackendConfig.from_env(),
            session=SessionConfig.from_env(),
            payments=PaymentConfig.from_env(),
        )
