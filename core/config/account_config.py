#!/usr/bin/env python3
"""Account service main configuration

Combines the logging and infrastructure sub-configs with the settings the
account property reconciler reads at runtime.
"""
import os
from dataclasses import dataclass, field

from .infra_config import InfraConfig
from .logging_config import LoggingConfig


def _bool(val: str) -> bool:
    return val.lower() == "true"

def _int(val: str, default: int) -> int:
    try:
        return int(val) if val else default
    except ValueError:
        return default


@dataclass
class AccountConfig:
    """Account service configuration with all sub-configs"""

    # Environment
    environment: str = "development"
    debug: bool = False

    # Service settings
    service_name: str = "account_service"
    host: str = "0.0.0.0"
    port: int = 8202

    # Property handling
    default_phone_region: str = ""
    max_value_length: int = 2048
    verification_token_bytes: int = 32
    nats_enabled: bool = True

    # Sub-configurations
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    infrastructure: InfraConfig = field(default_factory=InfraConfig)

    def get_system_value_string(self, key: str, default: str = "") -> str:
        """Look up a system setting by key, falling back to the environment"""
        value = getattr(self, key, None)
        if value is None or isinstance(value, (LoggingConfig, InfraConfig)):
            return os.getenv(key.upper(), default)
        return str(value)

    @classmethod
    def from_env(cls) -> 'AccountConfig':
        """Load complete configuration from environment"""
        env = os.getenv("ENV") or os.getenv("ENVIRONMENT", "development")
        return cls(
            # Environment
            environment=env,
            debug=_bool(os.getenv("DEBUG", "true" if env == "development" else "false")),

            # Service settings
            service_name=os.getenv("SERVICE_NAME", "account_service"),
            host=os.getenv("HOST", "0.0.0.0"),
            port=_int(os.getenv("PORT", "8202"), 8202),

            # Property handling
            default_phone_region=os.getenv("ACCOUNT_DEFAULT_PHONE_REGION", "").upper(),
            max_value_length=_int(os.getenv("ACCOUNT_MAX_VALUE_LENGTH", "2048"), 2048),
            verification_token_bytes=_int(os.getenv("ACCOUNT_VERIFICATION_TOKEN_BYTES", "32"), 32),
            nats_enabled=_bool(os.getenv("NATS_ENABLED", "true")),

            # Load sub-configs
            logging=LoggingConfig.from_env(),
            infrastructure=InfraConfig.from_env(),
        )
