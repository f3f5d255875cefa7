#!/usr/bin/env python3
"""Top-level application configuration

Aggregates the logging, infrastructure and service sub-configs.
"""
import os
from dataclasses import dataclass, field

from .infra_config import InfraConfig
from .logging_config import LoggingConfig
from .service_config import ServiceConfig

def _bool(val: str) -> bool:
    return val.lower() == "true"


@dataclass
class AppConfig:
    """Main configuration with all sub-configs"""

    # Environment
    environment: str = "development"
    debug: bool = False

    # Sub-configurations
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    infrastructure: InfraConfig = field(default_factory=InfraConfig)
    service: ServiceConfig = field(default_factory=ServiceConfig)

    @classmethod
    def from_env(cls) -> 'AppConfig':
        """Load complete configuration from environment"""
        env = os.getenv("ENV") or os.getenv("ENVIRONMENT", "development")
        return cls(
            environment=env,
            debug=_bool(os.getenv("DEBUG", "true" if env == "development" else "false")),
            logging=LoggingConfig.from_env(),
            infrastructure=InfraConfig.from_env(),
            service=ServiceConfig.from_env(),
        )
