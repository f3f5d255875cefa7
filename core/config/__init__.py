#!/usr/bin/env python3
"""Modular configuration system for the group gift service

Configuration hierarchy:
- infra_config: Backing services (PostgreSQL, NATS)
- service_config: Group gift service settings
- logging_config: Logging configuration
- app_config: Aggregate of the above
"""
import os
from dotenv import load_dotenv
from .app_config import AppConfig
from .infra_config import InfraConfig
from .logging_config import LoggingConfig
from .service_config import ServiceConfig

# Load environment file based on ENV
env = os.getenv("ENV") or os.getenv("ENVIRONMENT", "development")
env_files = {
    "development": "deployment/environments/dev.env",
    "dev": "deployment/environments/dev.env",
    "testing": "deployment/environments/test.env",
    "test": "deployment/environments/test.env",
    "staging": "deployment/environments/staging.env",
    "production": "deployment/environments/production.env",
}
env_file = env_files.get(env, "deployment/environments/dev.env")
load_dotenv(env_file, override=False)

# Create global settings instance
settings = AppConfig.from_env()

def get_settings() -> AppConfig:
    """Get global settings instance"""
    return settings

__all__ = [
    'AppConfig',
    'get_settings',
    'settings',
    'LoggingConfig',
    'InfraConfig',
    'ServiceConfig',
]
