#!/usr/bin/env python3
"""Group gift service configuration

Runtime knobs for the group gift microservice: HTTP port, which repository
backend to wire, stats memoization and the campaign summary presentation hints.
"""
import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import List

def _bool(val: str) -> bool:
    return val.lower() == "true"

def _int(val: str, default: int) -> int:
    try:
        return int(val) if val else default
    except ValueError:
        return default

def _amounts(val: str, default: List[Decimal]) -> List[Decimal]:
    try:
        amounts = [Decimal(part.strip()) for part in val.split(",") if part.strip()]
    except InvalidOperation:
        return list(default)
    return amounts or list(default)


DEFAULT_SUGGESTED_AMOUNTS = [Decimal("25"), Decimal("50"), Decimal("100")]


@dataclass
class ServiceConfig:
    """Group gift service settings"""

    service_name: str = "group_gift_service"
    service_host: str = "0.0.0.0"
    service_port: int = 8240

    # "memory" for tests and local runs, "postgres" for deployments
    repository_backend: str = "memory"

    # Memoize contribution stats on the repository version counter
    stats_cache_enabled: bool = True

    # Campaign summary hints
    suggested_amounts: List[Decimal] = field(
        default_factory=lambda: list(DEFAULT_SUGGESTED_AMOUNTS)
    )
    urgent_days: int = 7

    @classmethod
    def from_env(cls) -> 'ServiceConfig':
        """Load service configuration from environment variables"""
        return cls(
            service_name=os.getenv("SERVICE_NAME", "group_gift_service"),
            service_host=os.getenv("HOST", "0.0.0.0"),
            service_port=_int(os.getenv("GROUP_GIFT_SERVICE_PORT", "8240"), 8240),
            repository_backend=os.getenv("GROUP_GIFT_REPOSITORY", "memory").lower(),
            stats_cache_enabled=_bool(os.getenv("GROUP_GIFT_STATS_CACHE", "true")),
            suggested_amounts=_amounts(
                os.getenv("GROUP_GIFT_SUGGESTED_AMOUNTS", ""), DEFAULT_SUGGESTED_AMOUNTS
            ),
            urgent_days=_int(os.getenv("GROUP_GIFT_URGENT_DAYS", "7"), 7),
        )
