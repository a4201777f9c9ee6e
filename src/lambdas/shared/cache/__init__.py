"""Cache utilities for role access."""

from src.lambdas.shared.cache.role_cache import (
    ROLES_CACHE_NAMESPACE,
    CacheStats,
    RoleCache,
)

__all__ = [
    "ROLES_CACHE_NAMESPACE",
    "CacheStats",
    "RoleCache",
]
