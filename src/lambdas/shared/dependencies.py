"""Lazy-init singleton dependency getters.

Each getter initializes its resource on first call and caches it for the
Lambda container lifetime. The role access service itself takes its table
and cache as constructor arguments; only the handler wiring lives here.

Usage:
    from src.lambdas.shared.dependencies import get_role_access_service

    service = get_role_access_service()

Configuration (environment):
    ROLES_TABLE: DynamoDB table holding role items (required)
    ROLE_CACHE_TTL_SECONDS: Role cache entry lifetime (unset: no expiry)
    ROLE_CACHE_MAX_ENTRIES: Role cache size bound (default 256)
"""

import logging
import os
import threading

logger = logging.getLogger(__name__)

DEFAULT_ROLE_CACHE_MAX_ENTRIES = 256

# Thread lock for concurrent initialization
_init_lock = threading.Lock()

# Singleton instances
_roles_table = None
_role_cache = None
_role_access_service = None


def get_roles_table():
    """Get DynamoDB roles table resource (lazy singleton).

    Returns:
        boto3 DynamoDB Table resource for ROLES_TABLE.

    Raises:
        KeyError: If ROLES_TABLE environment variable is not set.
    """
    global _roles_table
    with _init_lock:
        if _roles_table is None:
            from src.lambdas.shared.dynamodb import get_table

            _roles_table = get_table(os.environ["ROLES_TABLE"])
    return _roles_table


def get_role_cache():
    """Get the container-wide role cache (lazy singleton).

    Raises:
        ValueError: If a cache setting is not a number.
    """
    global _role_cache
    with _init_lock:
        if _role_cache is None:
            from src.lambdas.shared.cache.role_cache import RoleCache

            ttl = os.environ.get("ROLE_CACHE_TTL_SECONDS")
            max_entries = int(
                os.environ.get(
                    "ROLE_CACHE_MAX_ENTRIES", str(DEFAULT_ROLE_CACHE_MAX_ENTRIES)
                )
            )
            _role_cache = RoleCache(
                max_entries=max_entries,
                ttl_seconds=float(ttl) if ttl else None,
            )
            logger.debug(
                "Role cache initialized",
                extra={"max_entries": max_entries, "ttl_seconds": ttl},
            )
    return _role_cache


def get_role_access_service():
    """Get RoleAccessService wired to the roles table and role cache."""
    global _role_access_service
    if _role_access_service is None:
        from src.lambdas.role_access.service import RoleAccessService

        table = get_roles_table()
        cache = get_role_cache()
        with _init_lock:
            if _role_access_service is None:
                _role_access_service = RoleAccessService(table, cache)
    return _role_access_service


def reset_singletons():
    """Reset all singleton instances (for testing only).

    Allows tests to reinitialize dependencies between test runs
    without reloading modules.
    """
    global _roles_table, _role_cache, _role_access_service
    with _init_lock:
        _roles_table = None
        _role_cache = None
        _role_access_service = None
