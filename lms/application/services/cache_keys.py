"""Cache key builders. Single place for key format.

Keys follow ``<namespace>:<discriminator>``. Key components (user_id,
course_id, admin_id, etc.) must not contain CACHE_KEY_SEP to avoid
ambiguous or colliding keys. The invalidation table in cache_policy
matches these keys by glob pattern.
"""

from lms.core.constants import (
    CACHE_ADMIN_PREFIX,
    CACHE_ALL,
    CACHE_CONTENT_SUFFIX,
    CACHE_KEY_SEP,
    CACHE_PREFIX_ANALYTICS,
    CACHE_PREFIX_COURSE,
    CACHE_PREFIX_NOTIFICATION,
    CACHE_PREFIX_ORDER,
    CACHE_PREFIX_USER,
)


def _validate_key_component(value: str, name: str) -> None:
    """Raise ValueError if value is empty or contains the cache key separator.

    Args:
        value: String component used in a cache key.
        name: Name of the component (for error message).

    Raises:
        ValueError: If value is empty or contains CACHE_KEY_SEP.
    """
    if not value:
        raise ValueError(f"Cache key component {name!r} must not be empty")
    if CACHE_KEY_SEP in value:
        raise ValueError(
            f"Cache key component {name!r} must not contain separator {CACHE_KEY_SEP!r}"
        )


def _validate_key_components(components: list[tuple[str, str]]) -> None:
    """Validate multiple key components; raise on first invalid one."""
    for value, name in components:
        _validate_key_component(value, name)


def namespace_pattern(namespace: str, prefix: str = "") -> str:
    """Glob matching every key of a namespace (optionally narrowed by discriminator prefix)."""
    return f"{namespace}{CACHE_KEY_SEP}{prefix}*"


def user_key(user_id: str) -> str:
    """Cache key for a user's own profile (write-through, 7-day TTL)."""
    _validate_key_component(user_id, "user_id")
    return f"{CACHE_PREFIX_USER}{CACHE_KEY_SEP}{user_id}"


def admin_users_key(admin_id: str) -> str:
    """Cache key for the admin user list as seen by one admin."""
    _validate_key_component(admin_id, "admin_id")
    return f"{CACHE_PREFIX_USER}{CACHE_KEY_SEP}{CACHE_ADMIN_PREFIX}{admin_id}"


def course_key(course_id: str) -> str:
    """Cache key for the public view of one course."""
    _validate_key_component(course_id, "course_id")
    return f"{CACHE_PREFIX_COURSE}{CACHE_KEY_SEP}{course_id}"


def all_courses_key() -> str:
    """Cache key for the public course list."""
    return f"{CACHE_PREFIX_COURSE}{CACHE_KEY_SEP}{CACHE_ALL}"


def course_content_key(course_id: str, user_id: str) -> str:
    """Cache key for purchased course content as served to one user."""
    _validate_key_components([(course_id, "course_id"), (user_id, "user_id")])
    return (
        f"{CACHE_PREFIX_COURSE}{CACHE_KEY_SEP}{course_id}-{user_id}"
        f"{CACHE_KEY_SEP}{CACHE_CONTENT_SUFFIX}"
    )


def admin_courses_key(admin_id: str) -> str:
    """Cache key for the full course list as seen by one admin."""
    _validate_key_component(admin_id, "admin_id")
    return f"{CACHE_PREFIX_COURSE}{CACHE_KEY_SEP}{CACHE_ADMIN_PREFIX}{admin_id}"


def admin_orders_key(admin_id: str) -> str:
    """Cache key for the order list as seen by one admin."""
    _validate_key_component(admin_id, "admin_id")
    return f"{CACHE_PREFIX_ORDER}{CACHE_KEY_SEP}{CACHE_ADMIN_PREFIX}{admin_id}"


def all_notifications_key() -> str:
    """Cache key for the admin notification list."""
    return f"{CACHE_PREFIX_NOTIFICATION}{CACHE_KEY_SEP}{CACHE_ALL}"


def analytics_key(kind: str, admin_id: str) -> str:
    """Cache key for a 12-month analytics series (kind: user, course, order)."""
    _validate_key_components([(kind, "kind"), (admin_id, "admin_id")])
    return f"{CACHE_PREFIX_ANALYTICS}{CACHE_KEY_SEP}{kind}-{admin_id}"
