"""Cache invalidation policy: which cached views go stale after each mutation.

The policy is a static table from mutation type to the key-glob patterns it
invalidates, plus whether the actor's own ``user:<id>`` entry is rewritten
(write-through) or deleted. Services call CacheInvalidator only after the
record-store transaction has committed; the cache is a derived view and
every cache call is best-effort.

The table is kept in lockstep with what each mutation changes in the record
store. User deletion, for example, removes the user's orders, reviews,
questions and notifications, so it reaches into four namespaces.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from lms.application.services.cache_keys import namespace_pattern, user_key
from lms.core.constants import (
    CACHE_ADMIN_PREFIX,
    CACHE_PREFIX_ANALYTICS,
    CACHE_PREFIX_COURSE,
    CACHE_PREFIX_NOTIFICATION,
    CACHE_PREFIX_ORDER,
    CACHE_PREFIX_USER,
    USER_CACHE_TTL_SECONDS,
)
from lms.shared.utils.serialization import jsonable

if TYPE_CHECKING:
    from lms.application.interfaces.services import ICacheService

logger = logging.getLogger(__name__)


class Mutation(str, Enum):
    """Record mutations that can make cached views stale."""

    USER_ACTIVATED = "user_activated"
    OAUTH_USER_CREATED = "oauth_user_created"
    USER_LOGGED_IN = "user_logged_in"
    USER_LOGGED_OUT = "user_logged_out"
    USER_PROFILE_UPDATED = "user_profile_updated"
    USER_PASSWORD_CHANGED = "user_password_changed"
    USER_AVATAR_UPDATED = "user_avatar_updated"
    USER_ROLE_CHANGED = "user_role_changed"
    USER_DELETED = "user_deleted"
    COURSE_CREATED = "course_created"
    COURSE_UPDATED = "course_updated"
    COURSE_DELETED = "course_deleted"
    QUESTION_ADDED = "question_added"
    ANSWER_ADDED = "answer_added"
    REVIEW_ADDED = "review_added"
    REVIEW_REPLIED = "review_replied"
    ORDER_CREATED = "order_created"
    NOTIFICATION_UPDATED = "notification_updated"
    NOTIFICATIONS_PURGED = "notifications_purged"


class OwnKey(str, Enum):
    """Treatment of the affected user's own ``user:<id>`` entry."""

    NONE = "none"
    WRITE_THROUGH = "write_through"
    DELETE = "delete"


@dataclass(frozen=True)
class InvalidationRule:
    """Patterns to purge for one mutation type and what happens to the user's own key."""

    patterns: tuple[str, ...] = ()
    own_key: OwnKey = OwnKey.NONE


@dataclass(frozen=True)
class InvalidationScope:
    """Concrete purge set for one committed mutation: glob patterns plus exact keys."""

    patterns: tuple[str, ...] = ()
    keys: tuple[str, ...] = ()
    write_through_key: str | None = None


_ALL_COURSES = namespace_pattern(CACHE_PREFIX_COURSE)
_ALL_NOTIFICATIONS = namespace_pattern(CACHE_PREFIX_NOTIFICATION)
_ALL_ORDERS = namespace_pattern(CACHE_PREFIX_ORDER)
_ALL_ANALYTICS = namespace_pattern(CACHE_PREFIX_ANALYTICS)
_ADMIN_USER_LISTS = namespace_pattern(CACHE_PREFIX_USER, CACHE_ADMIN_PREFIX)
_USER_ANALYTICS = namespace_pattern(CACHE_PREFIX_ANALYTICS, "user-")
_COURSE_ANALYTICS = namespace_pattern(CACHE_PREFIX_ANALYTICS, "course-")
_ORDER_ANALYTICS = namespace_pattern(CACHE_PREFIX_ANALYTICS, "order-")

_NEW_ACCOUNT = InvalidationRule((_USER_ANALYTICS, _ADMIN_USER_LISTS))
_PROFILE_CHANGE = InvalidationRule((_ADMIN_USER_LISTS,), OwnKey.WRITE_THROUGH)
_CATALOG_CHANGE = InvalidationRule((_ALL_COURSES, _COURSE_ANALYTICS))
_DISCUSSION_CHANGE = InvalidationRule((_ALL_COURSES, _ALL_NOTIFICATIONS))
_NOTIFICATION_CHANGE = InvalidationRule((_ALL_NOTIFICATIONS,))

INVALIDATION_TABLE: Mapping[Mutation, InvalidationRule] = MappingProxyType(
    {
        Mutation.USER_ACTIVATED: _NEW_ACCOUNT,
        Mutation.OAUTH_USER_CREATED: _NEW_ACCOUNT,
        Mutation.USER_LOGGED_IN: InvalidationRule((), OwnKey.WRITE_THROUGH),
        Mutation.USER_LOGGED_OUT: InvalidationRule((), OwnKey.DELETE),
        Mutation.USER_PROFILE_UPDATED: _PROFILE_CHANGE,
        Mutation.USER_PASSWORD_CHANGED: _PROFILE_CHANGE,
        Mutation.USER_AVATAR_UPDATED: _PROFILE_CHANGE,
        Mutation.USER_ROLE_CHANGED: _PROFILE_CHANGE,
        Mutation.USER_DELETED: InvalidationRule(
            (
                _ALL_NOTIFICATIONS,
                _ALL_ORDERS,
                _ALL_COURSES,
                _ADMIN_USER_LISTS,
                _ALL_ANALYTICS,
            ),
            OwnKey.DELETE,
        ),
        Mutation.COURSE_CREATED: _CATALOG_CHANGE,
        Mutation.COURSE_UPDATED: _CATALOG_CHANGE,
        Mutation.COURSE_DELETED: _CATALOG_CHANGE,
        Mutation.QUESTION_ADDED: _DISCUSSION_CHANGE,
        Mutation.ANSWER_ADDED: _DISCUSSION_CHANGE,
        Mutation.REVIEW_ADDED: _DISCUSSION_CHANGE,
        Mutation.REVIEW_REPLIED: InvalidationRule((_ALL_COURSES,)),
        # Purchase counts live in cached courses; the buyer's course list in admin user lists.
        Mutation.ORDER_CREATED: InvalidationRule(
            (
                _ALL_COURSES,
                _ALL_ORDERS,
                _ALL_NOTIFICATIONS,
                _ADMIN_USER_LISTS,
                _ORDER_ANALYTICS,
            ),
            OwnKey.DELETE,
        ),
        Mutation.NOTIFICATION_UPDATED: _NOTIFICATION_CHANGE,
        Mutation.NOTIFICATIONS_PURGED: _NOTIFICATION_CHANGE,
    }
)


def invalidation_scope(mutation: Mutation, user_id: str | None = None) -> InvalidationScope:
    """Return the deterministic purge set for a committed mutation.

    Args:
        mutation: Mutation type.
        user_id: Affected user (actor or target); required when the rule
            touches the user's own key.

    Returns:
        InvalidationScope (same input always yields the same scope).

    Raises:
        ValueError: If the rule needs user_id and none was given.
    """
    rule = INVALIDATION_TABLE[mutation]
    if rule.own_key is OwnKey.NONE:
        return InvalidationScope(patterns=rule.patterns)
    if not user_id:
        raise ValueError(f"{mutation.value} invalidation requires user_id")
    own = user_key(user_id)
    if rule.own_key is OwnKey.DELETE:
        return InvalidationScope(patterns=rule.patterns, keys=(own,))
    return InvalidationScope(patterns=rule.patterns, write_through_key=own)


class CacheInvalidator:
    """Applies INVALIDATION_TABLE against a cache port after a mutation commits.

    With cache=None (Redis disabled or unreachable at startup) every call is
    a no-op. Errors from the cache are logged and swallowed: a failed purge
    only risks stale reads until TTL expiry or the next invalidation.
    """

    def __init__(
        self,
        cache: ICacheService | None,
        user_ttl: int = USER_CACHE_TTL_SECONDS,
    ) -> None:
        self.cache = cache
        self.user_ttl = user_ttl

    async def invalidate(self, mutation: Mutation, user_id: str | None = None) -> int:
        """Purge every key the mutation may have made stale. Returns keys deleted.

        For write-through mutations the own key is deleted instead of rewritten.
        """
        scope = invalidation_scope(mutation, user_id)
        if scope.write_through_key is not None:
            scope = InvalidationScope(
                patterns=scope.patterns, keys=(scope.write_through_key,)
            )
        return await self._purge(mutation, scope)

    async def write_through(
        self, mutation: Mutation, user_id: str, value: Any
    ) -> int:
        """Store the fresh profile under ``user:<id>`` (7-day TTL), then purge the rule's patterns.

        Raises:
            ValueError: If the mutation is not a write-through mutation.
        """
        scope = invalidation_scope(mutation, user_id)
        if scope.write_through_key is None:
            raise ValueError(f"{mutation.value} is not a write-through mutation")
        if self.cache is not None:
            try:
                await self.cache.set(
                    scope.write_through_key, jsonable(value), ttl=self.user_ttl
                )
            except Exception:
                logger.exception(
                    "Cache write-through failed for %s (%s)",
                    scope.write_through_key,
                    mutation.value,
                )
        return await self._purge(mutation, scope)

    async def _purge(self, mutation: Mutation, scope: InvalidationScope) -> int:
        if self.cache is None:
            return 0
        deleted = 0
        try:
            for pattern in scope.patterns:
                deleted += await self.cache.delete_pattern(pattern)
            if scope.keys:
                deleted += await self.cache.delete(*scope.keys)
        except Exception:
            logger.exception("Cache invalidation failed for %s", mutation.value)
            return deleted
        logger.info(
            "Invalidated cache for %s: patterns=%s keys=%s (%s deleted)",
            mutation.value,
            list(scope.patterns),
            list(scope.keys),
            deleted,
        )
        return deleted


async def read_through(
    cache: ICacheService | None,
    key: str,
    loader: Callable[[], Awaitable[Any]],
    ttl: int | None = None,
) -> Any:
    """Return the cached JSON value for key, or load, store and return it.

    The loaded value is converted with jsonable() before storing so a hit and
    a miss return the same JSON-compatible shape. Loader exceptions (e.g.
    ResourceNotFoundException) propagate and nothing is cached.
    """
    if cache is not None:
        hit = await cache.get(key)
        if hit is not None:
            logger.debug("Cache hit: %s", key)
            return hit
        logger.debug("Cache miss: %s", key)
    value = jsonable(await loader())
    if cache is not None:
        await cache.set(key, value, ttl=ttl)
    return value
