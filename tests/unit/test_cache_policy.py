"""Cache invalidation table, scopes, CacheInvalidator and read_through."""

import logging
from unittest.mock import AsyncMock

import pytest

from lms.application.services import cache_keys as keys
from lms.application.services.cache_policy import (
    INVALIDATION_TABLE,
    CacheInvalidator,
    Mutation,
    OwnKey,
    invalidation_scope,
    read_through,
)
from lms.core.constants import USER_CACHE_TTL_SECONDS
from lms.domain.exceptions import ResourceNotFoundException
from tests.fakes import InMemoryCache, make_user


async def _seed(cache: InMemoryCache) -> None:
    for key in (
        keys.user_key("u1"),
        keys.user_key("u2"),
        keys.admin_users_key("a1"),
        keys.course_key("c1"),
        keys.all_courses_key(),
        keys.course_content_key("c1", "u2"),
        keys.admin_courses_key("a1"),
        keys.admin_orders_key("a1"),
        keys.all_notifications_key(),
        keys.analytics_key("user", "a1"),
        keys.analytics_key("course", "a1"),
        keys.analytics_key("order", "a1"),
    ):
        await cache.set(key, {"cached": key})


class TestInvalidationTable:
    def test_every_mutation_has_a_rule(self) -> None:
        assert set(INVALIDATION_TABLE) == set(Mutation)

    def test_user_deletion_reaches_four_namespaces_and_own_key(self) -> None:
        scope = invalidation_scope(Mutation.USER_DELETED, "u1")
        assert {"notification:*", "order:*", "course:*", "user:admin-*"} <= set(scope.patterns)
        assert scope.keys == ("user:u1",)
        assert scope.write_through_key is None

    @pytest.mark.parametrize(
        "mutation",
        [
            Mutation.COURSE_CREATED,
            Mutation.COURSE_UPDATED,
            Mutation.COURSE_DELETED,
            Mutation.QUESTION_ADDED,
            Mutation.ANSWER_ADDED,
            Mutation.REVIEW_ADDED,
            Mutation.REVIEW_REPLIED,
        ],
    )
    def test_course_mutations_invalidate_course_namespace(self, mutation: Mutation) -> None:
        assert "course:*" in invalidation_scope(mutation).patterns

    def test_order_creation_invalidates_courses_and_the_buyer(self) -> None:
        scope = invalidation_scope(Mutation.ORDER_CREATED, "u1")
        assert "course:*" in scope.patterns
        assert "order:*" in scope.patterns
        assert "notification:*" in scope.patterns
        assert "user:admin-*" in scope.patterns
        assert scope.keys == ("user:u1",)

    @pytest.mark.parametrize(
        "mutation",
        [
            Mutation.USER_LOGGED_IN,
            Mutation.USER_PROFILE_UPDATED,
            Mutation.USER_PASSWORD_CHANGED,
            Mutation.USER_AVATAR_UPDATED,
            Mutation.USER_ROLE_CHANGED,
        ],
    )
    def test_profile_mutations_write_through(self, mutation: Mutation) -> None:
        assert INVALIDATION_TABLE[mutation].own_key is OwnKey.WRITE_THROUGH
        assert invalidation_scope(mutation, "u7").write_through_key == "user:u7"

    def test_scope_is_deterministic(self) -> None:
        for mutation in Mutation:
            assert invalidation_scope(mutation, "u1") == invalidation_scope(mutation, "u1")

    def test_own_key_rules_require_user_id(self) -> None:
        with pytest.raises(ValueError, match="requires user_id"):
            invalidation_scope(Mutation.USER_DELETED)

    def test_rules_without_own_key_ignore_user_id(self) -> None:
        scope = invalidation_scope(Mutation.COURSE_CREATED, "u1")
        assert scope.keys == ()
        assert scope.write_through_key is None


class TestCacheInvalidator:
    async def test_course_update_purges_every_course_view(self, cache: InMemoryCache) -> None:
        await _seed(cache)
        deleted = await CacheInvalidator(cache).invalidate(Mutation.COURSE_UPDATED)
        assert not await cache.keys("course:*")
        assert not await cache.exists(keys.analytics_key("course", "a1"))
        assert await cache.exists(keys.analytics_key("user", "a1"))
        assert await cache.exists(keys.user_key("u1"))
        assert deleted == 5

    async def test_user_deletion_purges_cascaded_namespaces(self, cache: InMemoryCache) -> None:
        await _seed(cache)
        await CacheInvalidator(cache).invalidate(Mutation.USER_DELETED, "u1")
        remaining = set(cache.store)
        assert remaining == {keys.user_key("u2")}

    async def test_invalidate_deletes_write_through_key(self, cache: InMemoryCache) -> None:
        await _seed(cache)
        await CacheInvalidator(cache).invalidate(Mutation.USER_PROFILE_UPDATED, "u1")
        assert not await cache.exists(keys.user_key("u1"))
        assert not await cache.exists(keys.admin_users_key("a1"))
        assert await cache.exists(keys.user_key("u2"))

    async def test_write_through_stores_fresh_profile_with_ttl(self, cache: InMemoryCache) -> None:
        await _seed(cache)
        user = make_user("u1", name="Fresh")
        await CacheInvalidator(cache).write_through(Mutation.USER_ROLE_CHANGED, "u1", user)
        stored = await cache.get(keys.user_key("u1"))
        assert stored["name"] == "Fresh"
        assert stored["role"] == "user"
        assert cache.ttls[keys.user_key("u1")] == USER_CACHE_TTL_SECONDS
        assert not await cache.exists(keys.admin_users_key("a1"))

    async def test_write_through_rejects_non_write_through_mutation(
        self, cache: InMemoryCache
    ) -> None:
        with pytest.raises(ValueError, match="not a write-through"):
            await CacheInvalidator(cache).write_through(Mutation.USER_DELETED, "u1", {})

    async def test_no_cache_is_a_no_op(self) -> None:
        invalidator = CacheInvalidator(None)
        assert await invalidator.invalidate(Mutation.USER_DELETED, "u1") == 0
        assert await invalidator.write_through(Mutation.USER_LOGGED_IN, "u1", {}) == 0

    async def test_cache_errors_are_logged_not_raised(self, caplog) -> None:
        broken = AsyncMock()
        broken.delete_pattern.side_effect = ConnectionError("down")
        broken.set.side_effect = ConnectionError("down")
        invalidator = CacheInvalidator(broken)
        with caplog.at_level(logging.ERROR):
            assert await invalidator.invalidate(Mutation.COURSE_CREATED) == 0
            await invalidator.write_through(Mutation.USER_LOGGED_IN, "u1", {"id": "u1"})
        assert "Cache invalidation failed" in caplog.text
        assert "write-through failed" in caplog.text

    async def test_invalidation_is_idempotent(self, cache: InMemoryCache) -> None:
        await _seed(cache)
        invalidator = CacheInvalidator(cache)
        await invalidator.invalidate(Mutation.ORDER_CREATED, "u2")
        after_first = dict(cache.store)
        assert await invalidator.invalidate(Mutation.ORDER_CREATED, "u2") == 0
        assert cache.store == after_first


class TestReadThrough:
    async def test_miss_loads_and_stores_json(self, cache: InMemoryCache) -> None:
        loader = AsyncMock(return_value=make_user("u1"))
        value = await read_through(cache, "user:u1", loader, ttl=60)
        assert value["id"] == "u1"
        assert value["role"] == "user"
        assert cache.ttls["user:u1"] == 60
        loader.assert_awaited_once()

    async def test_hit_skips_loader(self, cache: InMemoryCache) -> None:
        await cache.set("course:all", [{"id": "c1"}])
        loader = AsyncMock()
        assert await read_through(cache, "course:all", loader) == [{"id": "c1"}]
        loader.assert_not_awaited()

    async def test_hit_and_miss_return_same_shape(self, cache: InMemoryCache) -> None:
        loader = AsyncMock(return_value=[make_user("u1")])
        miss = await read_through(cache, "user:admin-a1", loader)
        hit = await read_through(cache, "user:admin-a1", loader)
        assert miss == hit

    async def test_loader_error_propagates_and_caches_nothing(self, cache: InMemoryCache) -> None:
        loader = AsyncMock(side_effect=ResourceNotFoundException("course", "c9"))
        with pytest.raises(ResourceNotFoundException):
            await read_through(cache, "course:c9", loader)
        assert not await cache.exists("course:c9")

    async def test_without_cache_always_loads(self) -> None:
        loader = AsyncMock(return_value={"a": 1})
        assert await read_through(None, "k", loader) == {"a": 1}
        assert await read_through(None, "k", loader) == {"a": 1}
        assert loader.await_count == 2
