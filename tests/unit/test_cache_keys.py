"""Cache key builders and glob patterns."""

import fnmatch

import pytest

from lms.application.services import cache_keys as keys


def test_key_formats() -> None:
    assert keys.user_key("u1") == "user:u1"
    assert keys.admin_users_key("a1") == "user:admin-a1"
    assert keys.course_key("c1") == "course:c1"
    assert keys.all_courses_key() == "course:all"
    assert keys.course_content_key("c1", "u1") == "course:c1-u1:content"
    assert keys.admin_courses_key("a1") == "course:admin-a1"
    assert keys.admin_orders_key("a1") == "order:admin-a1"
    assert keys.all_notifications_key() == "notification:all"
    assert keys.analytics_key("order", "a1") == "analytics:order-a1"


def test_namespace_pattern() -> None:
    assert keys.namespace_pattern("course") == "course:*"
    assert keys.namespace_pattern("user", "admin-") == "user:admin-*"


def test_admin_pattern_does_not_match_profile_keys() -> None:
    pattern = keys.namespace_pattern("user", "admin-")
    assert fnmatch.fnmatchcase(keys.admin_users_key("a1"), pattern)
    assert not fnmatch.fnmatchcase(keys.user_key("u1"), pattern)


def test_course_pattern_covers_content_keys() -> None:
    assert fnmatch.fnmatchcase(keys.course_content_key("c1", "u1"), "course:*")


@pytest.mark.parametrize("bad", ["", "a:b"])
def test_invalid_components_rejected(bad: str) -> None:
    with pytest.raises(ValueError):
        keys.user_key(bad)
    with pytest.raises(ValueError):
        keys.course_content_key("c1", bad)
