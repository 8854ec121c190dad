"""Admin API: notifications, analytics and site layout."""

import json

import pytest
from httpx import AsyncClient

from lms.application.services import cache_keys as keys
from lms.domain.enums import NotificationStatus, UserRole
from tests.fakes import make_user


@pytest.fixture
def admin_headers(wired) -> dict[str, str]:
    admin = wired.user_repo.add(
        make_user("a1", name="Admin", email="admin@example.com", role=UserRole.ADMIN)
    )
    return wired.bearer(admin)


async def test_notifications_listed_and_marked_read(
    client: AsyncClient, wired, admin_headers
) -> None:
    created = await wired.notification_repo.create("u1", "New Order", "You have a new order")

    listed = await client.get("/api/v1/notification/get-notifications", headers=admin_headers)
    assert listed.status_code == 200
    assert [n["id"] for n in listed.json()["payload"]] == [created.id]

    updated = await client.put(
        f"/api/v1/notification/update-status/{created.id}", headers=admin_headers
    )
    assert updated.status_code == 200
    assert updated.json()["payload"][0]["status"] == NotificationStatus.READ.value


async def test_marking_unknown_notification_is_404(
    client: AsyncClient, wired, admin_headers
) -> None:
    response = await client.put(
        "/api/v1/notification/update-status/missing", headers=admin_headers
    )
    assert response.status_code == 404
    assert response.json()["details"]["resource_type"] == "notification"


async def test_notifications_are_admin_only(client: AsyncClient, wired) -> None:
    student = wired.user_repo.add(make_user("u1"))
    response = await client.get(
        "/api/v1/notification/get-notifications", headers=wired.bearer(student)
    )
    assert response.status_code == 403


@pytest.mark.parametrize("kind", ["user", "course", "order"])
async def test_analytics_series_has_twelve_months(
    client: AsyncClient, wired, admin_headers, kind
) -> None:
    response = await client.get(f"/api/v1/analytics/{kind}-analytics", headers=admin_headers)
    assert response.status_code == 200
    months = response.json()["payload"]["last_twelve_months"]
    assert len(months) == 12
    if kind == "user":
        assert months[-1]["count"] == 1
    assert await wired.cache.exists(keys.analytics_key(kind, "a1"))


async def test_faq_layout_created_and_read_publicly(
    client: AsyncClient, wired, admin_headers
) -> None:
    created = await client.post(
        "/api/v1/layout/create",
        data={"type": "faq", "faq": json.dumps([{"question": "Refunds?", "answer": "30 days"}])},
        headers=admin_headers,
    )
    assert created.status_code == 201

    again = await client.post(
        "/api/v1/layout/create", data={"type": "faq"}, headers=admin_headers
    )
    assert again.status_code == 409
    assert again.json()["error"] == "LAYOUT_ALREADY_EXISTS"

    public = await client.get("/api/v1/layout/get-layout/faq")
    assert public.status_code == 200
    assert public.json()["payload"]["faq"][0]["question"] == "Refunds?"


async def test_banner_layout_requires_title_and_subtitle(
    client: AsyncClient, wired, admin_headers
) -> None:
    response = await client.post(
        "/api/v1/layout/create", data={"type": "banner", "title": "Learn"}, headers=admin_headers
    )
    assert response.status_code == 400
    assert response.json()["details"] == {"field": "title"}
