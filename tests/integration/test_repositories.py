"""Repository integration tests. Require Postgres; session is rolled back after each test."""

from datetime import timedelta

import pytest

from lms.domain.enums import NotificationStatus, UserRole
from lms.domain.exceptions import DuplicateEmailException
from lms.infrastructure.persistence.repositories import (
    NotificationRepository,
    UserRepository,
)
from lms.infrastructure.security.password import hash_password
from lms.shared.utils.datetime import utc_now


@pytest.mark.requires_db
async def test_create_user_normalizes_email_and_authenticates(db_session) -> None:
    repo = UserRepository(db_session)
    created = await repo.create_user(
        "Repo Test", "Repo.Test@Example.com", hashed_password=hash_password("s3cret-pass")
    )
    assert created.email == "repo.test@example.com"
    assert created.role is UserRole.USER
    assert created.courses == ()

    assert (await repo.authenticate("repo.test@example.com", "s3cret-pass")).id == created.id
    assert await repo.authenticate("repo.test@example.com", "wrong") is None

    with pytest.raises(DuplicateEmailException):
        await repo.create_user("Again", "REPO.TEST@example.com")


@pytest.mark.requires_db
async def test_update_fields_and_add_course(db_session) -> None:
    repo = UserRepository(db_session)
    created = await repo.create_user("Repo Fields", "repo.fields@example.com")
    renamed = await repo.update_fields(created.id, {"name": "Renamed"})
    assert renamed.name == "Renamed"

    enrolled = await repo.add_course(created.id, "course-1")
    again = await repo.add_course(created.id, "course-1")
    assert enrolled.courses == ("course-1",)
    assert again.courses == ("course-1",)
    assert await repo.update_fields("missing-user", {"name": "x"}) is None


@pytest.mark.requires_db
async def test_notifications_marked_read_and_purged(db_session) -> None:
    owner = await UserRepository(db_session).create_user("Repo Notify", "repo.notify@example.com")
    repo = NotificationRepository(db_session)
    created = await repo.create(owner.id, "New Order", "You have a new order")
    assert created.status is NotificationStatus.UNREAD

    read = await repo.mark_read(created.id)
    assert read.status is NotificationStatus.READ
    await repo.delete_read_before(utc_now() - timedelta(days=1))
    assert created.id in {n.id for n in await repo.list_all()}
    assert await repo.delete_read_before(utc_now() + timedelta(minutes=1)) >= 1
    assert created.id not in {n.id for n in await repo.list_all()}
