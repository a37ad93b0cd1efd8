"""Tests for staff action log routes."""

import pytest
from fastapi import status
from httpx import ASGITransport, AsyncClient

from staff_audit.database import AsyncSessionLocal, Base, engine
from staff_audit.main import app
from staff_audit.models import User, UserHistory, UserHistoryAction
from staff_audit.utils.security import create_access_token, hash_password


@pytest.fixture
async def test_db():
    """Reset DB and seed admin, moderator and member plus history entries."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as session:
        password = hash_password("changeme")
        session.add_all(
            [
                User(id=1, username="admin", hashed_password=password, is_admin=True),
                User(id=2, username="mod", hashed_password=password, is_moderator=True),
                User(id=3, username="Member", hashed_password=password),
            ]
        )
        await session.flush()
        for record in [
            UserHistory(action=UserHistoryAction.SUSPEND_USER, acting_user_id=2, target_user_id=3, details="spam"),
            UserHistory(action=UserHistoryAction.CHANGE_SITE_SETTING, acting_user_id=1, subject="title"),
            UserHistory(action=UserHistoryAction.NOTIFIED_ABOUT_AVATAR, target_user_id=3),
            UserHistory(action=UserHistoryAction.UNSUSPEND_USER, acting_user_id=1, target_user_id=3),
        ]:
            session.add(record)
            await session.flush()
        await session.commit()

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


def _auth_headers(user_id: int, username: str) -> dict[str, str]:
    token = create_access_token({"sub": username, "user_id": user_id})
    return {"Authorization": f"Bearer {token}"}


@pytest.mark.asyncio
async def test_staff_action_logs_require_staff(test_db):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        resp = await client.get("/admin/logs/staff-action-logs", headers=_auth_headers(3, "Member"))
        assert resp.status_code == status.HTTP_403_FORBIDDEN

        resp = await client.get("/admin/logs/staff-action-logs/actions", headers=_auth_headers(3, "Member"))
        assert resp.status_code == status.HTTP_403_FORBIDDEN

        resp = await client.get("/admin/logs/staff-action-logs")
        assert resp.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.asyncio
async def test_admin_sees_admin_only_entries(test_db):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        resp = await client.get("/admin/logs/staff-action-logs", headers=_auth_headers(1, "admin"))

    assert resp.status_code == status.HTTP_200_OK
    items = resp.json()["staff_action_logs"]
    assert [item["id"] for item in items] == [4, 2, 1]
    assert items[1]["action_name"] == "change_site_setting"
    assert items[1]["admin_only"] is True
    assert items[2]["acting_username"] == "mod"
    assert items[2]["target_username"] == "Member"


@pytest.mark.asyncio
async def test_moderator_does_not_see_admin_only_entries(test_db):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        resp = await client.get("/admin/logs/staff-action-logs", headers=_auth_headers(2, "mod"))

    assert resp.status_code == status.HTTP_200_OK
    items = resp.json()["staff_action_logs"]
    assert [item["id"] for item in items] == [4, 1]
    assert all(item["admin_only"] is False for item in items)


@pytest.mark.asyncio
async def test_filters_and_ignored_params(test_db):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        resp = await client.get(
            "/admin/logs/staff-action-logs",
            headers=_auth_headers(1, "admin"),
            params={"target_user": "MEMBER", "action_id": "10", "page": "7"},
        )
        assert resp.status_code == status.HTTP_200_OK
        assert [item["id"] for item in resp.json()["staff_action_logs"]] == [1]

        resp = await client.get(
            "/admin/logs/staff-action-logs",
            headers=_auth_headers(1, "admin"),
            params={"acting_user": "ghost"},
        )
        assert resp.status_code == status.HTTP_200_OK
        assert resp.json()["staff_action_logs"] == []


@pytest.mark.asyncio
async def test_unknown_action_id_is_rejected(test_db):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        resp = await client.get(
            "/admin/logs/staff-action-logs",
            headers=_auth_headers(1, "admin"),
            params={"action_id": "999"},
        )

    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_list_staff_action_kinds(test_db):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        resp = await client.get("/admin/logs/staff-action-logs/actions", headers=_auth_headers(2, "mod"))

    assert resp.status_code == status.HTTP_200_OK
    actions = resp.json()["actions"]
    assert {"id": 1, "name": "delete_user"} in actions
    assert {"id": 3, "name": "change_site_setting"} in actions
    assert all(action["name"] != "notified_about_avatar" for action in actions)
    assert len(actions) == 17
