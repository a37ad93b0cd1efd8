"""Tests for the UserHistory model and its pre-insert rules."""

import json

import pytest
from sqlalchemy import func, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from staff_audit.database import AsyncSessionLocal, Base, engine
from staff_audit.errors import UnknownActionError, UserHistoryValidationError
from staff_audit.models import Topic, User, UserHistory, UserHistoryAction
from staff_audit.utils.security import hash_password


@pytest.fixture
async def db_session():
    """Fresh schema with one admin and one member."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as session:
        session.add_all(
            [
                User(id=1, username="Admin", hashed_password=hash_password("changeme"), is_admin=True),
                User(id=2, username="Member", hashed_password=hash_password("changeme")),
            ]
        )
        await session.commit()
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


async def _count(session) -> int:
    return (await session.execute(select(func.count(UserHistory.id)))).scalar_one()


@pytest.mark.asyncio
async def test_site_setting_change_is_admin_only(db_session):
    record = UserHistory(action=UserHistoryAction.CHANGE_SITE_SETTING, acting_user_id=1)
    db_session.add(record)
    await db_session.commit()

    assert record.admin_only is True


@pytest.mark.asyncio
@pytest.mark.parametrize("action", [a for a in UserHistoryAction if a != UserHistoryAction.CHANGE_SITE_SETTING])
async def test_other_actions_are_not_admin_only(db_session, action):
    record = UserHistory(action=action, admin_only=True)
    db_session.add(record)
    await db_session.commit()

    assert record.admin_only is False


@pytest.mark.asyncio
async def test_caller_cannot_clear_admin_only(db_session):
    record = UserHistory(action="change_site_setting", admin_only=False)
    db_session.add(record)
    await db_session.commit()

    stored = (
        await db_session.execute(select(UserHistory.admin_only).where(UserHistory.id == record.id))
    ).scalar_one()
    assert stored is True


@pytest.mark.asyncio
async def test_admin_only_recomputed_on_update(db_session):
    record = UserHistory(action=UserHistoryAction.SUSPEND_USER)
    db_session.add(record)
    await db_session.commit()

    record.admin_only = True
    record.details = "edited"
    await db_session.commit()

    assert record.admin_only is False


@pytest.mark.asyncio
async def test_missing_action_rejected(db_session):
    db_session.add(UserHistory(target_user_id=2, details="no action"))
    with pytest.raises(UserHistoryValidationError):
        await db_session.commit()
    await db_session.rollback()

    assert await _count(db_session) == 0


@pytest.mark.asyncio
async def test_bulk_and_core_inserts_derive_admin_only(db_session):
    await db_session.execute(
        insert(UserHistory),
        [
            {"action": int(UserHistoryAction.CHANGE_SITE_SETTING), "subject": "title"},
            {"action": int(UserHistoryAction.DELETE_POST), "subject": "title"},
        ],
    )
    await db_session.execute(insert(UserHistory).values(action=int(UserHistoryAction.CHANGE_SITE_SETTING)))
    await db_session.commit()

    rows = (await db_session.execute(select(UserHistory.action, UserHistory.admin_only).order_by(UserHistory.id))).all()
    assert [tuple(row) for row in rows] == [(3, True), (17, False), (3, True)]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "action, admin_only",
    [(UserHistoryAction.CHANGE_SITE_SETTING, False), (UserHistoryAction.DELETE_USER, True)],
)
async def test_bulk_insert_cannot_override_admin_only(db_session, action, admin_only):
    with pytest.raises(IntegrityError):
        await db_session.execute(insert(UserHistory), [{"action": int(action), "admin_only": admin_only}])
    await db_session.rollback()

    assert await _count(db_session) == 0


@pytest.mark.parametrize("blank", ["", "   "])
def test_blank_action_name_is_missing_action(blank):
    with pytest.raises(UserHistoryValidationError):
        UserHistory(action=blank)


def test_action_code_string_coerced():
    assert UserHistory(action="17").action == 17


def test_unknown_action_code_rejected_on_assignment():
    with pytest.raises(UnknownActionError):
        UserHistory(action=99)


def test_action_name_coerced_to_code():
    record = UserHistory(action="grant_badge")
    assert record.action == 13
    assert record.action_kind is UserHistoryAction.GRANT_BADGE


@pytest.mark.asyncio
async def test_json_values_round_trip_verbatim(db_session):
    raw = '{"name":"Dark",  "stylesheet":"body { color: #fff }", "enabled":true}'
    record = UserHistory(
        action=UserHistoryAction.CHANGE_SITE_CUSTOMIZATION,
        acting_user_id=1,
        new_value=raw,
        previous_value=json.dumps({"name": "Light"}),
    )
    db_session.add(record)
    await db_session.commit()

    async with AsyncSessionLocal() as other:
        stored = (
            await other.execute(select(UserHistory).where(UserHistory.id == record.id))
        ).scalar_one()
    assert stored.new_value == raw
    assert stored.new_value_is_json() is True
    assert stored.previous_value_is_json() is True
    assert json.loads(stored.previous_value) == {"name": "Light"}


def test_plain_actions_are_not_json():
    record = UserHistory(action=UserHistoryAction.CHANGE_SITE_SETTING, new_value="true")
    assert record.new_value_is_json() is False
    assert record.previous_value_is_json() is False


@pytest.mark.asyncio
async def test_relationships_resolve(db_session):
    topic = Topic(title="Welcome", user_id=2)
    db_session.add(topic)
    await db_session.flush()
    record = UserHistory(
        action=UserHistoryAction.DELETE_TOPIC,
        acting_user_id=1,
        target_user_id=2,
        topic_id=topic.id,
    )
    db_session.add(record)
    await db_session.commit()

    record = (
        await db_session.execute(
            select(UserHistory)
            .where(UserHistory.id == record.id)
            .options(
                selectinload(UserHistory.acting_user),
                selectinload(UserHistory.target_user),
                selectinload(UserHistory.topic),
            )
            .execution_options(populate_existing=True)
        )
    ).scalar_one()
    assert record.acting_user.username == "Admin"
    assert record.target_user.username == "Member"
    assert record.topic.title == "Welcome"
    assert record.created_at is not None


def test_username_lower_tracks_username():
    user = User(username="MixedCase")
    assert user.username_lower == "mixedcase"
    user.username = "Renamed"
    assert user.username_lower == "renamed"


def test_staff_flags():
    assert User(username="a", is_admin=True).is_staff is True
    assert User(username="m", is_moderator=True).is_staff is True
    assert User(username="r", is_admin=False, is_moderator=False).is_staff is False
