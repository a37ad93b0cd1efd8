"""User history model.

Records administrative and moderation actions taken against user accounts,
like deleting users, changing site settings or suspending members. Rows are
written by the staff action logger and never updated afterwards.
"""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    event,
)
from sqlalchemy.orm import relationship, validates

from staff_audit.database import Base
from staff_audit.errors import UserHistoryValidationError
from staff_audit.models.enums import ADMIN_ONLY_ACTION_IDS, UserHistoryAction, is_json_value_pair

ADMIN_ONLY_CHECK_SQL = "admin_only = (action IN ({}))".format(
    ", ".join(str(code) for code in sorted(ADMIN_ONLY_ACTION_IDS))
)


def _admin_only_default(context) -> bool:
    """Column default for inserts that bypass the ORM unit of work."""
    action = context.get_current_parameters().get("action")
    return action in ADMIN_ONLY_ACTION_IDS


class UserHistory(Base):
    """Audit trail entry for an action performed against a user."""

    __tablename__ = "user_histories"
    __table_args__ = (
        Index("ix_user_histories_action_id", "action", "id"),
        Index("ix_user_histories_acting_user_id_action_id", "acting_user_id", "action", "id"),
        Index("ix_user_histories_subject_id", "subject", "id"),
        Index("ix_user_histories_target_user_id_id", "target_user_id", "id"),
        CheckConstraint(ADMIN_ONLY_CHECK_SQL, name="ck_user_histories_admin_only"),
    )

    id = Column(Integer, primary_key=True)
    action = Column(Integer, nullable=False)
    acting_user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    target_user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    post_id = Column(Integer, ForeignKey("posts.id"), nullable=True)
    topic_id = Column(Integer, ForeignKey("topics.id"), nullable=True)
    details = Column(Text, nullable=True)
    context = Column(String(255), nullable=True)
    ip_address = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    subject = Column(Text, nullable=True)
    previous_value = Column(Text, nullable=True)
    new_value = Column(Text, nullable=True)
    custom_type = Column(String(255), nullable=True)
    admin_only = Column(Boolean, nullable=False, default=_admin_only_default)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    acting_user = relationship("User", foreign_keys=[acting_user_id])
    target_user = relationship("User", foreign_keys=[target_user_id])
    post = relationship("Post")
    topic = relationship("Topic")

    @validates("action")
    def _coerce_action(self, key, value):
        if value is None:
            return None
        if isinstance(value, str) and not value.strip():
            raise UserHistoryValidationError("UserHistory.action can't be blank")
        return int(UserHistoryAction.resolve(value))

    @property
    def action_kind(self) -> UserHistoryAction:
        return UserHistoryAction(self.action)

    def new_value_is_json(self) -> bool:
        return is_json_value_pair(self.action)

    def previous_value_is_json(self) -> bool:
        return self.new_value_is_json()

    def __repr__(self) -> str:
        return f"<UserHistory(id={self.id}, action={self.action}, target={self.target_user_id})>"


@event.listens_for(UserHistory, "before_insert")
@event.listens_for(UserHistory, "before_update")
def _set_admin_only(mapper, connection, target: UserHistory) -> None:
    """Derive admin_only from the action; caller-supplied values are discarded."""
    if target.action is None:
        raise UserHistoryValidationError("UserHistory.action can't be blank")
    target.admin_only = target.action in ADMIN_ONLY_ACTION_IDS
