"""Post model."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from staff_audit.database import Base


class Post(Base):
    """A post within a topic."""

    __tablename__ = "posts"

    id = Column(Integer, primary_key=True)
    topic_id = Column(Integer, ForeignKey("topics.id"), nullable=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    raw = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    topic = relationship("Topic")
    user = relationship("User")

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, topic_id={self.topic_id})>"
