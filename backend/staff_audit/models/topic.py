"""Topic model."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from staff_audit.database import Base


class Topic(Base):
    """Discussion topic that user history records may point at."""

    __tablename__ = "topics"

    id = Column(Integer, primary_key=True)
    title = Column(String(255), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<Topic(id={self.id}, title='{self.title}')>"
