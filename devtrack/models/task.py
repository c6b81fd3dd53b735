from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON, Index
from sqlalchemy.orm import relationship, validates
from devtrack.database import Base
from devtrack.models.user import new_id, utcnow


class Task(Base):
    __tablename__ = "tasks"
    __table_args__ = (
        Index("ix_tasks_user_created", "user_id", "created_at"),
    )

    id = Column(String(32), primary_key=True, default=new_id)
    title = Column(String(200), nullable=False)
    status = Column(String(20), nullable=False, default="pending")
    priority = Column(String(20), nullable=False, default="medium")
    notes = Column(Text, nullable=False, default="")
    time_spent = Column(Integer, nullable=False, default=0)  # seconds
    tags = Column(JSON, nullable=False, default=list)
    user_id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    owner = relationship("User", back_populates="tasks")

    @validates("time_spent")
    def clamp_time_spent(self, key, value):
        # Never persist a negative duration
        if value is None or value < 0:
            return 0
        return value
