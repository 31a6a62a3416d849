# taskhub/models/task.py
import enum

from sqlalchemy import Column, String, DateTime, ForeignKey, Enum, Text
from sqlalchemy.orm import relationship

from taskhub.database import Base
from taskhub.models.user import new_id
from taskhub.utils.dates import utcnow


class TaskStatus(str, enum.Enum):
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    REVIEW = "REVIEW"
    COMPLETED = "COMPLETED"


class TaskPriority(str, enum.Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class Task(Base):
    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    due_date = Column(DateTime, nullable=False, index=True)

    status = Column(Enum(TaskStatus), default=TaskStatus.TODO, nullable=False, index=True)
    priority = Column(Enum(TaskPriority), default=TaskPriority.MEDIUM, nullable=False, index=True)

    # Creator never changes after creation
    creator_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    # No FK: an id given directly is trusted once it parses
    assigned_to_id = Column(String(36), nullable=True, index=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Populated references
    creator = relationship("User", foreign_keys=[creator_id], back_populates="created_tasks", lazy="joined")
    assignee = relationship(
        "User",
        primaryjoin="foreign(Task.assigned_to_id) == User.id",
        viewonly=True,
        lazy="joined",
    )
