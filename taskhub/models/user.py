# taskhub/models/user.py
import uuid

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship

from taskhub.database import Base
from taskhub.utils.dates import utcnow


def new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(50), nullable=False)
    # Stored lower-cased; uniqueness is enforced here and checked on register
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    created_tasks = relationship("Task", back_populates="creator", foreign_keys="Task.creator_id")
