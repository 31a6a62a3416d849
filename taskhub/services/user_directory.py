# taskhub/services/user_directory.py
import uuid
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from taskhub.errors import ConflictError
from taskhub.models.task import Task
from taskhub.models.user import User
from taskhub.utils.dates import utcnow


def normalize_email(email: str) -> str:
    return email.strip().lower()


def is_valid_id(value: str) -> bool:
    """True when `value` parses as a UUID"""
    try:
        uuid.UUID(str(value))
    except (TypeError, ValueError):
        return False
    return True


class UserDirectory:
    """Lookups and writes for user records"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: str) -> Optional[User]:
        if not is_valid_id(user_id):
            return None
        return self.db.query(User).filter(User.id == str(user_id)).first()

    def get_by_email(self, email: str) -> Optional[User]:
        """Case-insensitive exact match"""
        return self.db.query(User).filter(func.lower(User.email) == normalize_email(email)).first()

    def email_exists(self, email: str) -> bool:
        return self.get_by_email(email) is not None

    def create(self, name: str, email: str, hashed_password: str) -> User:
        user = User(name=name, email=normalize_email(email), hashed_password=hashed_password)
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            self.db.rollback()
            raise ConflictError("Email already registered")
        self.db.refresh(user)
        return user

    def update(self, user_id: str, **fields) -> Optional[User]:
        user = self.get_by_id(user_id)
        if user is None:
            return None
        for key, value in fields.items():
            setattr(user, key, value)
        user.updated_at = utcnow()
        self.db.commit()
        self.db.refresh(user)
        return user

    def delete(self, user_id: str) -> bool:
        user = self.get_by_id(user_id)
        if user is None:
            return False
        # Tasks keep a non-null creator, so their creator cannot go away
        if self.db.query(Task.id).filter(Task.creator_id == user.id).first() is not None:
            raise ConflictError("User still has created tasks")
        self.db.delete(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("User still has created tasks")
        return True

    def list_all(self) -> List[User]:
        return self.db.query(User).order_by(User.name.asc()).all()

    def search(self, query: str, limit: int = 10) -> List[User]:
        """Substring match on name or email, ignoring case"""
        return (
            self.db.query(User)
            .filter(
                or_(
                    User.name.icontains(query, autoescape=True),
                    User.email.icontains(query, autoescape=True),
                )
            )
            .order_by(User.name.asc())
            .limit(limit)
            .all()
        )
