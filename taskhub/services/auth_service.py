# taskhub/services/auth_service.py
import logging
from typing import Tuple

from sqlalchemy.orm import Session

from taskhub.errors import ConflictError, NotFoundError, UnauthenticatedError
from taskhub.models.user import User
from taskhub.schemas.user import UserCreate, UserLogin, UserUpdate
from taskhub.services.user_directory import UserDirectory
from taskhub.utils.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


class AuthService:
    """Registration, login and profile management"""

    def __init__(self, db: Session):
        self.db = db
        self.users = UserDirectory(db)

    def register(self, payload: UserCreate) -> Tuple[User, str]:
        if self.users.email_exists(payload.email):
            raise ConflictError("Email already registered")

        user = self.users.create(
            name=payload.name,
            email=payload.email,
            hashed_password=hash_password(payload.password),
        )
        logger.info(f"Registered user {user.id}")
        return user, create_access_token(user.id)

    def login(self, payload: UserLogin) -> Tuple[User, str]:
        user = self.users.get_by_email(payload.email)
        # Same message for unknown email and wrong password
        if user is None or not verify_password(payload.password, user.hashed_password):
            raise UnauthenticatedError("Invalid email or password")
        return user, create_access_token(user.id)

    def get_profile(self, user_id: str) -> User:
        user = self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def update_profile(self, user_id: str, payload: UserUpdate) -> User:
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        user = self.users.update(user_id, **changes)
        if user is None:
            raise NotFoundError("User not found")
        return user
