# taskhub/utils/auth.py
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from taskhub.config.settings import AppConfig
from taskhub.database import get_db
from taskhub.errors import UnauthenticatedError
from taskhub.models.user import User
from taskhub.services.user_directory import UserDirectory
from taskhub.utils.security import decode_access_token

# auto_error is off so the session cookie can be checked first
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def get_request_token(request: Request, bearer_token: Optional[str] = Depends(oauth2_scheme)) -> Optional[str]:
    """Token from the session cookie, falling back to the Authorization header"""
    cookie_token = request.cookies.get(AppConfig.AUTH['cookie_name'])
    if cookie_token:
        return cookie_token
    return bearer_token


def get_current_user_id(token: Optional[str] = Depends(get_request_token)) -> str:
    if not token:
        raise UnauthenticatedError("Authentication required")
    return decode_access_token(token)


def get_current_user(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> User:
    user = UserDirectory(db).get_by_id(user_id)
    if user is None:
        raise UnauthenticatedError("Invalid or expired token")
    return user
