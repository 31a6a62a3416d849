# taskhub/routers/users.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from taskhub.database import get_db
from taskhub.errors import ValidationError
from taskhub.models.user import User
from taskhub.schemas.user import UserSummary
from taskhub.services.user_directory import UserDirectory
from taskhub.utils.auth import get_current_user

router = APIRouter()


@router.get("", response_model=List[UserSummary])
def get_all_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """All users, for the assignment dropdown"""
    return UserDirectory(db).list_all()


@router.get("/search", response_model=List[UserSummary])
def search_users(
    q: str = Query(default=""),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Search users by name or email"""
    query = q.strip()
    if not query:
        raise ValidationError("Search query is required")
    return UserDirectory(db).search(query)
