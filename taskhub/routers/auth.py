from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from taskhub.config.settings import AppConfig
from taskhub.database import get_db
from taskhub.models.user import User
from taskhub.schemas.tokens import AuthResponse
from taskhub.schemas.user import UserCreate, UserLogin, UserOut, UserUpdate
from taskhub.services.auth_service import AuthService
from taskhub.utils.auth import get_current_user

router = APIRouter()


def set_auth_cookie(response: Response, token: str):
    """Session cookie carrying the same bearer token the body returns"""
    response.set_cookie(
        key=AppConfig.AUTH['cookie_name'],
        value=token,
        httponly=True,
        secure=AppConfig.AUTH['cookie_secure'],
        samesite=AppConfig.AUTH['cookie_samesite'],
        max_age=AppConfig.AUTH['token_expire_minutes'] * 60,
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: UserCreate, response: Response, db: Session = Depends(get_db)):
    user, token = AuthService(db).register(payload)
    set_auth_cookie(response, token)
    return AuthResponse(user=UserOut.model_validate(user), token=token)


@router.post("/login", response_model=AuthResponse)
def login(payload: UserLogin, response: Response, db: Session = Depends(get_db)):
    user, token = AuthService(db).login(payload)
    set_auth_cookie(response, token)
    return AuthResponse(user=UserOut.model_validate(user), token=token)


@router.post("/logout")
def logout(response: Response):
    response.delete_cookie(key=AppConfig.AUTH['cookie_name'])
    return {"message": "Logout successful"}


@router.get("/me", response_model=UserOut)
def get_me(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Get current user information"""
    return AuthService(db).get_profile(current_user.id)


@router.put("/profile", response_model=UserOut)
def update_profile(
    payload: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return AuthService(db).update_profile(current_user.id, payload)
