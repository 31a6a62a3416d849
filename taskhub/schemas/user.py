from datetime import datetime
from typing import Annotated, Optional

from pydantic import EmailStr, Field, field_validator

from taskhub.schemas.base import CamelModel
from taskhub.utils.dates import as_utc

UserName = Annotated[str, Field(min_length=2, max_length=50)]


class UserCreate(CamelModel):
    name: UserName
    email: EmailStr
    password: str = Field(min_length=6)

    @field_validator('name', mode='before')
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class UserLogin(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserUpdate(CamelModel):
    name: Optional[UserName] = None

    @field_validator('name', mode='before')
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class UserSummary(CamelModel):
    """Directory view: never exposes anything beyond id, name and email"""
    id: str
    name: str
    email: str


class UserOut(UserSummary):
    created_at: datetime

    @field_validator('created_at')
    @classmethod
    def attach_utc(cls, v):
        return as_utc(v)
