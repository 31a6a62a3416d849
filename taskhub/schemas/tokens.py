# taskhub/schemas/tokens.py
from taskhub.schemas.base import CamelModel
from taskhub.schemas.user import UserOut


class AuthResponse(CamelModel):
    user: UserOut
    token: str
