# taskhub/utils/security.py
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt

from taskhub.config.settings import AppConfig
from taskhub.errors import UnauthenticatedError

SECRET_KEY = AppConfig.AUTH['secret_key']
ALGORITHM = AppConfig.AUTH['algorithm']
ACCESS_TOKEN_EXPIRE_MINUTES = AppConfig.AUTH['token_expire_minutes']


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def create_access_token(user_id: str, expires_delta: timedelta = None) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    payload = {"sub": user_id, "exp": expire}
    return jwt.encode(payload, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> str:
    """Verify a JWT and return the user id it was issued for"""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise UnauthenticatedError("Invalid or expired token")

    user_id = payload.get("sub")
    if not user_id:
        raise UnauthenticatedError("Invalid or expired token")
    return user_id
