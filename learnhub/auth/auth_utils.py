# learnhub/auth/auth_utils.py
import time

from jose import jwt, JWTError
from fastapi import Header, HTTPException

from learnhub import config


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, config.JWT_SECRET_KEY, algorithms=[config.JWT_ALGORITHM])
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid or Expired Token")


def verify_token(authorization: str = Header(None)) -> dict:
    """Bearer token from the Authorization header, decoded and checked"""
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Not authorized, no token")

    token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise HTTPException(status_code=401, detail="Not authorized, no token")

    return decode_token(token)


def create_token(user_id: str, expires_in_seconds: int = 3600) -> str:
    """Sign a token for ``user_id``; used by tooling and tests, login lives elsewhere"""
    now = int(time.time())
    return jwt.encode(
        {"sub": user_id, "iat": now, "exp": now + expires_in_seconds},
        config.JWT_SECRET_KEY,
        algorithm=config.JWT_ALGORITHM
    )
