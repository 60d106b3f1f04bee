import os, jwt
import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import Header, HTTPException
from pydantic import BaseModel

JWT_SECRET = os.getenv("JWT_SECRET", "dev_secret_change_me")
JWT_ALG = "HS256"
JWT_EXP_MIN = int(os.getenv("JWT_EXP_MIN", str(60 * 24 * 7)))


class CurrentUser(BaseModel):
    id: str
    role: str = "student"


def create_token(sub: str, role: str = "student", expires_delta: timedelta | None = None) -> str:
    now = datetime.now(timezone.utc)
    to_encode = {
        "sub": sub,
        "role": role,
        "iat": now,
        "exp": now + (expires_delta or timedelta(minutes=JWT_EXP_MIN)),
    }
    return jwt.encode(to_encode, JWT_SECRET, algorithm=JWT_ALG)

def decode_token(token: str) -> dict[str, Any]:
    return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALG])


def auth_user(authorization: str | None = Header(default=None)) -> CurrentUser:
    """Identify the caller from a bearer token issued by the auth provider."""
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Missing token")
    token = authorization.split(" ", 1)[1]
    try:
        data = decode_token(token)
    except jwt.PyJWTError as e:
        logging.error(f"Token decode failed: {e}")
        raise HTTPException(status_code=401, detail=f"Invalid token: {e}")
    user_id = data.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Token has no subject")
    return CurrentUser(id=str(user_id), role=data.get("role") or "student")


def require_admin(user: CurrentUser) -> CurrentUser:
    if user.role != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
