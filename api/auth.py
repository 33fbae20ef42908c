"""
Single-user cookie authentication for the burritos webapp.

The operator account is configured through the environment (``USER_LOGIN``
and a bcrypt ``USER_PASSWORD_HASH``). A successful login stores an HS256 JWT
signed with ``JWT_SECRET`` in an http-only ``token`` cookie. When any of the
three variables is missing, authentication is disabled and write routes are
open.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from fastapi import APIRouter, Depends, Request, Response
from pydantic import BaseModel

from .settings import Settings, get_settings
from .shared.errors import AuthenticationError
from .shared.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()

TOKEN_COOKIE = "token"
TOKEN_ALGORITHM = "HS256"
TOKEN_LIFETIME = timedelta(hours=12)


class LoginRequest(BaseModel):
    login: str
    password: str


def check_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError as e:
        logger.warning("Password check rejected: %s", e)
        return False


def create_token(login: str, secret: str, now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    payload = {"sub": login, "iat": now, "exp": now + TOKEN_LIFETIME}
    return jwt.encode(payload, secret, algorithm=TOKEN_ALGORITHM)


def decode_token(token: str, secret: str) -> str:
    """Return the login stored in ``token``.

    Raises:
        AuthenticationError: expired, tampered or malformed token.
    """
    try:
        payload = jwt.decode(token, secret, algorithms=[TOKEN_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Session expired") from None
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid session") from None
    return payload["sub"]


def current_user(request: Request, settings: Settings) -> str:
    token = request.cookies.get(TOKEN_COOKIE)
    if not token:
        raise AuthenticationError("Not authenticated")
    login = decode_token(token, settings.jwt_secret)
    if login != settings.user_login:
        raise AuthenticationError("Invalid session")
    return login


async def require_user(request: Request, settings: Settings = Depends(get_settings)) -> Optional[str]:
    """Dependency guarding write routes; a no-op when auth is not configured."""
    if not settings.auth_enabled:
        return None
    return current_user(request, settings)


@router.post("/login")
async def login(body: LoginRequest, response: Response, settings: Settings = Depends(get_settings)):
    if not settings.auth_enabled:
        raise AuthenticationError("Login is not configured")
    if body.login != settings.user_login or not check_password(body.password, settings.user_password_hash):
        logger.warning("Failed login attempt for %r", body.login)
        raise AuthenticationError("Invalid credentials")

    response.set_cookie(
        TOKEN_COOKIE,
        create_token(body.login, settings.jwt_secret),
        max_age=int(TOKEN_LIFETIME.total_seconds()),
        httponly=True,
        samesite="lax",
    )
    logger.info("User %s logged in", body.login)
    return {"success": True}


@router.post("/logout")
async def logout(response: Response):
    response.delete_cookie(TOKEN_COOKIE)
    return {"success": True}


@router.get("/profile")
async def profile(request: Request, settings: Settings = Depends(get_settings)):
    if not settings.auth_enabled:
        return {"login": None, "authEnabled": False}
    return {"login": current_user(request, settings), "authEnabled": True}
