"""Firebase ID token authentication for admin endpoints."""

from typing import Any

from fastapi import Depends, Header, HTTPException
from firebase_admin import auth as firebase_auth
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool
from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from app.core.config import settings
from app.core.firebase import get_firebase_app
from app.core.logging import get_logger

logger = get_logger(__name__)

_TOKEN_ERRORS = (
    firebase_auth.InvalidIdTokenError,
    firebase_auth.CertificateFetchError,
    firebase_auth.UserDisabledError,
    ValueError,
)


class AuthenticatedUser(BaseModel):
    """Caller identity taken from a verified Firebase ID token."""

    uid: str
    email: str | None = None
    role: str | None = None

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> "AuthenticatedUser":
        return cls(
            uid=str(claims.get("uid") or claims.get("sub") or ""),
            email=claims.get("email"),
            role=claims.get("role"),
        )

    @property
    def is_admin(self) -> bool:
        if self.role == "admin":
            return True
        return bool(self.email) and self.email.lower() in settings.ADMIN_EMAILS


def verify_token(token: str) -> dict[str, Any]:
    """Verify a Firebase ID token and return its claims (blocking)."""
    return firebase_auth.verify_id_token(token, app=get_firebase_app())


async def get_current_user(
    authorization: str | None = Header(default=None),
) -> AuthenticatedUser | None:
    """Resolve the caller from ``Authorization: Bearer <id token>``.

    Anonymous requests get ``None``; a present but invalid token is a 401.
    """
    if not authorization:
        return None

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(
            status_code=HTTP_401_UNAUTHORIZED, detail="Invalid authorization header"
        )

    try:
        claims = await run_in_threadpool(verify_token, token.strip())
    except _TOKEN_ERRORS as exc:
        logger.warning("token_verification_failed", error=str(exc))
        raise HTTPException(
            status_code=HTTP_401_UNAUTHORIZED, detail="Invalid or expired token"
        ) from exc

    return AuthenticatedUser.from_claims(claims)


async def require_admin(
    user: AuthenticatedUser | None = Depends(get_current_user),
) -> AuthenticatedUser:
    """Allow only admins through."""
    if user is None:
        raise HTTPException(
            status_code=HTTP_401_UNAUTHORIZED, detail="Authentication required"
        )
    if not user.is_admin:
        logger.warning("admin_access_denied", uid=user.uid, email=user.email)
        raise HTTPException(
            status_code=HTTP_403_FORBIDDEN, detail="Admin access required"
        )
    return user
