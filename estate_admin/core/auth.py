import logging
from typing import Optional

from fastapi import Request, Response
from jose import JWTError, jwt
from pydantic import ValidationError

from .config import Settings, settings as default_settings
from ..models.user import SessionUser

log = logging.getLogger(__name__)


def get_access_token(request: Request, config: Optional[Settings] = None) -> Optional[str]:
    config = config or default_settings
    return request.cookies.get(config.access_token_cookie) or None


def set_access_token(response: Response, token: str, config: Optional[Settings] = None) -> None:
    config = config or default_settings
    response.set_cookie(
        config.access_token_cookie,
        token,
        max_age=config.access_token_max_age,
        path="/",
        samesite="lax",
    )


def clear_access_token(response: Response, config: Optional[Settings] = None) -> None:
    config = config or default_settings
    response.delete_cookie(config.access_token_cookie, path="/")


def decode_token_hint(token: str) -> Optional[SessionUser]:
    """Best-effort user record from the token payload.

    The signature is not verified, so the result is only a hint for rendering
    until the backend answers the next request.
    """
    try:
        claims = jwt.get_unverified_claims(token)
    except JWTError:
        log.warning("Stored access token could not be decoded")
        return None

    user_id = str(claims.get("userId") or claims.get("sub") or "")
    username = claims.get("username") or ""
    try:
        return SessionUser(
            id=user_id,
            username=username,
            name=claims.get("name") or username,
            email=claims.get("email") or "",
            role=claims.get("role") or "SALES_EXECUTIVE",
            realEstateDeveloperId=str(claims.get("realEstateDeveloperId") or ""),
            officeId=str(claims.get("officeId") or ""),
            employeeId=str(claims.get("employeeId") or user_id),
        )
    except ValidationError:
        log.warning("Access token payload does not describe a user")
        return None
