"""
Bearer Token Authentication

Requests to the slot API carry a short-lived JWT minted by the wiki for the
acting user. The token travels in the Authorization header and never in a
cookie, so a valid token also proves the request was not forged.

`verify_jwt` turns the token into a `UserContext`; `require_scopes` builds
route dependencies that check the granted operations (`edit`, `create`).
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Tuple, Type

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..config import settings
from .models import UserContext


JWT_ISSUER = "MediaWiki"
JWT_AUDIENCE = "wsslots"
REQUIRED_CLAIMS = ["iss", "aud", "iat", "exp", "user", "scope"]

bearer_scheme = HTTPBearer(auto_error=True)

# Most specific first; every entry is a subclass of jwt.InvalidTokenError
_TOKEN_ERRORS: List[Tuple[Type[jwt.InvalidTokenError], str]] = [
    (jwt.ExpiredSignatureError, "Token has expired."),
    (jwt.InvalidAudienceError, "Invalid token audience."),
    (jwt.InvalidIssuerError, "Invalid token issuer."),
    (jwt.InvalidTokenError, "Invalid or malformed token."),
]


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def _signing_key() -> str:
    secret = settings.jwt_secret.get_secret_value()
    if not secret or not settings.jwt_algo:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="JWT verification configuration error.",
        )
    return secret


def _claims(token: str) -> Dict[str, Any]:
    key = _signing_key()
    try:
        return jwt.decode(
            token,
            key,
            algorithms=[settings.jwt_algo],
            audience=JWT_AUDIENCE,
            issuer=JWT_ISSUER,
            options={"require": REQUIRED_CLAIMS},
        )
    except jwt.InvalidTokenError as exc:
        detail = next(msg for kind, msg in _TOKEN_ERRORS if isinstance(exc, kind))
        raise _unauthorized(detail) from exc


def verify_jwt(
    creds: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> UserContext:
    """
    Authenticate the request's bearer token.

    Claims used: `user` (wiki username), `scope` (list of granted
    operations) and the optional `roles` (user groups).

    Raises
    ------
    HTTPException
        401 for expired, forged or incomplete tokens; 500 when no signing
        secret is configured.
    """
    claims = _claims(creds.credentials)

    username = claims.get("user")
    if not username:
        raise _unauthorized("Token missing 'user' claim.")

    roles = claims.get("roles", [])
    scopes = claims.get("scope")
    for name, value in (("roles", roles), ("scope", scopes)):
        if not isinstance(value, list):
            raise _unauthorized(f"'{name}' claim must be a list.")

    return UserContext(username=username, roles=roles, scopes=scopes)


def require_scopes(*required_scopes: str) -> Callable[..., UserContext]:
    """
    Build a dependency that lets a request through only when its token
    grants every scope in `required_scopes`.
    """

    def check_scopes(user: UserContext = Depends(verify_jwt)) -> UserContext:
        missing = [scope for scope in required_scopes if not user.has_scope(scope)]
        if missing:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Missing required scope(s): {', '.join(missing)}",
            )
        return user

    return check_scopes
