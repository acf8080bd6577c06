"""FastAPI dependencies for accessing app state and the caller identity."""

from typing import Optional

from authlib.jose import JsonWebToken
from authlib.jose.errors import JoseError
from fastapi import Depends
from fastapi import Request
from fastapi.security import HTTPAuthorizationCredentials
from fastapi.security import HTTPBearer
from loguru import logger
from pydantic import ValidationError

from santa_api.settings import Settings
from santa_api.workflow.exceptions import Forbidden
from santa_api.workflow.exceptions import Unauthorized
from santa_api.workflow.models import Identity
from santa_api.workflow.orchestrator import ExchangeOrchestrator

_bearer_scheme = HTTPBearer(auto_error=False, description="HS256 token issued by the identity provider")


def get_settings(request: Request) -> Settings:
    """
    Get application settings from request state.

    Parameters
    ----------
    request : Request
        FastAPI request object

    Returns
    -------
    Settings
        Application settings instance
    """
    return request.app.state.settings


def get_orchestrator(request: Request) -> ExchangeOrchestrator:
    """Get the exchange orchestrator built in create_app."""
    return request.app.state.orchestrator


def decode_identity(token: str, secret: str, algorithm: str = "HS256") -> Identity:
    """
    Verify a bearer token and map its claims to an Identity.

    Claims: ``sub`` (user id), ``role`` (ADMIN/USER), optional ``email`` and ``name``.

    Raises:
        Unauthorized: Bad signature, expired token or malformed claims
    """
    try:
        claims = JsonWebToken([algorithm]).decode(token, secret)
        claims.validate()
    except (JoseError, ValueError) as e:
        raise Unauthorized(f"Invalid bearer token: {type(e).__name__}") from e

    try:
        return Identity(
            user_id=str(claims["sub"]),
            role=str(claims.get("role", "")).upper(),
            email=claims.get("email"),
            name=claims.get("name"),
        )
    except (KeyError, ValidationError) as e:
        raise Unauthorized("Bearer token is missing required claims") from e


def get_current_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> Identity:
    """Authenticate the caller from the Authorization header."""
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise Unauthorized("Missing bearer token")

    identity = decode_identity(credentials.credentials, settings.jwt_secret, settings.jwt_algorithm)

    # picked up by RequestContextMiddleware for the request log line
    request.state.user_id = identity.user_id
    logger.debug("Caller authenticated", user_id=identity.user_id, role=identity.role.value)
    return identity


def require_admin(identity: Identity = Depends(get_current_identity)) -> Identity:
    """Authenticate the caller and require the ADMIN role."""
    if not identity.is_admin:
        raise Forbidden("Admin role required")
    return identity
