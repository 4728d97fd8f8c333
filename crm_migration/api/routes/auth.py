"""Caller authentication and organization resolution."""

import secrets
from dataclasses import dataclass
from typing import Optional

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from ...config import Settings, get_settings
from ...errors import AuthenticationError

router = APIRouter()


@dataclass(frozen=True)
class CallerContext:
    """The authenticated caller and the organization it acts for."""
    org_id: str


class AuthStatus(BaseModel):
    """Auth status response."""
    authenticated: bool
    org_id: Optional[str] = None


def get_bearer_token(request: Request) -> Optional[str]:
    """Extract the bearer token from the Authorization header."""
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header[7:].strip() or None
    return None


def resolve_org(token: Optional[str], settings: Settings) -> Optional[str]:
    """Organization id for a token, compared in constant time."""
    if not token:
        return None
    for known, org_id in settings.api_tokens.items():
        if secrets.compare_digest(token, known):
            return org_id
    return None


async def require_org(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> CallerContext:
    """Dependency to require an authenticated caller with an organization."""
    org_id = resolve_org(get_bearer_token(request), settings)
    if not org_id:
        raise AuthenticationError()
    return CallerContext(org_id=org_id)


@router.get("/status", response_model=AuthStatus)
async def auth_status(request: Request, settings: Settings = Depends(get_settings)):
    """Check authentication status."""
    org_id = resolve_org(get_bearer_token(request), settings)
    return AuthStatus(authenticated=org_id is not None, org_id=org_id)
