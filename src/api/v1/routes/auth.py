"""Auth API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from api.dependencies.auth import (
    CurrentIdentity,
    clear_session_cookies,
    get_access_token,
    get_auth_provider,
)
from api.v1.schemas.auth import IdentityDetailResponse, IdentityResponse
from api.v1.schemas.common import MessageResponse
from core.rate_limit import limiter
from infrastructure.auth.jwt_provider import JWTAuthProvider

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get(
    "/me",
    response_model=IdentityDetailResponse,
    summary="Get the current identity",
    responses={401: {"description": "Not signed in"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_me(request: Request, identity: CurrentIdentity) -> IdentityDetailResponse:
    """Return the authenticated caller merged with their profile."""
    return IdentityDetailResponse(data=IdentityResponse.from_entity(identity))


@router.post(
    "/sign-out",
    response_model=MessageResponse,
    summary="Sign out",
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def sign_out(
    request: Request,
    response: Response,
    token: Annotated[str | None, Depends(get_access_token)],
    auth_provider: JWTAuthProvider = Depends(get_auth_provider),
) -> MessageResponse:
    """Revoke the session with the auth service and clear the session cookies.

    Succeeds even without a session so clients can always reset their state.
    """
    if token:
        await auth_provider.sign_out(token)
    clear_session_cookies(response)
    return MessageResponse(message="Signed out")
