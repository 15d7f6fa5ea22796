"""Authentication and workspace context dependencies for FastAPI."""

from functools import lru_cache
from typing import Annotated, Awaitable, Callable
from uuid import UUID

from fastapi import Depends, Header, Request, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api.dependencies.services import get_identity_service, get_workspace_service
from core.config import settings
from core.exceptions import (
    InsufficientPermissionsError,
    LoginRequiredError,
    WorkspaceContextRequiredError,
)
from domain.entities.profile import Identity
from domain.entities.workspace import WorkspaceContext, WorkspaceRole
from domain.services.identity_service import IdentityService
from domain.services.workspace_service import WorkspaceService
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser

# Security scheme for OpenAPI docs
security = HTTPBearer(auto_error=False)


@lru_cache
def get_auth_provider() -> JWTAuthProvider:
    """Get or create the auth provider singleton."""
    return JWTAuthProvider()


def get_access_token(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str | None:
    """The caller's access token: Bearer header first, then the session cookie."""
    if credentials:
        return credentials.credentials
    return request.cookies.get(settings.access_token_cookie_name) or None


async def get_token_user(
    token: Annotated[str | None, Depends(get_access_token)],
    auth_provider: JWTAuthProvider = Depends(get_auth_provider),
) -> TokenUser | None:
    """Validate the access token, if any. Never raises."""
    if not token:
        return None
    return await auth_provider.validate_token(token)


async def get_optional_identity(
    token_user: Annotated[TokenUser | None, Depends(get_token_user)],
    service: IdentityService = Depends(get_identity_service),
) -> Identity | None:
    """
    Dependency to get the caller's identity if authenticated.

    Returns:
        Identity if a valid session exists, None otherwise (no exception raised)
    """
    if not token_user:
        return None
    return await service.resolve(token_user)


async def get_current_identity(
    identity: Annotated[Identity | None, Depends(get_optional_identity)],
) -> Identity:
    """
    Dependency to require an authenticated identity.

    Raises:
        LoginRequiredError: If there is no valid session
    """
    if identity is None:
        raise LoginRequiredError(location=settings.login_path)
    return identity


# Type aliases for convenience in route handlers
OptionalIdentity = Annotated[Identity | None, Depends(get_optional_identity)]
CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]


async def get_workspace_context(
    request: Request,
    identity: CurrentIdentity,
    x_workspace_id: Annotated[str | None, Header()] = None,
    service: WorkspaceService = Depends(get_workspace_service),
) -> WorkspaceContext | None:
    """Resolve the caller's selected workspace against the store.

    The X-Workspace-Id header wins over the selector cookie. A stale,
    forged or malformed selector resolves to None.
    """
    selected = x_workspace_id or request.cookies.get(settings.workspace_cookie_name)
    return await service.resolve_context(identity.id, selected)


async def get_required_workspace(
    ctx: Annotated[WorkspaceContext | None, Depends(get_workspace_context)],
) -> WorkspaceContext:
    """
    Dependency to require a valid workspace context.

    Raises:
        WorkspaceContextRequiredError: If no workspace is selected or the
            selection is no longer valid
    """
    if ctx is None:
        raise WorkspaceContextRequiredError(location=settings.onboarding_path)
    return ctx


CurrentWorkspace = Annotated[WorkspaceContext, Depends(get_required_workspace)]


async def require_workspace(workspace_id: UUID, ctx: CurrentWorkspace) -> WorkspaceContext:
    """Require that the workspace named in the path is the resolved one."""
    if ctx.workspace_id != workspace_id:
        raise WorkspaceContextRequiredError(location=settings.onboarding_path)
    return ctx


PathWorkspace = Annotated[WorkspaceContext, Depends(require_workspace)]


def require_role(
    *allowed: WorkspaceRole,
) -> Callable[[WorkspaceContext], Awaitable[WorkspaceContext]]:
    """Build a dependency that requires the caller's role to be in ``allowed``.

    Denial is a 403, never a redirect.
    """
    allowed_roles = frozenset(allowed)

    async def dependency(ctx: CurrentWorkspace) -> WorkspaceContext:
        if ctx.role not in allowed_roles:
            raise InsufficientPermissionsError(
                "this action",
                allowed_roles=sorted(role.value for role in allowed_roles),
            )
        return ctx

    return dependency


# --- Cookies ---


def _set_cookie(response: Response, key: str, value: str) -> None:
    response.set_cookie(
        key=key,
        value=value,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


def set_workspace_cookie(response: Response, workspace_id: UUID) -> None:
    """Persist the selected workspace for subsequent requests."""
    _set_cookie(response, settings.workspace_cookie_name, str(workspace_id))


def clear_workspace_cookie(response: Response) -> None:
    response.delete_cookie(settings.workspace_cookie_name, path="/")


def clear_session_cookies(response: Response) -> None:
    """Drop the session tokens and the workspace selector."""
    for name in (
        settings.access_token_cookie_name,
        settings.refresh_token_cookie_name,
        settings.workspace_cookie_name,
    ):
        response.delete_cookie(name, path="/")
