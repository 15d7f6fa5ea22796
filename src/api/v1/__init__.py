"""API v1 router configuration."""

from typing import Any

from fastapi import APIRouter

from api.v1.routes.activity import router as activity_router
from api.v1.routes.auth import router as auth_router
from api.v1.routes.invitations import invitations_router, workspace_invitations_router
from api.v1.routes.tags import router as tags_router
from api.v1.routes.tasks import router as tasks_router
from api.v1.routes.workspaces import router as workspaces_router
from api.v1.schemas.common import ErrorResponse

# Errors any v1 route can return, documented once for the OpenAPI schema
COMMON_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    401: {"model": ErrorResponse, "description": "No valid session"},
    428: {"model": ErrorResponse, "description": "No valid workspace selected"},
    429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
}

router = APIRouter(responses=COMMON_ERROR_RESPONSES)
router.include_router(auth_router)
router.include_router(workspaces_router)
router.include_router(workspace_invitations_router)
router.include_router(invitations_router)
router.include_router(tasks_router)
router.include_router(tags_router)
router.include_router(activity_router)
