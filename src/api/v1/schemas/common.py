"""Common Pydantic schemas shared across the API."""

from typing import Any

from pydantic import BaseModel, ConfigDict


class ErrorResponse(BaseModel):
    """Body of every error response."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error_code": "WORKSPACE_CONTEXT_REQUIRED",
                "message": "Select or create a workspace first",
                "details": None,
            }
        }
    )

    error_code: str
    message: str
    details: Any | None = None


class MessageResponse(BaseModel):
    """Simple message response."""

    message: str
