"""Request DTOs for API endpoints."""

from typing import Any

from pydantic import BaseModel, Field


class FingerprintRequest(BaseModel):
    """Request DTO for previewing the fingerprint of a request descriptor.

    The handler will convert this to internal calls to the service layer.
    """

    mode: str = Field(..., description="Generation mode (e.g. summary, quiz)", min_length=1)
    context: Any = Field(
        None,
        description="Request parameters; key order of nested objects does not matter",
    )
