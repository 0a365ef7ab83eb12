"""Pydantic request schemas for um_user.

Length bounds are enforced by UserDTO itself; these models only check
shape so the DTO stays the single source of truth for limits.
"""

from pydantic import BaseModel, EmailStr, Field


class UserWriteRequest(BaseModel):
    """Body of POST /users and PUT /users/{id} (update is a full replace)."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    email: EmailStr
    permission_ids: list[int] = Field(default_factory=list)
