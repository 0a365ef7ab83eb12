"""Pydantic request/response schemas for um_gateway.

All responses are wrapped in ApiResponse at the router layer.
"""

from pydantic import BaseModel


class LoginRequest(BaseModel):
    username: str
    password: str


class UserInfo(BaseModel):
    """Minimal user info embedded in responses."""

    user_id: int
    username: str
    email: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "Bearer"
    expires_in: int = 1800  # 30 minutes in seconds
    user: UserInfo
