# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261018v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the admin auth and setup endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


# -- Requests --------------------------------------------------------------
# Fields are optional so that a missing value reaches the handler and is
# answered with 400 instead of FastAPI's generic 422.


class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class SetupRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None
    setup_key: Optional[str] = None

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


# -- Responses -------------------------------------------------------------


class UserSummary(BaseModel):
    id: int
    username: str
    last_login: Optional[datetime] = None


class LoginResponse(BaseModel):
    success: bool = True
    user: UserSummary


class SessionStatusResponse(BaseModel):
    authenticated: bool


class LogoutResponse(BaseModel):
    success: bool = True
    message: str = "Logged out successfully"


class CreatedUser(BaseModel):
    username: str


class SetupResponse(BaseModel):
    success: bool = True
    message: str = "Admin user created successfully"
    user: CreatedUser


class SetupStatusResponse(BaseModel):
    has_admin_user: bool
    admin_count: int

    model_config = {"alias_generator": to_camel, "populate_by_name": True}
