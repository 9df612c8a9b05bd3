from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Literal

from portal.core.config import PASSWORD_REGEX

"""
AUTH ROUTE SCHEMA
"""


def _check_password(v: str) -> str:
    if not PASSWORD_REGEX.match(v):
        raise ValueError(
            "Password must be at least 8 characters long and include "
            "a number and a symbol"
        )
    return v


#Response returned after successful authentication containing the JWT
class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


#Payload used to create a new member account (always starts at Free Member)
class RegisterRequest(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    password: str
    confirm_password: str
    agency_name: str | None = Field(default=None, max_length=200)
    country: str | None = Field(default=None, max_length=100)
    job_type: Literal["agency", "freelancer"] = "agency"

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str):
        return _check_password(v)

    @field_validator("confirm_password")
    @classmethod
    def passwords_match(cls, v, info):
        if "password" in info.data and v != info.data["password"]:
            raise ValueError("Passwords do not match")
        return v


#Payload used by members and admins to log in with email and password
class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class PasswordResetRequest(BaseModel):
    email: EmailStr


#Payload used to set a new password with an emailed one-time code
class PasswordResetConfirmRequest(BaseModel):
    email: EmailStr
    code: str
    new_password: str

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, v: str):
        return _check_password(v)
