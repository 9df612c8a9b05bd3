from pydantic import BaseModel, Field, EmailStr
from typing import Optional

from portal.core.tiers import Tier

"""
ME ROUTE SCHEMA
"""


#Authenticated member profile returned by the /me endpoint
class MeOut(BaseModel):
    id: int
    name: str
    email: EmailStr
    agency_name: Optional[str] = None
    country: Optional[str] = None
    job_type: str
    tier: Tier
    is_active: bool


#Payload used to update profile details (tier changes are admin-only)
class UpdateMe(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    agency_name: Optional[str] = Field(default=None, max_length=200)
    country: Optional[str] = Field(default=None, max_length=100)


#Payload used when changing the account password
class ChangePassword(BaseModel):
    old_password: str
    new_password: str


class UpgradeOptionsOut(BaseModel):
    current_tier: Tier
    upgrade_options: list[Tier]
