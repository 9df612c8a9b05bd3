from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from typing import Optional

"""
MEMBERS (ADMIN) ROUTE SCHEMA
"""


#Member record as shown on admin dashboards; tier is the raw stored label
class MemberOut(BaseModel):
    id: int
    name: str
    email: EmailStr
    selected_tier: str
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


#Payload used by admins to change a member's tier; any raw label is accepted and normalised
class MemberTierUpdate(BaseModel):
    tier: str = Field(min_length=1, max_length=100)
