from pydantic import BaseModel

from portal.core.tiers import Tier

"""
DASHBOARD ROUTE SCHEMA
"""


class SectionOut(BaseModel):
    id: str
    name: str
    isRestricted: bool = False
    restriction_message: str | None = None


class SectionsOut(BaseModel):
    tier: Tier
    accessible: list[SectionOut]
    restricted: list[SectionOut]
    upgrade_options: list[Tier]


class AccessStats(BaseModel):
    total: int
    accessible: int
    restricted: int


class DashboardStatsOut(BaseModel):
    tier: Tier
    sections: dict[str, AccessStats]
