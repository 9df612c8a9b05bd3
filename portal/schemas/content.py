from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Any, Generic, Optional, TypeVar

"""
TIERED CONTENT ROUTE SCHEMA

Every *Out model is produced from a classified record: tier_restriction is
the canonical tier name and gated fields are None when is_accessible is False.
"""


#Fields every tiered content item exposes
class TieredItemOut(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    tier_restriction: str
    is_accessible: bool
    restriction_message: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


#Fields every tiered content payload accepts
class TieredItemIn(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    description: Optional[str] = None
    tier_restriction: Optional[str] = Field(default=None, max_length=100)


#Partial update shared by all content types
class TieredItemPatch(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=300)
    description: Optional[str] = None
    tier_restriction: Optional[str] = Field(default=None, max_length=100)


# =========================================================
# OPPORTUNITIES
# =========================================================


class OpportunityOut(TieredItemOut):
    location: Optional[str] = None
    service_type: Optional[str] = None
    industry: Optional[str] = None
    project_type: Optional[str] = None
    budget: Optional[str] = None
    deadline: Optional[date] = None
    application_link: Optional[str] = None


class OpportunityIn(TieredItemIn):
    location: Optional[str] = None
    service_type: Optional[str] = None
    industry: Optional[str] = None
    project_type: Optional[str] = None
    budget: Optional[str] = None
    deadline: Optional[date] = None
    application_link: Optional[str] = None


class OpportunityPatch(TieredItemPatch):
    location: Optional[str] = None
    service_type: Optional[str] = None
    industry: Optional[str] = None
    project_type: Optional[str] = None
    budget: Optional[str] = None
    deadline: Optional[date] = None
    application_link: Optional[str] = None


# =========================================================
# EVENTS
# =========================================================


class EventOut(TieredItemOut):
    event_type: Optional[str] = None
    date: datetime
    location: Optional[str] = None
    is_virtual: bool = False
    registration_link: Optional[str] = None


class EventIn(TieredItemIn):
    event_type: Optional[str] = None
    date: datetime
    location: Optional[str] = None
    is_virtual: bool = False
    registration_link: Optional[str] = None


class EventPatch(TieredItemPatch):
    event_type: Optional[str] = None
    date: Optional[datetime] = None
    location: Optional[str] = None
    is_virtual: Optional[bool] = None
    registration_link: Optional[str] = None


#An event the current member has registered for
class RegisteredEventOut(BaseModel):
    registration_id: int
    event_id: int
    title: str
    date: datetime
    tier_restriction: str
    status: str
    registered_at: Optional[datetime] = None


# =========================================================
# RESOURCES
# =========================================================


class ResourceOut(TieredItemOut):
    resource_type: Optional[str] = None
    url: Optional[str] = None
    file_path: Optional[str] = None
    video_url: Optional[str] = None


class ResourceIn(TieredItemIn):
    resource_type: Optional[str] = None
    url: Optional[str] = None
    file_path: Optional[str] = None
    video_url: Optional[str] = None


class ResourcePatch(TieredItemPatch):
    resource_type: Optional[str] = None
    url: Optional[str] = None
    file_path: Optional[str] = None
    video_url: Optional[str] = None


# =========================================================
# MARKET INTEL
# =========================================================


class MarketIntelOut(TieredItemOut):
    region: Optional[str] = None
    type: Optional[str] = None
    url: Optional[str] = None
    icon_url: Optional[str] = None
    downloadable: bool = False
    chart_data: Optional[Any] = None


class MarketIntelIn(TieredItemIn):
    region: Optional[str] = None
    type: Optional[str] = None
    url: Optional[str] = None
    icon_url: Optional[str] = None
    downloadable: bool = False
    chart_data: Optional[Any] = None


class MarketIntelPatch(TieredItemPatch):
    region: Optional[str] = None
    type: Optional[str] = None
    url: Optional[str] = None
    icon_url: Optional[str] = None
    downloadable: Optional[bool] = None
    chart_data: Optional[Any] = None


# =========================================================
# OFFERS
# =========================================================


class OfferOut(TieredItemOut):
    url: Optional[str] = None
    icon_url: Optional[str] = None


class OfferIn(TieredItemIn):
    url: Optional[str] = None
    icon_url: Optional[str] = None


class OfferPatch(TieredItemPatch):
    url: Optional[str] = None
    icon_url: Optional[str] = None


# =========================================================
# UPDATES
# =========================================================


class UpdateOut(TieredItemOut):
    category: Optional[str] = None
    cta_text: Optional[str] = None
    cta_url: Optional[str] = None
    tags: list[str] = []


class UpdateIn(TieredItemIn):
    category: Optional[str] = None
    cta_text: Optional[str] = None
    cta_url: Optional[str] = None
    tags: list[str] = []


class UpdatePatch(TieredItemPatch):
    category: Optional[str] = None
    cta_text: Optional[str] = None
    cta_url: Optional[str] = None
    tags: Optional[list[str]] = None


# =========================================================
# ACCESS HUBS
# =========================================================


class AccessHubOut(TieredItemOut):
    space_type: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    is_available: bool = True
    capacity: Optional[int] = None
    pricing_per_day: Optional[float] = None
    amenities: list[str] = []
    booking_link: Optional[str] = None


class AccessHubIn(TieredItemIn):
    space_type: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    is_available: bool = True
    capacity: Optional[int] = Field(default=None, ge=0)
    pricing_per_day: Optional[float] = Field(default=None, ge=0)
    amenities: list[str] = []
    booking_link: Optional[str] = None


class AccessHubPatch(TieredItemPatch):
    space_type: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    is_available: Optional[bool] = None
    capacity: Optional[int] = Field(default=None, ge=0)
    pricing_per_day: Optional[float] = Field(default=None, ge=0)
    amenities: Optional[list[str]] = None
    booking_link: Optional[str] = None


#An access hub the current member has asked to use
class RegisteredAccessHubOut(BaseModel):
    registration_id: int
    access_hub_id: int
    title: str
    space_type: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    tier_restriction: str
    status: str
    registered_at: Optional[datetime] = None


# =========================================================
# LIST ENVELOPE
# =========================================================


ItemT = TypeVar("ItemT", bound=TieredItemOut)


class AccessStatsOut(BaseModel):
    total: int
    accessible: int
    restricted: int


#Classified items plus the filter facets and access counts for the unfiltered set
class ContentList(BaseModel, Generic[ItemT]):
    items: list[ItemT]
    facets: dict[str, list[str]]
    stats: AccessStatsOut
