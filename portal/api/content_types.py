from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Callable

from pydantic import BaseModel
from sqlalchemy import or_
from sqlalchemy.orm import Query

from portal.db.models import Opportunity, Event, Resource, MarketIntel, Offer, Update, AccessHub
from portal.schemas import content as schemas


def _all(query: Query) -> Query:
    return query


def _open_opportunities(query: Query) -> Query:
    today = date.today()
    return query.filter(or_(Opportunity.deadline.is_(None), Opportunity.deadline >= today))


def _upcoming_events(query: Query) -> Query:
    return query.filter(Event.date >= datetime.now(timezone.utc))


#Everything a tiered content route needs to know about one table
@dataclass(frozen=True)
class ContentType:
    section: str
    prefix: str
    label: str
    model: type
    out_schema: type[BaseModel]
    in_schema: type[BaseModel]
    patch_schema: type[BaseModel]
    filters: tuple[str, ...] = ()
    facets: tuple[str, ...] = ("tier_restriction",)
    gated_fields: tuple[str, ...] = ()
    visible: Callable[[Query], Query] = field(default=_all)


CONTENT_TYPES: dict[str, ContentType] = {
    "opportunities": ContentType(
        section="opportunities",
        prefix="/opportunities",
        label="Opportunity",
        model=Opportunity,
        out_schema=schemas.OpportunityOut,
        in_schema=schemas.OpportunityIn,
        patch_schema=schemas.OpportunityPatch,
        filters=("location", "service_type", "industry", "project_type"),
        facets=("location", "service_type", "industry", "project_type", "tier_restriction"),
        gated_fields=("application_link", "budget"),
        visible=_open_opportunities,
    ),
    "events": ContentType(
        section="events",
        prefix="/events",
        label="Event",
        model=Event,
        out_schema=schemas.EventOut,
        in_schema=schemas.EventIn,
        patch_schema=schemas.EventPatch,
        filters=("event_type",),
        facets=("event_type", "tier_restriction"),
        gated_fields=("registration_link",),
        visible=_upcoming_events,
    ),
    "resources": ContentType(
        section="resources",
        prefix="/resources",
        label="Resource",
        model=Resource,
        out_schema=schemas.ResourceOut,
        in_schema=schemas.ResourceIn,
        patch_schema=schemas.ResourcePatch,
        filters=("resource_type",),
        facets=("resource_type", "tier_restriction"),
        gated_fields=("url", "file_path", "video_url"),
    ),
    "marketIntel": ContentType(
        section="marketIntel",
        prefix="/market-intel",
        label="Market intel entry",
        model=MarketIntel,
        out_schema=schemas.MarketIntelOut,
        in_schema=schemas.MarketIntelIn,
        patch_schema=schemas.MarketIntelPatch,
        filters=("region", "type"),
        facets=("region", "type", "tier_restriction"),
        gated_fields=("url", "chart_data"),
    ),
    "offers": ContentType(
        section="offers",
        prefix="/offers",
        label="Offer",
        model=Offer,
        out_schema=schemas.OfferOut,
        in_schema=schemas.OfferIn,
        patch_schema=schemas.OfferPatch,
        gated_fields=("url",),
    ),
    "updates": ContentType(
        section="updates",
        prefix="/updates",
        label="Update",
        model=Update,
        out_schema=schemas.UpdateOut,
        in_schema=schemas.UpdateIn,
        patch_schema=schemas.UpdatePatch,
        filters=("category",),
        facets=("category", "tier_restriction"),
        gated_fields=("cta_url",),
    ),
    "accessHubs": ContentType(
        section="accessHubs",
        prefix="/access-hubs",
        label="Access hub",
        model=AccessHub,
        out_schema=schemas.AccessHubOut,
        in_schema=schemas.AccessHubIn,
        patch_schema=schemas.AccessHubPatch,
        filters=("space_type", "city", "country"),
        facets=("space_type", "city", "country", "tier_restriction"),
        gated_fields=("pricing_per_day", "booking_link"),
    ),
}
