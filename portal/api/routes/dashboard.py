from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from portal.db.session import get_db
from portal.db.models import Member
from portal.api.deps import get_current_member
from portal.api.content_types import CONTENT_TYPES
from portal.core.tiers import (
    SECTION_NAMES,
    normalize_tier,
    get_ordered_sections,
    get_restriction_message,
    get_upgrade_options,
)
from portal.schemas.dashboard import SectionsOut, DashboardStatsOut
from portal.services.content import classify, access_stats

router = APIRouter(
    prefix="/dashboard",
    tags=["Dashboard"],
)


#Dashboard tabs in display order
DASHBOARD_SECTIONS = [
    {"id": section_id, "name": SECTION_NAMES.get(section_id, section_id)}
    for section_id in CONTENT_TYPES
]


#Split dashboard sections into accessible and restricted for the current member
@router.get("/sections", response_model=SectionsOut)
def get_sections(
    member: Member = Depends(get_current_member),
):
    ordered = get_ordered_sections(DASHBOARD_SECTIONS, member.selected_tier)

    restricted = [
        {
            **section,
            "restriction_message": get_restriction_message(
                section["id"], member.selected_tier
            ),
        }
        for section in ordered["restricted"]
    ]

    return {
        "tier": normalize_tier(member.selected_tier, allow_admin=True),
        "accessible": ordered["accessible"],
        "restricted": restricted,
        "upgrade_options": get_upgrade_options(member.selected_tier),
    }


#Accessible / restricted counts per content section
@router.get("/stats", response_model=DashboardStatsOut)
def get_stats(
    db: Session = Depends(get_db),
    member: Member = Depends(get_current_member),
):
    sections = {}
    for section_id, ct in CONTENT_TYPES.items():
        records = ct.visible(db.query(ct.model)).all()
        sections[section_id] = access_stats(classify(records, member.selected_tier))

    return {
        "tier": normalize_tier(member.selected_tier, allow_admin=True),
        "sections": sections,
    }
