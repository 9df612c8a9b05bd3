from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session
from typing import Optional

from portal.db.session import get_db
from portal.db.models import Member
from portal.api.deps import get_current_member, require_section
from portal.api.content_types import ContentType, CONTENT_TYPES
from portal.core.tiers import accessible_tiers, get_upgrade_options, tier_restriction_message
from portal.schemas.content import ContentList
from portal.services.content import (
    classify,
    sort_by_access,
    filter_by_tier,
    access_stats,
    apply_filters,
    filter_facets,
    serialise,
)

"""
CONTENT ROUTES => ONE LIST + DETAIL ROUTER PER TIERED CONTENT TYPE

Restricted items are still listed (after every accessible item) but their
gated fields are blanked. Opening a restricted item returns 403 with the
restriction message and upgrade options.
"""


def build_content_router(ct: ContentType) -> APIRouter:
    router = APIRouter(
        prefix=ct.prefix,
        tags=[ct.label],
        dependencies=[Depends(require_section(ct.section))],
    )

    #List items with non-tier filters, an optional tier filter and facets from the unfiltered set
    @router.get("/", response_model=ContentList[ct.out_schema])
    def list_items(
        request: Request,
        tier: Optional[str] = Query(None),
        db: Session = Depends(get_db),
        member: Member = Depends(get_current_member),
    ):
        base = ct.visible(db.query(ct.model))

        filters = {name: request.query_params.get(name) for name in ct.filters}
        records = apply_filters(base, ct.model, filters).all()

        classified = classify(records, member.selected_tier)
        classified = sort_by_access(filter_by_tier(classified, tier))

        facets = filter_facets(base.all(), ct.facets)
        facets["accessible_tiers"] = [t.value for t in accessible_tiers(member.selected_tier)]

        return {
            "items": [serialise(item, ct.gated_fields) for item in classified],
            "facets": facets,
            "stats": access_stats(classified),
        }

    #Retrieve a single item, refusing restricted ones
    @router.get("/{item_id}", response_model=ct.out_schema)
    def get_item(
        item_id: int,
        db: Session = Depends(get_db),
        member: Member = Depends(get_current_member),
    ):
        record = db.get(ct.model, item_id)
        if not record:
            raise HTTPException(404, f"{ct.label} not found")

        item = classify([record], member.selected_tier)[0]

        if not item.is_accessible:
            raise HTTPException(
                status_code=403,
                detail={
                    "message": tier_restriction_message(item.tier),
                    "required_tier": item.tier.value,
                    "upgrade_options": [
                        t.value for t in get_upgrade_options(member.selected_tier)
                    ],
                },
            )

        return serialise(item, ct.gated_fields)

    return router


routers = [build_content_router(ct) for ct in CONTENT_TYPES.values()]
