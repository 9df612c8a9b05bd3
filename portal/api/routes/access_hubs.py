from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List

from portal.db.session import get_db
from portal.db.models import AccessHub, AccessHubRegistration, Member
from portal.api.deps import get_current_member, require_section
from portal.core.tiers import (
    normalize_tier,
    has_tier_access_for_user,
    tier_restriction_message,
    get_upgrade_options,
)
from portal.schemas.content import RegisteredAccessHubOut
from portal.services.audit import log_action

router = APIRouter(
    prefix="/access-hubs",
    tags=["Access hub"],
    dependencies=[Depends(require_section("accessHubs"))],
)


"""
ACCESS HUB REGISTRATION ROUTES

Requests stay pending until an admin follows up with the member.
"""


def _already_registered(db: Session, hub_id: int, member_id: int) -> bool:
    return (
        db.query(AccessHubRegistration.id)
        .filter(
            AccessHubRegistration.access_hub_id == hub_id,
            AccessHubRegistration.member_id == member_id,
        )
        .first()
        is not None
    )


@router.get("/registered", response_model=List[RegisteredAccessHubOut])
def list_registered_hubs(
    db: Session = Depends(get_db),
    member: Member = Depends(get_current_member),
):
    registrations = (
        db.query(AccessHubRegistration)
        .filter(AccessHubRegistration.member_id == member.id)
        .order_by(AccessHubRegistration.registered_at.desc(), AccessHubRegistration.id.desc())
        .all()
    )

    return [
        {
            "registration_id": reg.id,
            "access_hub_id": reg.access_hub.id,
            "title": reg.access_hub.title,
            "space_type": reg.access_hub.space_type,
            "city": reg.access_hub.city,
            "country": reg.access_hub.country,
            "tier_restriction": normalize_tier(reg.access_hub.tier_restriction).value,
            "status": reg.status,
            "registered_at": reg.registered_at,
        }
        for reg in registrations
    ]


#Ask to use an access hub the member's tier covers
@router.post("/{hub_id}/register", status_code=201)
def register_for_hub(
    hub_id: int,
    db: Session = Depends(get_db),
    member: Member = Depends(get_current_member),
):
    hub = db.get(AccessHub, hub_id)
    if not hub:
        raise HTTPException(404, "Access hub not found")

    if not has_tier_access_for_user(hub.tier_restriction, member):
        raise HTTPException(
            status_code=403,
            detail={
                "message": tier_restriction_message(hub.tier_restriction),
                "upgrade_options": [
                    t.value for t in get_upgrade_options(member.selected_tier)
                ],
            },
        )

    if _already_registered(db, hub.id, member.id):
        raise HTTPException(409, "You are already registered for this access hub")

    registration = AccessHubRegistration(
        access_hub_id=hub.id,
        member_id=member.id,
        status="pending",
    )
    db.add(registration)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(409, "You are already registered for this access hub")
    db.refresh(registration)

    log_action(
        db=db,
        actor_type="member",
        actor_id=member.id,
        action="access_hub.registered",
        details=f"access_hub_id={hub.id}",
    )

    return {"registration_id": registration.id, "status": registration.status}
