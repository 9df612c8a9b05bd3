from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from portal.api.deps import get_current_member
from portal.db.session import get_db
from portal.db.models import Member
from portal.core.config import PASSWORD_REGEX
from portal.core.security import verify_password, hash_password
from portal.core.tiers import normalize_tier, get_upgrade_options
from portal.schemas.me import MeOut, UpdateMe, ChangePassword, UpgradeOptionsOut

router = APIRouter(
    prefix="/me",
    tags=["Me"],
)


def _me(member: Member) -> dict:
    return {
        "id": member.id,
        "name": member.name,
        "email": member.email,
        "agency_name": member.agency_name,
        "country": member.country,
        "job_type": member.job_type,
        "tier": normalize_tier(member.selected_tier),
        "is_active": member.is_active,
    }


# -------------------------------------------------------------------
# GET /me
# - identity endpoint, tier is always the canonical name
# -------------------------------------------------------------------
@router.get("/", response_model=MeOut)
def get_me(
    member: Member = Depends(get_current_member),
):
    return _me(member)


# -------------------------------------------------------------------
# PATCH /me
# - profile fields only, tier is not writable here
# -------------------------------------------------------------------
@router.patch("/", response_model=MeOut)
def update_me(
    payload: UpdateMe,
    db: Session = Depends(get_db),
    member: Member = Depends(get_current_member),
):
    update_data = payload.model_dump(exclude_unset=True)

    for field, value in update_data.items():
        if isinstance(value, str):
            value = value.strip()
        setattr(member, field, value)

    db.commit()
    db.refresh(member)

    return _me(member)


# -------------------------------------------------------------------
# POST /me/change-password
# - must know current password
# -------------------------------------------------------------------
@router.post("/change-password")
def change_password(
    payload: ChangePassword,
    db: Session = Depends(get_db),
    member: Member = Depends(get_current_member),
):
    if not verify_password(payload.old_password, member.hashed_password):
        raise HTTPException(
            status_code=400,
            detail="Invalid credentials",
        )

    if not PASSWORD_REGEX.match(payload.new_password):
        raise HTTPException(
            status_code=400,
            detail="Password must be at least 8 characters long and include a number and a symbol",
        )

    member.hashed_password = hash_password(payload.new_password)
    db.commit()

    return {"status": "ok"}


# -------------------------------------------------------------------
# GET /me/upgrade-options
# - tiers above the member's current one, ascending
# -------------------------------------------------------------------
@router.get("/upgrade-options", response_model=UpgradeOptionsOut)
def upgrade_options(
    member: Member = Depends(get_current_member),
):
    return {
        "current_tier": normalize_tier(member.selected_tier),
        "upgrade_options": get_upgrade_options(member.selected_tier),
    }
