from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List

from portal.db.session import get_db
from portal.db.models import Admin, Member
from portal.api.deps import get_current_admin
from portal.api.content_types import ContentType, CONTENT_TYPES
from portal.core.tiers import parse_tier, database_tier
from portal.schemas.members import MemberOut, MemberTierUpdate
from portal.services.audit import log_action
from portal.services.content import classify, serialise


# 🔒 ALL endpoints in this router are ADMIN-ONLY
router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(get_current_admin)],
)


"""
ADMIN ROUTES => MEMBER TIERS AND CONTENT CRUD

Tier labels written by admins are stored in their labelled database form
("Gold Member (Tier 4)") and normalised again on every read.
"""


def _stored_tier(raw: str | None) -> str | None:
    if not raw:
        return None
    return database_tier(raw)


#Content is returned as an admin would see it: everything accessible
def _admin_view(ct: ContentType, record) -> dict:
    item = classify([record], "Gold Member")[0]
    return serialise(item, ct.gated_fields)


@router.get("/members", response_model=List[MemberOut])
def list_members(
    db: Session = Depends(get_db),
):
    return db.query(Member).order_by(Member.id).all()


#Change a member's tier; only known labels are accepted and stored by canonical name
@router.patch("/members/{member_id}/tier", response_model=MemberOut)
def update_member_tier(
    member_id: int,
    payload: MemberTierUpdate,
    db: Session = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    member = db.get(Member, member_id)
    if not member:
        raise HTTPException(status_code=404, detail="Member not found")

    tier = parse_tier(payload.tier)
    if tier is None:
        raise HTTPException(status_code=400, detail=f"Unknown tier: {payload.tier}")

    previous = member.selected_tier
    member.selected_tier = tier.value
    db.commit()
    db.refresh(member)

    log_action(
        db=db,
        actor_type="admin",
        actor_id=admin.id,
        action="member.tier_changed",
        details=f"member_id={member.id},from={previous},to={member.selected_tier}",
    )

    return member


def _register_content_routes(ct: ContentType) -> None:
    name = ct.prefix.strip("/")

    @router.post(
        f"{ct.prefix}",
        response_model=ct.out_schema,
        status_code=201,
        name=f"create_{name}",
    )
    def create_item(
        payload: ct.in_schema,
        db: Session = Depends(get_db),
        admin: Admin = Depends(get_current_admin),
    ):
        data = payload.model_dump()
        data["tier_restriction"] = _stored_tier(data.get("tier_restriction"))

        record = ct.model(**data)
        db.add(record)
        db.commit()
        db.refresh(record)

        log_action(
            db=db,
            actor_type="admin",
            actor_id=admin.id,
            action=f"{name}.created",
            details=f"id={record.id}",
        )

        return _admin_view(ct, record)

    @router.patch(
        f"{ct.prefix}/{{item_id}}",
        response_model=ct.out_schema,
        name=f"update_{name}",
    )
    def update_item(
        item_id: int,
        payload: ct.patch_schema,
        db: Session = Depends(get_db),
        admin: Admin = Depends(get_current_admin),
    ):
        record = db.get(ct.model, item_id)
        if not record:
            raise HTTPException(404, f"{ct.label} not found")

        update_data = payload.model_dump(exclude_unset=True)
        if "tier_restriction" in update_data:
            update_data["tier_restriction"] = _stored_tier(update_data["tier_restriction"])

        for field, value in update_data.items():
            setattr(record, field, value)

        db.commit()
        db.refresh(record)

        log_action(
            db=db,
            actor_type="admin",
            actor_id=admin.id,
            action=f"{name}.updated",
            details=f"id={record.id}",
        )

        return _admin_view(ct, record)

    @router.delete(
        f"{ct.prefix}/{{item_id}}",
        name=f"delete_{name}",
    )
    def delete_item(
        item_id: int,
        db: Session = Depends(get_db),
        admin: Admin = Depends(get_current_admin),
    ):
        record = db.get(ct.model, item_id)
        if not record:
            raise HTTPException(404, f"{ct.label} not found")

        db.delete(record)
        db.commit()

        log_action(
            db=db,
            actor_type="admin",
            actor_id=admin.id,
            action=f"{name}.deleted",
            details=f"id={item_id}",
        )

        return {"success": True}


for _ct in CONTENT_TYPES.values():
    _register_content_routes(_ct)
