import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List

from portal.db.session import get_db
from portal.db.models import Event, EventRegistration, Member
from portal.api.deps import get_current_member, require_section
from portal.core.tiers import (
    normalize_tier,
    has_tier_access_for_user,
    tier_restriction_message,
    get_upgrade_options,
)
from portal.schemas.content import RegisteredEventOut
from portal.services.audit import log_action
from portal.services.email import send_event_registration_email

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/events",
    tags=["Event"],
    dependencies=[Depends(require_section("events"))],
)


"""
EVENT REGISTRATION ROUTES

Registration is gated by the event's own tier restriction.
Confirmation email is non-critical.
"""


def _already_registered(db: Session, event_id: int, member_id: int) -> bool:
    return (
        db.query(EventRegistration.id)
        .filter(
            EventRegistration.event_id == event_id,
            EventRegistration.member_id == member_id,
        )
        .first()
        is not None
    )


#List the events the current member has registered for, newest registration first
@router.get("/registered", response_model=List[RegisteredEventOut])
def list_registered_events(
    db: Session = Depends(get_db),
    member: Member = Depends(get_current_member),
):
    registrations = (
        db.query(EventRegistration)
        .filter(EventRegistration.member_id == member.id)
        .order_by(EventRegistration.registered_at.desc(), EventRegistration.id.desc())
        .all()
    )

    return [
        {
            "registration_id": reg.id,
            "event_id": reg.event.id,
            "title": reg.event.title,
            "date": reg.event.date,
            "tier_restriction": normalize_tier(reg.event.tier_restriction).value,
            "status": reg.status,
            "registered_at": reg.registered_at,
        }
        for reg in registrations
    ]


#Register the current member for an event they have tier access to
@router.post("/{event_id}/register", status_code=201)
def register_for_event(
    event_id: int,
    db: Session = Depends(get_db),
    member: Member = Depends(get_current_member),
):
    event = db.get(Event, event_id)
    if not event:
        raise HTTPException(404, "Event not found")

    if not has_tier_access_for_user(event.tier_restriction, member):
        raise HTTPException(
            status_code=403,
            detail={
                "message": tier_restriction_message(event.tier_restriction),
                "upgrade_options": [
                    t.value for t in get_upgrade_options(member.selected_tier)
                ],
            },
        )

    if _already_registered(db, event.id, member.id):
        raise HTTPException(409, "You are already registered for this event")

    registration = EventRegistration(
        event_id=event.id,
        member_id=member.id,
        status="pending",
    )
    db.add(registration)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(409, "You are already registered for this event")
    db.refresh(registration)

    log_action(
        db=db,
        actor_type="member",
        actor_id=member.id,
        action="event.registered",
        details=f"event_id={event.id}",
    )

    try:
        send_event_registration_email(
            user_email=member.email,
            member_name=member.name,
            event_title=event.title,
            event_date=event.date,
        )
    except RuntimeError as e:
        logger.warning("Registration email failed (non-critical): %s", e)

    return {"registration_id": registration.id, "status": registration.status}
