import logging
import secrets
from datetime import datetime, timezone, timedelta

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from portal.db.session import get_db
from portal.db.models import Member
from portal.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    TokenResponse,
    PasswordResetRequest,
    PasswordResetConfirmRequest,
)
from portal.core.config import RATE_LIMITS
from portal.core.rate_limit import rate_limit, make_key
from portal.core.security import hash_password, verify_password, create_access_token
from portal.core.tiers import Tier
from portal.services.audit import log_action
from portal.services.email import send_password_reset_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _check_rate(endpoint: str, request: Request, identity: str = "") -> None:
    limit, window = RATE_LIMITS[endpoint]
    if not rate_limit(make_key(endpoint, request, identity), limit, window):
        raise HTTPException(status_code=429, detail="Too many requests")


# ===================================================================
# REGISTER
# ===================================================================
# - Every new member starts at Free Member
# - Tier upgrades happen out of band (admin / billing)
# ===================================================================
@router.post("/register", status_code=201)
def register(
    payload: RegisterRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    _check_rate("register", request)

    email = payload.email.lower().strip()

    if db.query(Member).filter(Member.email == email).first():
        raise HTTPException(
            status_code=400,
            detail="An account with this email already exists",
        )

    member = Member(
        name=payload.name.strip(),
        email=email,
        agency_name=payload.agency_name,
        country=payload.country,
        job_type=payload.job_type,
        selected_tier=Tier.FREE.value,
        hashed_password=hash_password(payload.password),
        is_active=True,
    )

    db.add(member)
    db.commit()
    db.refresh(member)

    log_action(
        db=db,
        actor_type="member",
        actor_id=member.id,
        action="member.registered",
    )

    return {"id": member.id, "tier": Tier.FREE.value}


# ===================================================================
# LOGIN
# ===================================================================
# - Enumeration-safe (generic error)
# - Clears any outstanding password reset state on success
# ===================================================================
@router.post("/login", response_model=TokenResponse)
def login(
    payload: LoginRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    email = payload.email.lower().strip()
    _check_rate("login", request, email)

    member = db.query(Member).filter(Member.email == email).first()

    # Generic error prevents user enumeration
    if not member or not verify_password(payload.password, member.hashed_password):
        raise HTTPException(status_code=400, detail="Invalid email or password")

    if not member.is_active:
        raise HTTPException(status_code=403, detail="Member account is suspended")

    if member.password_reset_code:
        member.password_reset_code = None
        member.password_reset_expires = None
        db.commit()

    return {
        "access_token": create_access_token(member.id),
        "token_type": "bearer",
    }


# ===================================================================
# REQUEST PASSWORD RESET
# ===================================================================
# - Enumeration-safe, always returns ok
# - Overwrites previous reset attempts
# ===================================================================
@router.post("/request-password-reset")
def request_password_reset(
    payload: PasswordResetRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    email = payload.email.lower().strip()
    _check_rate("request_password_reset", request, email)

    member = db.query(Member).filter(Member.email == email).first()
    if not member:
        return {"status": "ok"}

    member.password_reset_code = f"{secrets.randbelow(1_000_000):06d}"
    member.password_reset_expires = datetime.now(timezone.utc) + timedelta(minutes=10)
    db.commit()

    try:
        send_password_reset_email(
            user_email=member.email,
            code=member.password_reset_code,
        )
    except RuntimeError as e:
        logger.error("Password reset email failed for member %s: %s", member.id, e)

    return {"status": "ok"}


# ===================================================================
# RESET PASSWORD
# ===================================================================
# - Time-bound, one-time reset code
# - Clears reset state on success
# ===================================================================
@router.post("/reset-password")
def reset_password(
    payload: PasswordResetConfirmRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    email = payload.email.lower().strip()
    _check_rate("reset_password", request, email)

    member = db.query(Member).filter(Member.email == email).first()
    if not member or not member.password_reset_expires:
        raise HTTPException(status_code=400, detail="Invalid or expired reset code")

    expires = member.password_reset_expires

    # Defensive timezone normalisation (SQLite safety)
    if expires.tzinfo is None:
        expires = expires.replace(tzinfo=timezone.utc)

    if (
        member.password_reset_code != payload.code.strip()
        or datetime.now(timezone.utc) > expires
    ):
        raise HTTPException(status_code=400, detail="Invalid or expired reset code")

    member.hashed_password = hash_password(payload.new_password)
    member.password_reset_code = None
    member.password_reset_expires = None
    db.commit()

    log_action(
        db=db,
        actor_type="member",
        actor_id=member.id,
        action="member.password_reset",
    )

    return {"status": "ok"}
