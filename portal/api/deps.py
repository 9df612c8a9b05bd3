from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from portal.db.session import get_db
from portal.db.models import Member, Admin
from portal.core.security import decode_access_token
from portal.core.tiers import (
    has_access_to_section,
    get_restriction_message,
    get_upgrade_options,
)

bearer_scheme = HTTPBearer()


def decode_token(token: str) -> dict:
    payload = decode_access_token(token)
    if payload is None:
        raise HTTPException(status_code=401, detail="Invalid token")
    return payload


# =========================
# 👤 Member auth
# =========================
def get_current_member(
    creds: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Member:
    payload = decode_token(creds.credentials)

    # 🚫 Admin tokens not allowed
    if payload.get("type") != "member":
        raise HTTPException(status_code=403, detail="Member token required")

    member_id = payload.get("sub")
    if not member_id:
        raise HTTPException(status_code=401, detail="Invalid token")

    member = db.get(Member, int(member_id))
    if not member:
        raise HTTPException(status_code=401, detail="Member not found")

    if not member.is_active:
        raise HTTPException(status_code=403, detail="Member account is suspended")

    return member


# =========================
# 🔒 Admin auth
# =========================
def get_current_admin(
    creds: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Admin:
    payload = decode_token(creds.credentials)

    if payload.get("type") != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")

    admin_id = payload.get("sub")
    if not admin_id:
        raise HTTPException(status_code=401, detail="Invalid token")

    admin = db.get(Admin, int(admin_id))
    if not admin:
        raise HTTPException(status_code=401, detail="Admin not found")

    return admin


# =========================
# 🧱 Section enforcement
# =========================
def require_section(section_id: str):
    """
    Usage:
    dependencies=[Depends(require_section("events"))]
    """

    def _check_section(
        member: Member = Depends(get_current_member),
    ) -> Member:
        if not has_access_to_section(member.selected_tier, section_id):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={
                    "message": get_restriction_message(section_id, member.selected_tier),
                    "upgrade_options": [
                        t.value for t in get_upgrade_options(member.selected_tier)
                    ],
                },
            )

        return member

    return _check_section
