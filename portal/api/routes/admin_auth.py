from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from portal.db.session import get_db
from portal.db.models import Admin
from portal.core.security import verify_password, create_access_token
from portal.core.rate_limit import rate_limit, make_key
from portal.services.audit import log_action
from portal.schemas.admin_auth import AdminLogin
from portal.schemas.auth import TokenResponse
from portal.core.config import RATE_LIMITS

router = APIRouter(prefix="/admin/auth", tags=["Admin Auth"])

"""
ADMIN AUTH ROUTES => ADMIN-ONLY AUTHENTICATION

Provides email + password login for administrators with strict
IP-based rate limiting and full audit logging.
"""

#Authenticate an admin via email and password and issue an admin-scoped JWT
@router.post("/login", response_model=TokenResponse)
def admin_login(
    payload: AdminLogin,
    request: Request,
    db: Session = Depends(get_db),
):
    email = payload.email.strip().lower()

    limit, window = RATE_LIMITS["login"]
    if not rate_limit(make_key("admin_login", request, email), limit, window):
        raise HTTPException(status_code=429, detail="Too many login attempts")

    admin = (
        db.query(Admin)
        .filter(Admin.email == email)
        .first()
    )

    if not admin or not verify_password(payload.password, admin.hashed_password):
        log_action(
            db=db,
            actor_type="admin",
            actor_id=None,
            action="admin.login_failed",
            details=f"email={email}",
        )
        raise HTTPException(status_code=401, detail="Invalid credentials")

    log_action(
        db=db,
        actor_type="admin",
        actor_id=admin.id,
        action="admin.login_success",
    )

    return {
        "access_token": create_access_token(admin.id, token_type="admin"),
        "token_type": "bearer",
    }
