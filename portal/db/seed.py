import logging

from sqlalchemy.orm import Session

from portal.db.models import Admin
from portal.core.config import settings
from portal.core.security import hash_password

logger = logging.getLogger(__name__)


#Create the initial admin account from settings when none exists
def seed_admin(db: Session):
    existing = db.query(Admin).first()
    if existing:
        return

    admin = Admin(
        email=settings.ADMIN_EMAIL.strip().lower(),
        hashed_password=hash_password(settings.ADMIN_PASSWORD),
    )

    db.add(admin)
    db.commit()

    logger.info("Seeded admin account %s", admin.email)
