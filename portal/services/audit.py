import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from portal.db.models import AuditLog

logger = logging.getLogger(__name__)


#Persist a single audit log entry without interrupting the main request flow
def log_action(
    db: Session,
    actor_type: str,
    actor_id: int | None,
    action: str,
    details: str | None = None,
):
    try:
        log = AuditLog(
            actor_type=actor_type,
            actor_id=actor_id,
            action=action,
            details=details,
        )
        db.add(log)
        db.commit()

    except SQLAlchemyError:
        #Never allow audit logging failures to break application logic
        db.rollback()
        logger.exception("Failed to write audit log for %s", action)
