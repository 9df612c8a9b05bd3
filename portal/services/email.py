import logging
from datetime import datetime, timezone
from typing import Any

import sib_api_v3_sdk
from sib_api_v3_sdk.rest import ApiException

from portal.core.config import settings, EMAIL_TEMPLATES

logger = logging.getLogger(__name__)


# -------------------------------------------------------------------
# Brevo client setup (skipped when no API key is configured)
# -------------------------------------------------------------------
_brevo = None

if settings.BREVO_API_KEY:
    _config = sib_api_v3_sdk.Configuration()
    _config.api_key["api-key"] = settings.BREVO_API_KEY
    _brevo = sib_api_v3_sdk.TransactionalEmailsApi(sib_api_v3_sdk.ApiClient(_config))
else:
    logger.warning("BREVO_API_KEY is not set; transactional email is disabled")


# -------------------------------------------------------------------
# Internal helper (ONLY place that talks to Brevo)
# -------------------------------------------------------------------
def _send_email(*, to: str, template_id: int, params: dict[str, Any]) -> None:
    """
    Internal helper for sending Brevo transactional emails.
    Raises RuntimeError on failure.
    """
    if _brevo is None:
        logger.info("Email disabled, not sending template %s to %s", template_id, to)
        return

    try:
        email = sib_api_v3_sdk.SendSmtpEmail(
            to=[{"email": to}],
            template_id=template_id,
            params=params,
        )
        _brevo.send_transac_email(email)
        logger.info("Sent template %s to %s", template_id, to)

    except ApiException as e:
        logger.error("Brevo rejected template %s for %s: %s", template_id, to, e)
        raise RuntimeError(
            f"Brevo email failed (template {template_id}): {e}"
        ) from e


# -------------------------------------------------------------------
# Public API
# -------------------------------------------------------------------
def send_password_reset_email(*, user_email: str, code: str) -> None:
    _send_email(
        to=user_email,
        template_id=EMAIL_TEMPLATES["password_reset"],
        params={
            "RESET_CODE": code,
            "DATE": datetime.now(timezone.utc).strftime("%d %B %Y"),
        },
    )


def send_event_registration_email(
    *,
    user_email: str,
    member_name: str,
    event_title: str,
    event_date: datetime,
) -> None:
    _send_email(
        to=user_email,
        template_id=EMAIL_TEMPLATES["event_registration"],
        params={
            "MEMBER_NAME": member_name,
            "EVENT_TITLE": event_title,
            "FORMATTED_DATE": event_date.strftime("%A, %d %B %Y"),
            "FORMATTED_TIME": event_date.strftime("%H:%M"),
        },
    )
