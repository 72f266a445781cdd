from typing import Optional

from fastapi import HTTPException, Header
from app.core.config import settings
from app.core.logger import logger

async def verify_webhook_secret(
    x_vapi_secret: Optional[str] = Header(None),
    x_webhook_secret: Optional[str] = Header(None),
):
    """
    Verify the shared secret sent by the voice platform.
    Vapi sends it as `x-vapi-secret`; other providers can be configured
    to send `x-webhook-secret`.
    """
    if not settings.WEBHOOK_SECRET:
        return True

    if settings.WEBHOOK_SECRET in (x_vapi_secret, x_webhook_secret):
        return True

    logger.warning("🚫 Webhook request rejected: invalid secret")
    raise HTTPException(status_code=403, detail="Invalid webhook secret")
