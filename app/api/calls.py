import asyncio

import requests
from fastapi import APIRouter, HTTPException

from app.core.config import settings
from app.core.logger import logger

router = APIRouter()


def create_web_call(agent_id: str) -> str:
    """Create a Retell web call and return its access token."""
    response = requests.post(
        f"{settings.RETELL_API_URL}/v2/create-web-call",
        json={"agent_id": agent_id},
        headers={"Authorization": f"Bearer {settings.RETELL_API_KEY}"},
        timeout=10,
    )
    response.raise_for_status()
    return response.json()["access_token"]


@router.post("/start-call")
async def start_call():
    """
    Used by the demo page: returns a token the browser uses to talk to Sarah.
    """
    if not settings.RETELL_API_KEY or not settings.RETELL_AGENT_ID:
        logger.error("❌ RETELL_API_KEY or RETELL_AGENT_ID missing")
        raise HTTPException(status_code=500, detail="Could not start call. Please try again.")

    try:
        token = await asyncio.to_thread(create_web_call, settings.RETELL_AGENT_ID)
    except (requests.RequestException, KeyError, ValueError) as e:
        logger.error(f"❌ Failed to create web call: {e}")
        raise HTTPException(status_code=500, detail="Could not start call. Please try again.")

    return {"accessToken": token}
