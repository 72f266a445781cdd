from datetime import date
from typing import Optional, Sequence

from openai import AsyncOpenAI

from app.core.logger import logger
from app.services.availability import DoctorAvailability
from app.services.formatter import ResponseFormatter
from app.tools.definitions import vapi_tools

FIRST_MESSAGE = "Thank you for calling. This is Sarah, your dental clinic receptionist. How may I help you today?"


def build_system_prompt(today: Optional[date] = None) -> str:
    today = today or date.today()
    today_long = f"{today:%A}, {today:%B} {today.day}, {today.year}"
    return f"""You are Sarah, a warm and professional receptionist at a dental clinic. Today's date is {today_long}.

YOUR PERSONALITY:
- Friendly, calm, and proactive - YOU guide the conversation
- Keep responses SHORT - this is a phone call, 1 to 2 sentences max per turn

TOOL CALLS:
- When you call check_availability or book_appointment, say nothing while waiting for the result
- Only speak after the tool result comes back

CLINIC INFORMATION:
- Hours: Monday to Friday, 9:00 AM to 5:00 PM
- Services: General dentistry, cosmetic dentistry, orthodontics, teeth whitening, dental implants

BOOKING FLOW:
1. Ask which date works best.
2. Call check_availability with that date and read back the open slots.
3. Ask which doctor they prefer if not already mentioned, then ask for their name.
4. Confirm name, doctor, date and time, then call book_appointment.

DATE RULES:
- Today is {today.isoformat()}
- Always convert spoken dates to YYYY-MM-DD before calling tools
- Times are whole hours written like "10:00 AM" or "02:00 PM"

If asked about prices, suggest speaking with the team during the visit. For emergencies, offer the earliest available slot."""


def get_assistant_config(server_url: str) -> dict:
    """
    Returns the Vapi assistant configuration for `assistant-request` messages.
    """
    return {
        "name": "Sarah",
        "firstMessage": FIRST_MESSAGE,
        "model": {
            "provider": "openai",
            "model": "gpt-4o-mini",
            "messages": [
                {
                    "role": "system",
                    "content": build_system_prompt()
                }
            ],
            "tools": vapi_tools(server_url)
        },
        "voice": {"provider": "openai", "voiceId": "nova"},
        "silenceTimeoutSeconds": 30,
        "maxDurationSeconds": 600,
    }


AVAILABILITY_PERSONA = """You are a dental clinic receptionist speaking on the phone.
Convert the following availability information into a short, natural spoken response.
- Keep it under 2-3 sentences
- Sound warm and professional
- List times naturally (say "10 AM" not "10:00 AM")
- This will be spoken out loud, so no bullet points or special characters"""

CONFIRMATION_PERSONA = """You are a dental clinic receptionist confirming a booking on the phone.
Create a warm, professional confirmation.
Keep it to 2 sentences maximum. This is spoken out loud so keep it natural."""


class LLMFormatter:
    """
    Optional phrasing through OpenAI. Any failure falls back to the
    deterministic template, so correctness never depends on the model.
    """

    def __init__(self, fallback: ResponseFormatter, api_key: str, model: str = "gpt-4o-mini", client: Optional[AsyncOpenAI] = None):
        self.fallback = fallback
        self.model = model
        self.client = client or AsyncOpenAI(api_key=api_key)

    async def _complete(self, system: str, user: str, max_tokens: int) -> Optional[str]:
        completion = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            max_tokens=max_tokens,
            temperature=0.7,
        )
        content = completion.choices[0].message.content
        return content.strip() if content else None

    async def availability(self, results: Sequence[DoctorAvailability], date: str) -> str:
        template = self.fallback.availability(results, date)
        if not any(r.free_slots for r in results):
            return template

        spoken_date = self.fallback.format_date(date)
        data_text = "\n".join(
            f"{r.doctor} ({r.specialty}): available at {', '.join(r.free_slots)}"
            if r.free_slots else f"{r.doctor} ({r.specialty}): fully booked on this date"
            for r in results
        )
        try:
            text = await self._complete(AVAILABILITY_PERSONA, f"Date: {spoken_date}\n\nAvailability:\n{data_text}", 150)
        except Exception as e:
            logger.error(f"❌ OpenAI formatting error: {e}")
            return template
        return text or template

    async def confirmation(self, patient_name: str, doctor: str, date: str, time: str) -> str:
        template = self.fallback.confirmation(patient_name, doctor, date, time)
        user = (
            "Confirm this appointment:\n"
            f"Patient: {patient_name}\n"
            f"Doctor: {doctor}\n"
            f"Date: {self.fallback.format_date(date)}\n"
            f"Time: {time}"
        )
        try:
            text = await self._complete(CONFIRMATION_PERSONA, user, 100)
        except Exception as e:
            logger.error(f"❌ OpenAI confirmation error: {e}")
            return template
        return text or template
