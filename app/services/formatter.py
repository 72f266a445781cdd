"""
Deterministic speech templates.

Everything returned here is spoken verbatim by the voice assistant, so the
strings stay short and free of markup.
"""
from datetime import date as date_type
from datetime import datetime
from typing import Sequence, Union

from app.core.errors import (
    DoctorNotFound,
    InvalidDate,
    MissingArgument,
    ReceptionistError,
    RosterUnavailable,
    SlotUnavailable,
    StoreUnavailable,
    UnknownTool,
)
from app.services.availability import DoctorAvailability

MAX_SPOKEN_SLOTS = 5

TECHNICAL_ISSUE = "I apologize, there was a technical issue. Let me transfer you to our staff."
UNKNOWN_REQUEST = "I apologize, I could not process that request. Please try again."


def parse_date(value: str) -> date_type:
    """Parse an ISO calendar date; raises ValueError."""
    return datetime.strptime(value.strip(), "%Y-%m-%d").date()


class ResponseFormatter:
    def __init__(self, date_style: str = "short"):
        self.date_style = date_style

    def format_date(self, value: Union[str, date_type]) -> str:
        d = parse_date(value) if isinstance(value, str) else value
        text = f"{d:%A}, {d:%B} {d.day}"
        if self.date_style == "long":
            text += f", {d.year}"
        return text

    def _spoken_date(self, value: str) -> str:
        try:
            return self.format_date(value)
        except ValueError:
            return value

    def availability(self, results: Sequence[DoctorAvailability], date: str) -> str:
        spoken_date = self.format_date(date)
        available = [r for r in results if r.free_slots]
        if not available:
            return self.no_availability(date)

        parts = [f"{r.doctor} at {', '.join(r.free_slots[:MAX_SPOKEN_SLOTS])}" for r in available]
        return f"On {spoken_date} we have: {'. '.join(parts)}. Which time works best for you?"

    def no_availability(self, date: str) -> str:
        return (
            f"I'm sorry, there are no available slots on {self.format_date(date)}. "
            "Would you like to try a different date?"
        )

    def doctor_not_found(self, requested: str, roster_names: Sequence[str]) -> str:
        return (
            f"I'm sorry, I couldn't find a doctor named {requested}. "
            f"Our available doctors are: {', '.join(roster_names)}. "
            "Would you like to book with one of them?"
        )

    def confirmation(self, patient_name: str, doctor: str, date: str, time: str) -> str:
        return (
            f"Your appointment is confirmed! {patient_name}, you're booked with {doctor} "
            f"on {self.format_date(date)} at {time}. We look forward to seeing you!"
        )

    def slot_taken(self, doctor: str, date: str, time: str) -> str:
        return (
            f"I'm sorry, the {time} slot with {doctor} on {self._spoken_date(date)} was just taken. "
            "Would you like to choose a different time?"
        )

    def missing_argument(self, error: MissingArgument) -> str:
        if isinstance(error, InvalidDate):
            return (
                f"I'm sorry, I didn't catch the date \"{error.value}\". "
                "Could you tell me the date again, for example March 2nd?"
            )
        if error.operation == "check_availability":
            return "I need a date to check availability. Which date were you thinking?"
        return (
            "I need your name, preferred doctor, date, and time to book an appointment. "
            "Could you provide those details?"
        )

    def error(self, error: ReceptionistError) -> str:
        """Render any booking-flow error as a caller-safe sentence."""
        if isinstance(error, MissingArgument):
            return self.missing_argument(error)
        if isinstance(error, DoctorNotFound):
            return self.doctor_not_found(error.requested, error.roster_names)
        if isinstance(error, SlotUnavailable):
            return self.slot_taken(error.doctor, error.date, error.time)
        if isinstance(error, RosterUnavailable):
            return "I'm sorry, I could not retrieve our doctor list right now. Please call back in a moment."
        if isinstance(error, StoreUnavailable):
            return TECHNICAL_ISSUE
        if isinstance(error, UnknownTool):
            return UNKNOWN_REQUEST
        return TECHNICAL_ISSUE
