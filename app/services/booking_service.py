from typing import Optional

from app.core.errors import InvalidDate, MissingArgument, RosterUnavailable
from app.core.logger import logger
from app.services.availability import ensure_slot_free, filter_doctors, resolve_availability
from app.services.db_service import SlotStoreClient
from app.services.formatter import ResponseFormatter, parse_date
from app.services.llm_service import LLMFormatter


def _clean(value) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


class BookingService:
    """
    The two tool operations. Error outcomes are raised as ReceptionistError
    subclasses and rendered by the dispatcher.
    """

    def __init__(self, store: SlotStoreClient, formatter: ResponseFormatter, llm: Optional[LLMFormatter] = None):
        self.store = store
        self.formatter = formatter
        self.llm = llm

    def _validate_date(self, operation: str, value: str) -> str:
        try:
            return parse_date(value).isoformat()
        except ValueError:
            logger.warning(f"⚠️ Unparseable date for {operation}: {value!r}")
            raise InvalidDate(operation, value)

    async def check_availability(self, date: Optional[str], doctor: Optional[str] = None) -> str:
        date, doctor = _clean(date), _clean(doctor)
        if not date:
            raise MissingArgument("check_availability", ["date"])
        date = self._validate_date("check_availability", date)

        roster = await self.store.list_doctors()
        if not roster:
            raise RosterUnavailable("Doctor roster is empty")

        # An unknown doctor is reported before appointments are read
        candidates = filter_doctors(roster, doctor)
        appointments = await self.store.list_appointments(date)
        results = resolve_availability(candidates, appointments)

        logger.info(f"🗓️ Availability on {date}: " + ", ".join(f"{r.doctor}={len(r.free_slots)}" for r in results))

        if self.llm:
            return await self.llm.availability(results, date)
        return self.formatter.availability(results, date)

    async def book_appointment(
        self,
        patient_name: Optional[str],
        doctor: Optional[str],
        date: Optional[str],
        time: Optional[str],
        patient_phone: Optional[str] = None,
    ) -> str:
        patient_name, doctor, date, time = _clean(patient_name), _clean(doctor), _clean(date), _clean(time)
        patient_phone = _clean(patient_phone)

        missing = [
            field for field, value in
            (("patient_name", patient_name), ("doctor", doctor), ("date", date), ("time", time))
            if not value
        ]
        if missing:
            raise MissingArgument("book_appointment", missing)
        date = self._validate_date("book_appointment", date)

        logger.info(f"📥 Booking Request - {patient_name} with {doctor} on {date} at {time}")

        # Fresh read right before the insert; another caller can still slip in between
        appointments = await self.store.list_appointments(date)
        ensure_slot_free(doctor, date, time, appointments)

        await self.store.create_appointment(patient_name, patient_phone, doctor, date, time)

        if self.llm:
            return await self.llm.confirmation(patient_name, doctor, date, time)
        return self.formatter.confirmation(patient_name, doctor, date, time)
