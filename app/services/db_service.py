import asyncio
from typing import List, Optional

from postgrest.exceptions import APIError
from supabase import create_async_client, AsyncClient

from app.core.config import StoreConfig
from app.core.errors import SlotUnavailable, StoreUnavailable
from app.core.logger import logger
from app.models.db_models import Appointment, Doctor, PHONE_NOT_PROVIDED, STATUS_CONFIRMED

# Postgres unique_violation, raised when the optional slot index rejects an insert
UNIQUE_VIOLATION = "23505"


class SlotStoreClient:
    """
    Reads doctors and appointments from Supabase and inserts new appointments.

    No caching and no retries: every failure surfaces as StoreUnavailable.
    Pagination is drained here so callers always get the full result set.
    """

    def __init__(self, config: StoreConfig, client: Optional[AsyncClient] = None):
        self.config = config
        self._client = client
        self._client_lock = asyncio.Lock()

    async def get_client(self) -> AsyncClient:
        if self._client is not None:
            return self._client

        # One client per store, even when the first requests arrive together
        async with self._client_lock:
            if self._client is None:
                if not self.config.url or not self.config.key:
                    logger.error("❌ Supabase credentials missing")
                    raise StoreUnavailable("Supabase credentials are not configured")
                try:
                    self._client = await create_async_client(self.config.url, self.config.key)
                    logger.info("✅ Supabase Async client initialized")
                except Exception as e:
                    logger.error(f"❌ Failed to initialize Supabase Async: {e}")
                    raise StoreUnavailable(str(e)) from e
        return self._client

    async def _select_all(self, table: str, **filters) -> List[dict]:
        client = await self.get_client()
        page_size = self.config.page_size
        rows: List[dict] = []
        start = 0

        while True:
            query = client.table(table).select("*")
            for column, value in filters.items():
                query = query.eq(column, value)
            response = await query.order("id").range(start, start + page_size - 1).execute()

            page = response.data or []
            rows.extend(page)
            if len(page) < page_size:
                return rows
            start += page_size

    async def list_doctors(self) -> List[Doctor]:
        try:
            records = await self._select_all(self.config.doctors_table)
        except StoreUnavailable:
            raise
        except Exception as e:
            logger.error(f"❌ DB Error (list_doctors): {e}")
            raise StoreUnavailable(str(e)) from e

        doctors = [Doctor.from_record(r) for r in records]
        logger.info(f"📋 Found {len(doctors)} doctors in Supabase")
        return doctors

    async def list_appointments(self, date: str) -> List[Appointment]:
        """All appointments whose date is exactly `date` (YYYY-MM-DD)."""
        try:
            records = await self._select_all(self.config.appointments_table, date=date)
        except StoreUnavailable:
            raise
        except Exception as e:
            logger.error(f"❌ DB Error (list_appointments {date}): {e}")
            raise StoreUnavailable(str(e)) from e

        appointments = [Appointment.from_record(r) for r in records]
        logger.info(f"📅 Found {len(appointments)} existing appointments on {date}")
        return appointments

    async def create_appointment(
        self,
        patient_name: str,
        patient_phone: Optional[str],
        doctor: str,
        date: str,
        time: str,
    ) -> Appointment:
        """
        Unconditional insert. Without the unique slot index from
        supabase/schema.sql the store accepts duplicates.
        """
        client = await self.get_client()
        record = {
            "patient_name": patient_name,
            "patient_phone": patient_phone or PHONE_NOT_PROVIDED,
            "doctor": doctor,
            "date": date,
            "time": time,
            "status": STATUS_CONFIRMED,
        }

        try:
            response = await client.table(self.config.appointments_table).insert(record).execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                logger.warning(f"⚠️ Store rejected duplicate slot: {doctor} {date} {time}")
                raise SlotUnavailable(doctor, date, time) from e
            logger.error(f"❌ DB Error (create_appointment): {e}")
            raise StoreUnavailable(str(e)) from e
        except Exception as e:
            logger.error(f"❌ DB Error (create_appointment): {e}")
            raise StoreUnavailable(str(e)) from e

        created = response.data[0] if response.data else record
        appointment = Appointment.from_record(created)
        logger.info(f"✅ Appointment booked! Record ID: {appointment.id}")
        return appointment
