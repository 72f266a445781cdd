from typing import List, Optional

import pytest

from app.core.errors import StoreUnavailable
from app.models.db_models import Appointment, Doctor, STATUS_CONFIRMED
from app.services.booking_service import BookingService
from app.services.formatter import ResponseFormatter

DATE = "2026-03-02"  # a Monday


class FakeSlotStore:
    """In-memory stand-in for SlotStoreClient."""

    def __init__(self, doctors: List[Doctor], appointments: List[Appointment]):
        self.doctors = doctors
        self.appointments = appointments
        self.fail = False
        self.appointment_reads = 0

    async def list_doctors(self) -> List[Doctor]:
        if self.fail:
            raise StoreUnavailable("store down")
        return list(self.doctors)

    async def list_appointments(self, date: str) -> List[Appointment]:
        if self.fail:
            raise StoreUnavailable("store down")
        self.appointment_reads += 1
        return [a for a in self.appointments if a.date == date]

    async def create_appointment(self, patient_name: str, patient_phone: Optional[str], doctor: str, date: str, time: str) -> Appointment:
        if self.fail:
            raise StoreUnavailable("store down")
        appt = Appointment(
            id=str(len(self.appointments) + 1),
            patient_name=patient_name,
            patient_phone=patient_phone or "Not provided",
            doctor=doctor,
            date=date,
            time=time,
            status=STATUS_CONFIRMED,
        )
        self.appointments.append(appt)
        return appt


@pytest.fixture
def roster():
    return [
        Doctor(name="Dr. Ahmed Khan", specialty="General Dentistry"),
        Doctor(name="Dr. Sara Malik", specialty="Cosmetic Dentistry"),
    ]


@pytest.fixture
def store(roster):
    return FakeSlotStore(
        roster,
        [Appointment(patient_name="John", doctor="Dr. Ahmed Khan", date=DATE, time="10:00 AM", status="Confirmed")],
    )


@pytest.fixture
def formatter():
    return ResponseFormatter(date_style="short")


@pytest.fixture
def booking_service(store, formatter):
    return BookingService(store, formatter)
