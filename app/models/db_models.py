from typing import Optional
from pydantic import BaseModel, Field

# Bookable hourly labels, 9 AM to 5 PM. Fixed business rule, not derived from doctor hours.
TIME_SLOTS = [
    "09:00 AM", "10:00 AM", "11:00 AM",
    "12:00 PM", "01:00 PM", "02:00 PM",
    "03:00 PM", "04:00 PM", "05:00 PM",
]

PHONE_NOT_PROVIDED = "Not provided"

STATUS_CONFIRMED = "Confirmed"
STATUS_CANCELLED = "Cancelled"


class Doctor(BaseModel):
    id: Optional[str] = None
    name: str = "Unknown"
    specialty: str = "General Dentistry"
    available_days: str = "Monday to Friday"  # advisory only
    available_hours: str = "9:00 AM - 5:00 PM"  # advisory only

    @classmethod
    def from_record(cls, record: dict) -> "Doctor":
        return cls(
            id=str(record["id"]) if record.get("id") is not None else None,
            name=record.get("name") or "Unknown",
            specialty=record.get("specialty") or "General Dentistry",
            available_days=record.get("available_days") or "Monday to Friday",
            available_hours=record.get("available_hours") or "9:00 AM - 5:00 PM",
        )


class Appointment(BaseModel):
    id: Optional[str] = None
    patient_name: str = ""
    patient_phone: str = PHONE_NOT_PROVIDED
    doctor: str = ""  # free text, not a foreign key
    date: str = ""  # YYYY-MM-DD
    time: str = ""
    status: str = Field(default=STATUS_CONFIRMED)

    @classmethod
    def from_record(cls, record: dict) -> "Appointment":
        return cls(
            id=str(record["id"]) if record.get("id") is not None else None,
            patient_name=record.get("patient_name") or "",
            patient_phone=record.get("patient_phone") or PHONE_NOT_PROVIDED,
            doctor=record.get("doctor") or "",
            date=record.get("date") or "",
            time=record.get("time") or "",
            status=record.get("status") or STATUS_CONFIRMED,
        )
