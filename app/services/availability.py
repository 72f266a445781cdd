from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from app.core.errors import DoctorNotFound, SlotUnavailable
from app.models.db_models import Appointment, Doctor, STATUS_CANCELLED, TIME_SLOTS


@dataclass
class DoctorAvailability:
    doctor: str
    specialty: str
    free_slots: List[str] = field(default_factory=list)


def _name_matches(haystack: str, needle: str) -> bool:
    return needle.lower() in haystack.lower()


def filter_doctors(roster: Sequence[Doctor], doctor_filter: Optional[str]) -> List[Doctor]:
    """
    Narrow the roster by case-insensitive substring on the doctor name.
    Raises DoctorNotFound (carrying the full roster names) when nothing matches.
    """
    if not doctor_filter:
        return list(roster)

    matches = [d for d in roster if _name_matches(d.name, doctor_filter)]
    if not matches:
        raise DoctorNotFound(doctor_filter, [d.name for d in roster])
    return matches


def booked_times(doctor_name: str, appointments: Sequence[Appointment]) -> List[str]:
    # Substring on the appointment's doctor field: "Dr. Ahmed" also picks up "Dr. Ahmed Khan Jr."
    return [a.time for a in appointments if _name_matches(a.doctor, doctor_name)]


def free_slots(doctor_name: str, appointments: Sequence[Appointment]) -> List[str]:
    booked = set(booked_times(doctor_name, appointments))
    return [slot for slot in TIME_SLOTS if slot not in booked]


def resolve_availability(
    roster: Sequence[Doctor],
    appointments: Sequence[Appointment],
    doctor_filter: Optional[str] = None,
) -> List[DoctorAvailability]:
    """Free slots per doctor, in roster order after filtering."""
    return [
        DoctorAvailability(doctor=d.name, specialty=d.specialty, free_slots=free_slots(d.name, appointments))
        for d in filter_doctors(roster, doctor_filter)
    ]


def ensure_slot_free(doctor: str, date: str, time: str, appointments: Sequence[Appointment]) -> None:
    """
    Booking conflict guard. `appointments` must be a fresh read for `date`.
    The check is not atomic with the insert that follows it.
    """
    for appt in appointments:
        if appt.status != STATUS_CANCELLED and appt.time == time and _name_matches(appt.doctor, doctor):
            raise SlotUnavailable(doctor, date, time)
