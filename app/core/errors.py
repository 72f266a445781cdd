"""
Error outcomes raised by the booking flow.

Every one of these is caught at the dispatch boundary and turned into a
spoken sentence; none of them reaches the voice platform as a transport error.
"""
from typing import List, Sequence


class ReceptionistError(Exception):
    """Base class for outcomes that are rendered to the caller as speech."""


class MissingArgument(ReceptionistError):
    def __init__(self, operation: str, fields: Sequence[str]):
        self.operation = operation
        self.fields: List[str] = list(fields)
        super().__init__(f"{operation}: missing {', '.join(self.fields)}")


class InvalidDate(MissingArgument):
    """The date argument was present but could not be parsed."""

    def __init__(self, operation: str, value: str):
        self.value = value
        super().__init__(operation, ["date"])


class DoctorNotFound(ReceptionistError):
    def __init__(self, requested: str, roster_names: Sequence[str]):
        self.requested = requested
        self.roster_names: List[str] = list(roster_names)
        super().__init__(f"No doctor matching '{requested}'")


class SlotUnavailable(ReceptionistError):
    def __init__(self, doctor: str, date: str, time: str):
        self.doctor = doctor
        self.date = date
        self.time = time
        super().__init__(f"{time} with {doctor} on {date} is already booked")


class StoreUnavailable(ReceptionistError):
    """The slot store could not be reached or answered with an error."""


class RosterUnavailable(StoreUnavailable):
    """The doctor roster came back empty."""


class UnknownTool(ReceptionistError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")
