# Tool definitions for Vapi function calling

CHECK_AVAILABILITY_PARAMETERS = {
    "type": "object",
    "properties": {
        "doctor": {
            "type": "string",
            "description": "Name of the preferred doctor. Optional - if not specified, show all doctors."
        },
        "date": {
            "type": "string",
            "description": "The date to check in YYYY-MM-DD format. Example: 2026-02-28"
        }
    },
    "required": ["date"]
}

BOOK_APPOINTMENT_PARAMETERS = {
    "type": "object",
    "properties": {
        "patient_name": {
            "type": "string",
            "description": "Full name of the patient"
        },
        "patient_phone": {
            "type": "string",
            "description": "Patient phone number (optional but helpful)"
        },
        "doctor": {
            "type": "string",
            "description": "Full name of the doctor"
        },
        "date": {
            "type": "string",
            "description": "Appointment date in YYYY-MM-DD format"
        },
        "time": {
            "type": "string",
            "description": "Appointment time, e.g. \"10:00 AM\" or \"02:00 PM\""
        }
    },
    "required": ["patient_name", "doctor", "date", "time"]
}

CHECK_AVAILABILITY_DESCRIPTION = (
    "Check which appointment slots are available for a doctor on a specific date. "
    "Call this IMMEDIATELY when a patient gives a date, without saying anything first."
)
BOOK_APPOINTMENT_DESCRIPTION = (
    "Book a confirmed appointment for a patient. Only call this AFTER confirming all "
    "details (name, doctor, date, time) with the patient."
)


def vapi_tools(server_url: str) -> list:
    """Function tools in the shape Vapi expects inside `model.tools`."""
    server = {"url": f"{server_url}/api/webhook"}
    return [
        {
            "type": "function",
            "function": {
                "name": "check_availability",
                "description": CHECK_AVAILABILITY_DESCRIPTION,
                "parameters": CHECK_AVAILABILITY_PARAMETERS,
            },
            "server": server,
        },
        {
            "type": "function",
            "function": {
                "name": "book_appointment",
                "description": BOOK_APPOINTMENT_DESCRIPTION,
                "parameters": BOOK_APPOINTMENT_PARAMETERS,
            },
            "server": server,
        },
    ]

