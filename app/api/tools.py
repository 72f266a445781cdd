from fastapi import APIRouter, Depends
from pydantic import BaseModel
from typing import Optional

from app.api.deps import get_booking_service
from app.api.dispatcher import dispatch
from app.core.security import verify_webhook_secret
from app.models.events import ToolInvocation
from app.services.booking_service import BookingService

router = APIRouter(dependencies=[Depends(verify_webhook_secret)])

class CheckAvailabilityRequest(BaseModel):
    date: Optional[str] = None
    doctor: Optional[str] = None

class BookAppointmentRequest(BaseModel):
    patient_name: Optional[str] = None
    patient_phone: Optional[str] = None
    doctor: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None

@router.post("/tools/check_availability")
async def check_availability(req: CheckAvailabilityRequest, booking_service: BookingService = Depends(get_booking_service)):
    invocation = ToolInvocation(name="check_availability", arguments=req.model_dump(exclude_none=True))
    return {"result": await dispatch(invocation, booking_service)}

@router.post("/tools/book_appointment")
async def book_appointment(req: BookAppointmentRequest, booking_service: BookingService = Depends(get_booking_service)):
    invocation = ToolInvocation(name="book_appointment", arguments=req.model_dump(exclude_none=True))
    return {"result": await dispatch(invocation, booking_service)}
