from fastapi import HTTPException, Request

from app.services.booking_service import BookingService


def get_booking_service(request: Request) -> BookingService:
    """The booking service built in the app lifespan."""
    service = getattr(request.app.state, "booking_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Service is still starting up.")
    return service
