from app.core.errors import ReceptionistError, UnknownTool
from app.core.logger import logger
from app.models.events import ToolInvocation
from app.services.booking_service import BookingService
from app.services.formatter import TECHNICAL_ISSUE


async def dispatch(invocation: ToolInvocation, booking_service: BookingService) -> str:
    """
    Run one tool invocation and always return a speakable string.
    """
    name = invocation.name
    args = invocation.arguments
    logger.info(f"🔧 Tool call: {name} | Args: {args}")

    try:
        if name == "check_availability":
            result = await booking_service.check_availability(args.get("date"), args.get("doctor"))
        elif name == "book_appointment":
            result = await booking_service.book_appointment(
                patient_name=args.get("patient_name"),
                doctor=args.get("doctor"),
                date=args.get("date"),
                time=args.get("time"),
                patient_phone=args.get("patient_phone"),
            )
        else:
            logger.warning(f"⚠️ Unknown tool: {name}")
            raise UnknownTool(name)

    except ReceptionistError as e:
        logger.info(f"↩️ {name} -> {type(e).__name__}: {e}")
        return booking_service.formatter.error(e)
    except Exception as e:
        logger.exception(f"❌ Error in tool {name}: {e}")
        return TECHNICAL_ISSUE

    logger.info(f"✅ {name} handled")
    return result
