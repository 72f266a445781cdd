from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.core.config import Settings, settings
from app.api import webhook, tools, calls
from app.core.logger import setup_logging, logger
from app.services.booking_service import BookingService
from app.services.db_service import SlotStoreClient
from app.services.formatter import ResponseFormatter
from app.services.llm_service import LLMFormatter
from contextlib import asynccontextmanager
from datetime import datetime

setup_logging(settings.LOG_LEVEL, settings.ERROR_LOG_FILE)


def build_booking_service(config: Settings) -> BookingService:
    store = SlotStoreClient(config.store_config())
    formatter = ResponseFormatter(date_style=config.DATE_STYLE)

    llm = None
    if config.USE_LLM_FORMATTER and config.OPENAI_API_KEY:
        llm = LLMFormatter(formatter, api_key=config.OPENAI_API_KEY, model=config.OPENAI_MODEL)
        logger.info(f"🧠 Generative phrasing enabled ({config.OPENAI_MODEL})")

    return BookingService(store, formatter, llm)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("🚀 Starting Dental AI Receptionist backend")
    logger.info(f"   Vapi webhook:   {settings.SERVER_URL}/api/webhook")
    logger.info(f"   Retell webhook: {settings.SERVER_URL}/webhook/retell")
    if getattr(app.state, "booking_service", None) is None:
        app.state.booking_service = build_booking_service(settings)
    yield
    # Shutdown
    logger.info("🛑 Shutting down backend")

app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan
)

# The demo page calls /start-call from its own origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)

# Global Exception Handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.opt(exception=exc).error(f"🔥 UNHANDLED ERROR: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={"message": "Internal Server Error", "detail": "An unexpected error occurred. Please contact support."}
    )

# Include routers
app.include_router(webhook.router, tags=["Webhook"])
app.include_router(tools.router, tags=["Tools"])
app.include_router(calls.router, tags=["Calls"])

@app.get("/")
async def health_check():
    return {"status": "running", "message": "Dental AI Receptionist - Sarah is ready!", "timestamp": datetime.now().isoformat()}

@app.get("/health")
async def health_check_std():
    return {"status": "ok", "environment": settings.ENVIRONMENT, "timestamp": datetime.now().isoformat()}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.PORT, reload=True)
