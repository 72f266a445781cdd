from typing import Literal

from pydantic import BaseModel
from pydantic_settings import BaseSettings


class StoreConfig(BaseModel):
    """Connection settings handed to the slot store client at construction."""
    url: str
    key: str
    doctors_table: str = "doctors"
    appointments_table: str = "appointments"
    page_size: int = 100


class Settings(BaseSettings):
    PROJECT_NAME: str = "Dental AI Receptionist"

    # Server
    PORT: int = 3000
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    ERROR_LOG_FILE: str = "logs/errors.log"
    SERVER_URL: str = "http://localhost:3000"

    # Webhook auth (empty = disabled)
    WEBHOOK_SECRET: str = ""

    # Supabase
    SUPABASE_URL: str = ""
    SUPABASE_KEY: str = ""
    DOCTORS_TABLE: str = "doctors"
    APPOINTMENTS_TABLE: str = "appointments"
    STORE_PAGE_SIZE: int = 100

    # OpenAI
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o-mini"
    USE_LLM_FORMATTER: bool = False

    # Spoken date rendering: "short" -> Thursday, February 15 / "long" adds the year
    DATE_STYLE: Literal["short", "long"] = "short"

    # Retell
    RETELL_API_KEY: str = ""
    RETELL_AGENT_ID: str = ""
    RETELL_API_URL: str = "https://api.retellai.com"

    class Config:
        env_file = ".env"
        case_sensitive = True

    def store_config(self) -> StoreConfig:
        return StoreConfig(
            url=self.SUPABASE_URL,
            key=self.SUPABASE_KEY,
            doctors_table=self.DOCTORS_TABLE,
            appointments_table=self.APPOINTMENTS_TABLE,
            page_size=self.STORE_PAGE_SIZE,
        )


settings = Settings()
