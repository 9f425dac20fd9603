from decimal import Decimal
from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "OutTheDoor Quote Service"
    APP_URL: str = "http://localhost:3000"
    LOG_DIR: str = "logs"
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    EMAIL_API_URL: str = "https://api.resend.com/emails"
    EMAIL_API_KEY: Optional[str] = None
    EMAIL_FROM: str = "OutTheDoor Ops <ops@mail.outthedoor.app>"

    # dollars
    DEFAULT_TOLERANCE: Decimal = Decimal("0")
    LINE_ITEM_TOLERANCE: Decimal = Decimal("1")
    TAX_TOLERANCE: Decimal = Decimal("2")
    CONTRACT_PASS_REWARD: int = 15

    SEED_DEMO_DATA: bool = False

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def upper_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    class Config:
        env_file = ".env"

settings = Settings()
