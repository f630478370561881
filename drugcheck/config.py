# config.py
import logging
import os
from dataclasses import dataclass
from typing import List

from dotenv import load_dotenv

load_dotenv(override=False)


@dataclass(frozen=True)
class Settings:
    openai_api_key: str
    openai_model: str
    allowed_origins: List[str]
    log_level: str
    port: int


def load_settings() -> Settings:
    # CORS: set CORS_ORIGINS="http://localhost:3000,https://your-frontend.com"
    cors_origins_env = os.getenv("CORS_ORIGINS", "*")
    allowed = ["*"] if cors_origins_env.strip() == "*" else [o.strip() for o in cors_origins_env.split(",") if o.strip()]

    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY", "").strip(),
        openai_model=os.getenv("OPENAI_MODEL", "gpt-4.1-mini").strip() or "gpt-4.1-mini",
        allowed_origins=allowed,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        port=int(os.getenv("PORT", "8000")),
    )


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
