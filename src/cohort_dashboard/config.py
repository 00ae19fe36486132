"""Environment-based settings."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .client import DEFAULT_BASE_URL


@dataclass
class Settings:
    base_url: str = DEFAULT_BASE_URL
    admin_gmail: Optional[str] = None
    log_level: str = "WARNING"


def load_env() -> None:
    """Read settings from the nearest .env file.

    Looks beside the package first, then up to the project root, and finally
    lets python-dotenv walk up from the working directory.
    """
    here = Path(__file__).resolve().parent
    for candidate in [here / ".env", here.parent / ".env", here.parent.parent / ".env"]:
        if candidate.exists():
            load_dotenv(candidate)
            return
    load_dotenv()


def load_settings() -> Settings:
    return Settings(
        base_url=os.getenv("COHORT_API_BASE_URL") or DEFAULT_BASE_URL,
        admin_gmail=os.getenv("COHORT_ADMIN_GMAIL") or None,
        log_level=(os.getenv("COHORT_LOG_LEVEL") or "WARNING").upper(),
    )


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
