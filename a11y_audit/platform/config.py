from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── App ─────────────────────────────────────
    APP_NAME: str = "A11y Audit"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"

    # ── Browser ─────────────────────────────────
    CHROMEDRIVER_PATH: Optional[str] = None
    USE_WEBDRIVER_MANAGER: bool = False
    HEADLESS: bool = True
    WINDOW_WIDTH: int = 1280
    WINDOW_HEIGHT: int = 800

    # ── Timeouts (seconds) ──────────────────────
    PAGE_TIMEOUT: float = 15.0
    CRAWL_PAGE_TIMEOUT: float = 30.0  # base page load during link discovery
    NETWORK_IDLE_TIMEOUT: float = 3.0
    NETWORK_IDLE_POLL: float = 0.5
    CRAWL_DEADLINE: float = 120.0

    # ── Crawl ───────────────────────────────────
    MAX_WORKERS: int = 3

    # ── Checks ──────────────────────────────────
    CONTRAST_VIOLATION_CAP: int = 25
    CODE_EXAMPLE_MAX_LENGTH: int = 500

    # ── Logging ─────────────────────────────────
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_TO_FILE: bool = True

    class Config:
        env_file = str(Path(__file__).parent.parent.parent / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


settings = Settings()
