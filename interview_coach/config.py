import os
import logging
from dataclasses import dataclass
from pathlib import Path
from dotenv import load_dotenv

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

REQUIRED_VARS = {
    "GEMINI_API_KEY": "API key for the Gemini analysis service",
}

OPTIONAL_VARS = {
    "GEMINI_MODEL": "Model used for the analysis request",
    "ALLOWED_ORIGIN": "Single origin allowed to call the API",
    "UPLOAD_DIR": "Directory for temporary uploads",
    "LOG_DIR": "Directory for backend.log and exceptions.log",
    "LOG_LEVEL": "Logging level (DEBUG, INFO, WARNING, ERROR)",
    "POLL_INTERVAL_SECONDS": "Delay between remote file state checks",
    "POLL_MAX_ATTEMPTS": "Number of state checks before giving up",
    "MAX_WORKERS": "Threads used for blocking Gemini SDK calls",
    "HOST": "Bind address",
    "PORT": "Bind port",
}


@dataclass(frozen=True)
class Settings:
    gemini_api_key: str
    gemini_model: str = "gemini-2.0-flash"
    allowed_origin: str = "http://localhost:3000"
    upload_dir: Path = Path("uploads")
    log_dir: Path = Path("logs")
    log_level: str = "INFO"
    poll_interval: float = 10.0
    poll_max_attempts: int = 30
    max_workers: int = 4
    host: str = "0.0.0.0"
    port: int = 5001

    def ensure_directories(self) -> None:
        """Create the upload and log directories if they don't exist."""
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        self.log_dir.mkdir(parents=True, exist_ok=True)


def _read_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}")
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value


def load_settings() -> Settings:
    """
    Read settings from the environment (and a .env file if present).

    Raises ConfigurationError when GEMINI_API_KEY is missing so the
    process refuses to start without it.
    """
    logger.debug("Loading environment variables from .env file")
    load_dotenv()

    missing_vars = [var for var in REQUIRED_VARS if not os.getenv(var)]
    if missing_vars:
        error_msg = f"Missing required environment variables: {', '.join(missing_vars)}"
        logger.error(error_msg)
        raise ConfigurationError(error_msg)

    settings = Settings(
        gemini_api_key=os.environ["GEMINI_API_KEY"],
        gemini_model=os.getenv("GEMINI_MODEL", "gemini-2.0-flash"),
        allowed_origin=os.getenv("ALLOWED_ORIGIN", "http://localhost:3000"),
        upload_dir=Path(os.getenv("UPLOAD_DIR", "uploads")),
        log_dir=Path(os.getenv("LOG_DIR", "logs")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        poll_interval=_read_number("POLL_INTERVAL_SECONDS", 10.0, float),
        poll_max_attempts=_read_number("POLL_MAX_ATTEMPTS", 30, int),
        max_workers=_read_number("MAX_WORKERS", 4, int),
        host=os.getenv("HOST", "0.0.0.0"),
        port=_read_number("PORT", 5001, int),
    )

    logger.debug(f"GEMINI_API_KEY: {settings.gemini_api_key[:4]}****")
    logger.debug(f"GEMINI_MODEL: {settings.gemini_model}")
    logger.debug(f"ALLOWED_ORIGIN: {settings.allowed_origin}")
    logger.debug(f"UPLOAD_DIR: {settings.upload_dir}")
    return settings
