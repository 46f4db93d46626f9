"""Configuration management from environment variables."""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file
load_dotenv()

# Project root
PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = Path(os.getenv("DATA_DIR", str(PROJECT_ROOT / "data")))
PRIVATE_DIR = DATA_DIR / "private"
STATUSES_DIR = PRIVATE_DIR / "statuses"
PUBLIC_DIR = DATA_DIR / "public"


class Config:
    """Application configuration."""

    # Metadata source
    FXTWITTER_API_URL: str = os.getenv("FXTWITTER_API_URL", "https://api.fxtwitter.com")
    TIMEOUT: int = int(os.getenv("TIMEOUT", "20"))

    # Fetcher
    RATE_PER_SECOND: float = float(os.getenv("RATE_PER_SECOND", "15"))
    MAX_RETRIES: int = int(os.getenv("MAX_RETRIES", "5"))
    CONCURRENCY: int = int(os.getenv("CONCURRENCY", "64"))
    PROGRESS_EVERY: int = int(os.getenv("PROGRESS_EVERY", "100"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    def validate(self) -> None:
        """Validate configuration values."""
        errors = []
        if self.MAX_RETRIES < 1:
            errors.append("MAX_RETRIES must be >= 1")
        if self.CONCURRENCY < 1:
            errors.append("CONCURRENCY must be >= 1")
        if self.TIMEOUT <= 0:
            errors.append("TIMEOUT must be > 0")
        if self.PROGRESS_EVERY < 1:
            errors.append("PROGRESS_EVERY must be >= 1")
        if errors:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")


config = Config()
