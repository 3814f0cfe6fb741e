"""Application settings and configuration."""

from pathlib import Path
from dataclasses import dataclass, field
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent


@dataclass
class BackendConfig:
    """Question backend (HTTP API) configuration settings."""

    base_url: str = field(
        default_factory=lambda: os.getenv("QBANK_API_URL", "http://localhost:8000")
    )
    timeout: float = field(
        default_factory=lambda: float(os.getenv("QBANK_API_TIMEOUT", "30"))
    )
    max_retries: int = field(
        default_factory=lambda: int(os.getenv("QBANK_API_RETRIES", "3"))
    )
    retry_wait_seconds: float = 0.5


@dataclass
class QueryConfig:
    """Query and pagination settings."""

    page_size: int = field(
        default_factory=lambda: int(os.getenv("QBANK_PAGE_SIZE", "20"))
    )
    history_limit: int = 10


@dataclass
class ExportConfig:
    """Export delivery settings."""

    exports_path: Path = field(
        default_factory=lambda: Path(
            os.getenv("QBANK_EXPORTS_PATH", str(PROJECT_ROOT / "data" / "exports"))
        )
    )
    selected_filename: str = "questions_selected.pdf"
    all_filtered_filename: str = "questions_all_filtered.pdf"
    listing_filename: str = "questions_listing.csv"


@dataclass
class AppConfig:
    """Application configuration settings."""

    name: str = field(default_factory=lambda: os.getenv("APP_NAME", "Question Bank Curator"))
    version: str = field(default_factory=lambda: os.getenv("APP_VERSION", "1.0.0"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))


@dataclass
class Config:
    """Main configuration container."""

    backend: BackendConfig = field(default_factory=BackendConfig)
    query: QueryConfig = field(default_factory=QueryConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    app: AppConfig = field(default_factory=AppConfig)

    def ensure_directories(self) -> None:
        """Create necessary directories if they don't exist."""
        self.export.exports_path.mkdir(parents=True, exist_ok=True)


# Global config instance
config = Config()
