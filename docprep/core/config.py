"""Application configuration using Pydantic v2 Settings.

Centralized configuration that loads from environment variables
and provides type-safe access throughout the application.
"""

import logging
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings have sensible defaults and can be overridden via
    environment variables or a .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # PDF conversion
    pdf_converter_url: str = Field(
        default="https://contract-pdf-server-production.up.railway.app/convert-to-pdf",
        description="Endpoint of the remote DOCX-to-PDF converter.",
    )
    pdf_converter_timeout: float = Field(
        default=60.0,
        description="Timeout in seconds for one conversion request.",
    )

    # Document defaults
    default_font_family: str = Field(
        default="Calibri",
        description="Font offered for contract generation.",
    )
    default_font_size: float = Field(
        default=11,
        description="Font size in points offered for contract generation.",
    )
    default_output_stem: str = Field(
        default="Документ",
        description="File name stem for generated documents without an explicit name.",
    )
    max_template_size: int = Field(
        default=1024 * 1024,
        description="Maximum accepted upload size in bytes.",
    )

    # File Storage
    upload_dir: Path = Field(
        default=Path("./uploads"),
        description="Directory for uploaded files.",
    )
    output_dir: Path = Field(
        default=Path("./output"),
        description="Directory for generated documents.",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR.",
    )
    log_dir: Path = Field(
        default=Path("./logs"),
        description="Directory for info.log and error.log.",
    )

    @field_validator("upload_dir", "output_dir")
    @classmethod
    def ensure_dir(cls, v: Path) -> Path:
        """Ensure the directory exists."""
        v.mkdir(parents=True, exist_ok=True)
        return v.resolve()

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Normalize log level to uppercase."""
        return v.upper()

    def configure_logging(self) -> None:
        """Configure global logging based on settings."""
        import structlog

        level = getattr(logging, self.log_level, logging.INFO)

        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.stdlib.PositionalArgumentsFormatter(),
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )

        logging.basicConfig(
            format="%(message)s",
            level=level,
        )

        logger.setLevel(level)


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global Settings instance.

    Returns:
        The singleton Settings instance.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
        _settings.configure_logging()
    return _settings
