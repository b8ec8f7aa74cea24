"""Global configuration for marksplit."""

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class RunnerBackend(str, Enum):
    """Which implementation executes external tool capabilities."""

    NATIVE = "native"  # PyMuPDF + pytesseract, in process
    SUBPROCESS = "subprocess"  # poppler, pdftk, tesseract, exiftool binaries


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "marksplit"
    app_version: str = "0.1.0"
    log_level: str = "INFO"
    log_dir: Path = Path("logs")

    # Batch input/output
    input_dir: Path = Path(".")
    output_dir: Path = Path("extracted_content")
    output_file_name: str = "extracted_content.json"
    preview_file_name: str = "extracted_content_short.json"

    # Splitting
    marker_token: str = "SPLITME"
    marker_scan_page_limit: int = 999

    # OCR fallback
    ocr_dpi: int = 300
    ocr_language: str = "eng"

    # Preview truncation
    truncate_length: int = 250

    # Execution
    runner_backend: RunnerBackend = RunnerBackend.NATIVE
    max_workers: int = 4
    tool_timeout_seconds: Optional[float] = None

    # Metadata tagging
    metadata_file: Path = Path("extracted_content/metadata_clean.json")
    metadata_source_dir: Path = Path("extracted_content")
    metadata_output_dir: Path = Path("processed_files_with_metadata")

    model_config = SettingsConfigDict(
        env_prefix="MARKSPLIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @property
    def output_file(self) -> Path:
        return self.output_dir / self.output_file_name

    @property
    def preview_file(self) -> Path:
        return self.output_dir / self.preview_file_name


# Global settings instance
settings = Settings()
