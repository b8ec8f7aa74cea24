"""Pydantic models for document processing."""

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field

from ...shared.outcome import Failure


class PageRange(NamedTuple):
    """Inclusive, 1-based span of source pages destined for one output file."""

    start: int
    end: int

    @property
    def page_count(self) -> int:
        return self.end - self.start + 1

    @property
    def expression(self) -> str:
        """Page range expression understood by the page extraction tool."""
        return f"{self.start}-{self.end}"


class ExtractionMethod(str, Enum):
    """How the text of a split document was obtained."""

    NATIVE = "native"
    OCR = "ocr"


class ExtractedContent(BaseModel):
    """Extracted text and facts about one split document."""

    file_name: str = Field(description="Name of the split PDF")
    extracted_at: datetime = Field(description="When extraction of this file began")
    text: str = Field(default="", description="Extracted text, native or OCR")
    page_count: int = Field(default=0, description="Page count reported by the info query")
    file_size_bytes: int = Field(default=0, description="Size of the split PDF on disk")

    # Not part of the published record
    extraction_method: ExtractionMethod = Field(default=ExtractionMethod.NATIVE, exclude=True)
    failures: List[Failure] = Field(default_factory=list, exclude=True)

    model_config = ConfigDict(from_attributes=True)


class ProcessingResult(BaseModel):
    """Result of processing one source PDF."""

    source_pdf: str
    split_files: List[ExtractedContent] = Field(default_factory=list)
    processing_time_seconds: int = Field(default=0, description="Processing duration in nanoseconds")
    total_files_processed: int = 0

    # Not part of the published record
    failures: List[Failure] = Field(default_factory=list, exclude=True)

    model_config = ConfigDict(from_attributes=True)

    @property
    def all_failures(self) -> List[Failure]:
        """Document-level failures plus those of every split file."""
        failures = list(self.failures)
        for content in self.split_files:
            failures.extend(content.failures)
        return failures


class BatchSummary(BaseModel):
    """Summary of one batch run over an input directory."""

    results: List[ProcessingResult] = Field(default_factory=list)
    output_file: Optional[Path] = None
    processing_time: float = 0.0

    @property
    def documents_processed(self) -> int:
        return len(self.results)

    @property
    def files_extracted(self) -> int:
        return sum(len(result.split_files) for result in self.results)

    @property
    def failure_count(self) -> int:
        return sum(len(result.all_failures) for result in self.results)
