"""
Text extractor that chooses between the native text layer and OCR.

Strategy:
1. Try native extraction of the whole document
2. Accept it when the tool succeeded and the text is not blank
3. Otherwise fall back to OCR (scanned / image-only documents)
"""

from datetime import datetime
from pathlib import Path
from typing import Optional

from loguru import logger

from ...shared.exceptions import ExternalToolError
from ...shared.outcome import Failure, FailureKind
from ..tools import Capability, ToolRunner
from .document_info import query_page_count
from .models import ExtractedContent, ExtractionMethod
from .ocr_handler import OCRHandler


class TextExtractor:
    """Extracts text from one split document, with OCR as fallback."""

    def __init__(self, runner: ToolRunner, ocr_handler: Optional[OCRHandler] = None):
        """
        Initialize text extractor.

        Args:
            runner: Capability runner for native extraction and info queries
            ocr_handler: OCR fallback (defaults to one sharing ``runner``)
        """
        self.runner = runner
        self.ocr_handler = ocr_handler or OCRHandler(runner)

    def extract(self, pdf_path: Path) -> ExtractedContent:
        """
        Extract the text of a split document.

        Args:
            pdf_path: Split PDF

        Returns:
            ExtractedContent; page count and file size are filled in even
            when no text could be obtained
        """
        content = ExtractedContent(
            file_name=pdf_path.name,
            extracted_at=datetime.now().astimezone(),
        )

        try:
            content.file_size_bytes = pdf_path.stat().st_size
        except OSError as e:
            content.failures.append(Failure(
                kind=FailureKind.SOURCE_MISSING,
                operation="stat",
                message=str(e),
                subject=pdf_path.name,
            ))

        native_text = self._extract_native(pdf_path, content)

        if native_text:
            content.text = native_text
            content.extraction_method = ExtractionMethod.NATIVE
        else:
            logger.info(f"Using OCR for: {pdf_path.name}")
            ocr_result = self.ocr_handler.extract_text(pdf_path)
            content.text = ocr_result.text
            content.extraction_method = ExtractionMethod.OCR
            content.failures.extend(ocr_result.failures)

        # Page count comes from the info tool on both paths, never from the
        # number of rendered images
        page_count = query_page_count(self.runner, pdf_path)
        content.page_count = page_count.value
        if not page_count.ok:
            content.failures.append(page_count.failure)

        return content

    def _extract_native(self, pdf_path: Path, content: ExtractedContent) -> str:
        """Return the stripped native text, or "" when OCR is needed."""
        try:
            output = self.runner.invoke(Capability.EXTRACT_TEXT, pdf=pdf_path)
        except ExternalToolError as e:
            logger.warning(f"Native text extraction failed for {pdf_path.name}: {e.message}")
            content.failures.append(Failure(
                kind=FailureKind.EXTERNAL_TOOL_FAILURE,
                operation="extract_text",
                message=e.message,
                subject=pdf_path.name,
            ))
            return ""

        return output.stdout.strip()
