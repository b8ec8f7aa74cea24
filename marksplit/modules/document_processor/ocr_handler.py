"""
OCR handler for split documents without an embedded text layer.

Scanned bundles often come out of the splitter as image-only PDFs. This
module renders every page to an image and runs the OCR engine over each
image, keeping whatever pages it manages to recognize.
"""

import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from loguru import logger

from ...shared.exceptions import ExternalToolError
from ...shared.outcome import Failure, FailureKind
from ..tools import Capability, ToolRunner

DEFAULT_DPI = 300
DEFAULT_LANGUAGE = "eng"
PAGE_TEXT_SEPARATOR = "\n\n"


@dataclass
class OCRResult:
    """Recognized text of one document plus per-page bookkeeping."""
    text: str = ""
    pages_rendered: int = 0
    pages_recognized: int = 0
    failures: List[Failure] = field(default_factory=list)


class OCRHandler:
    """
    Handles rasterize-then-recognize text extraction for a whole PDF.

    Failure isolation:
    - Rasterization failure aborts OCR for the document (empty text)
    - A failing page is logged and left out of the text
    """

    def __init__(self, runner: ToolRunner, language: str = DEFAULT_LANGUAGE, dpi: int = DEFAULT_DPI):
        """
        Initialize OCR handler.

        Args:
            runner: Capability runner used for rasterization and OCR
            language: OCR language code (default: "eng" for English)
            dpi: Resolution for rendering PDF pages to images
        """
        self.runner = runner
        self.language = language
        self.dpi = dpi

    def extract_text(self, pdf_path: Path) -> OCRResult:
        """
        Render every page of a PDF and OCR the images in page order.

        The scratch directory holding the images is removed when this
        returns, whether or not OCR succeeded.

        Args:
            pdf_path: PDF to recognize

        Returns:
            OCRResult with non-empty page texts joined by a blank line
        """
        result = OCRResult()

        try:
            scratch_dir = tempfile.TemporaryDirectory(prefix="pdf_ocr")
        except OSError as e:
            logger.warning(f"Failed to create temp directory for OCR of {pdf_path.name}: {e}")
            result.failures.append(Failure(
                kind=FailureKind.IO_FAILURE,
                operation="ocr_scratch_dir",
                message=str(e),
                subject=pdf_path.name,
            ))
            return result

        with scratch_dir as temp_dir:
            image_dir = Path(temp_dir)

            try:
                self.runner.invoke(
                    Capability.RASTERIZE,
                    pdf=pdf_path,
                    dpi=self.dpi,
                    output_prefix=image_dir / "page",
                )
            except ExternalToolError as e:
                logger.warning(f"Failed to convert {pdf_path.name} to images: {e.message}")
                result.failures.append(Failure(
                    kind=FailureKind.EXTERNAL_TOOL_FAILURE,
                    operation="rasterize",
                    message=e.message,
                    subject=pdf_path.name,
                ))
                return result

            image_files = sorted(image_dir.glob("page-*.png"))
            result.pages_rendered = len(image_files)

            page_texts = []
            for image_file in image_files:
                text = self._recognize(image_file, pdf_path, result)
                if text:
                    page_texts.append(text)

            result.text = PAGE_TEXT_SEPARATOR.join(page_texts)

        logger.debug(
            f"OCR of {pdf_path.name}: {result.pages_recognized}/{result.pages_rendered} pages, "
            f"{len(result.text)} chars"
        )
        return result

    def _recognize(self, image_file: Path, pdf_path: Path, result: OCRResult) -> str:
        """OCR one page image; returns the stripped text or "" on failure."""
        try:
            output = self.runner.invoke(
                Capability.RECOGNIZE,
                image=image_file,
                language=self.language,
            )
        except ExternalToolError as e:
            logger.warning(f"OCR failed for {image_file.name} of {pdf_path.name}: {e.message}")
            result.failures.append(Failure(
                kind=FailureKind.EXTERNAL_TOOL_FAILURE,
                operation="recognize",
                message=e.message,
                subject=f"{pdf_path.name} {image_file.name}",
            ))
            return ""

        result.pages_recognized += 1
        return output.stdout.strip()
