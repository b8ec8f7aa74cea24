"""Find the pages of a PDF that carry the split marker."""

from pathlib import Path
from typing import List

from loguru import logger

from ...shared.exceptions import ExternalToolError
from ...shared.outcome import FailureKind, Outcome
from ..tools import PAGE_SEPARATOR, Capability, ToolRunner

DEFAULT_MARKER_TOKEN = "SPLITME"
DEFAULT_PAGE_LIMIT = 999


class MarkerScanner:
    """Locates marker pages by scanning page-separated extracted text.

    Matching is a case-insensitive substring test, so a page is flagged when
    the token appears anywhere in its text, including inside a longer word.
    """

    def __init__(
        self,
        runner: ToolRunner,
        marker_token: str = DEFAULT_MARKER_TOKEN,
        page_limit: int = DEFAULT_PAGE_LIMIT,
    ):
        """
        Initialize marker scanner.

        Args:
            runner: Capability runner used for text extraction
            marker_token: Literal token that marks a split page
            page_limit: Last page requested from the text extractor
        """
        if not marker_token:
            raise ValueError("marker_token must not be empty")
        self.runner = runner
        self.marker_token = marker_token
        self.page_limit = page_limit

    def scan(self, pdf_path: Path) -> Outcome[List[int]]:
        """Return the ascending 1-based page numbers containing the marker.

        Args:
            pdf_path: Source PDF

        Returns:
            Outcome holding the marker pages; on failure the value is empty
            and the document is treated as having no split points
        """
        try:
            output = self.runner.invoke(
                Capability.EXTRACT_TEXT,
                pdf=pdf_path,
                first_page=1,
                last_page=self.page_limit,
            )
        except ExternalToolError as e:
            logger.warning(f"Failed to extract text from {pdf_path.name}: {e.message}")
            return Outcome.failed(
                [], FailureKind.EXTERNAL_TOOL_FAILURE, "marker_scan", e.message, subject=pdf_path.name
            )

        if not output.stdout:
            logger.warning(f"Text extraction produced no output for {pdf_path.name}")
            return Outcome.failed(
                [],
                FailureKind.EXTERNAL_TOOL_FAILURE,
                "marker_scan",
                "Text extraction produced no output",
                subject=pdf_path.name,
            )

        return Outcome.success(self.find_marker_pages(output.stdout))

    def find_marker_pages(self, text: str) -> List[int]:
        """Split page-separated text and flag the blocks containing the token."""
        token = self.marker_token.upper()
        marker_pages = []
        for page_number, page_text in enumerate(text.split(PAGE_SEPARATOR), start=1):
            if token in page_text.upper():
                marker_pages.append(page_number)
        return marker_pages
