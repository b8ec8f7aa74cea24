"""PDF splitter writing one file per page range."""

from pathlib import Path
from typing import List, Sequence

from loguru import logger

from ...shared.exceptions import ExternalToolError
from ...shared.outcome import FailureKind, Outcome
from ..tools import Capability, ToolRunner
from .models import PageRange


class PDFSplitter:
    """Materializes page ranges of a source PDF as standalone PDF files."""

    def __init__(self, runner: ToolRunner):
        self.runner = runner

    @staticmethod
    def split_file_name(source_pdf: Path, sequence: int) -> str:
        """Name of the ``sequence``-th (1-based) split of ``source_pdf``."""
        return f"{source_pdf.stem}_part_{sequence:03d}.pdf"

    def split(
        self,
        pdf_path: Path,
        ranges: Sequence[PageRange],
        output_dir: Path,
    ) -> List[Outcome[Path]]:
        """Write each range to its own PDF.

        Sequence numbers follow the position of the range in ``ranges``, not
        its page numbers, and are consumed even when a range fails.

        Args:
            pdf_path: Source PDF
            ranges: Ordered page ranges
            output_dir: Directory receiving the split files

        Returns:
            One outcome per range, in range order. Failed ranges are logged
            and skipped; the remaining ranges are still attempted.
        """
        outcomes: List[Outcome[Path]] = []

        for sequence, page_range in enumerate(ranges, start=1):
            output_path = output_dir / self.split_file_name(pdf_path, sequence)

            try:
                self.runner.invoke(
                    Capability.EXTRACT_PAGES,
                    pdf=pdf_path,
                    page_range=page_range.expression,
                    output=output_path,
                )
            except ExternalToolError as e:
                logger.warning(
                    f"Failed to split PDF {pdf_path.name} range {page_range.expression}: {e.message}"
                )
                outcomes.append(Outcome.failed(
                    output_path,
                    FailureKind.EXTERNAL_TOOL_FAILURE,
                    "split",
                    e.message,
                    subject=f"{pdf_path.name} pages {page_range.expression}",
                ))
                continue

            logger.debug(f"Extracted pages {page_range.expression} to {output_path.name}")
            outcomes.append(Outcome.success(output_path))

        return outcomes
