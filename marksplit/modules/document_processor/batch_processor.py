"""Batch driver: split, extract and aggregate every PDF of a directory."""

import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Sequence

from loguru import logger
from pydantic import TypeAdapter

from ...config import Settings
from ...config import settings as default_settings
from ...shared.exceptions import DocumentDiscoveryError, OutputWriteError
from ...shared.outcome import Failure, FailureKind
from ..tools import ToolRunner, create_runner
from .document_info import query_page_count
from .marker_scanner import MarkerScanner
from .models import BatchSummary, ProcessingResult
from .ocr_handler import OCRHandler
from .pdf_splitter import PDFSplitter
from .range_builder import build_page_ranges
from .text_extractor import TextExtractor

PDF_SUFFIX = ".pdf"

_results_adapter = TypeAdapter(List[ProcessingResult])


class BatchProcessor:
    """Processes a directory of marker-delimited PDF bundles."""

    def __init__(self, settings: Optional[Settings] = None, runner: Optional[ToolRunner] = None):
        """Initialize batch processor.

        Args:
            settings: Settings to use (global settings if not provided)
            runner: Capability runner (built from settings if not provided)
        """
        self.settings = settings or default_settings
        self.runner = runner or create_runner(
            self.settings.runner_backend,
            default_timeout=self.settings.tool_timeout_seconds,
        )
        self.output_dir = self.settings.output_dir

        self.marker_scanner = MarkerScanner(
            self.runner,
            marker_token=self.settings.marker_token,
            page_limit=self.settings.marker_scan_page_limit,
        )
        self.pdf_splitter = PDFSplitter(self.runner)
        self.text_extractor = TextExtractor(
            self.runner,
            OCRHandler(self.runner, language=self.settings.ocr_language, dpi=self.settings.ocr_dpi),
        )

    def discover_documents(self, input_dir: Path) -> List[Path]:
        """List the ``*.pdf`` files of ``input_dir`` in name order.

        The extension match is case-sensitive: split files are named from the
        stem alone, so ``a.pdf`` and ``a.PDF`` would write the same parts.

        Raises:
            DocumentDiscoveryError: If the directory cannot be enumerated
        """
        try:
            entries = list(input_dir.iterdir())
        except OSError as e:
            raise DocumentDiscoveryError(
                f"Failed to find PDF files in {input_dir}: {e}",
                details={"input_dir": str(input_dir)},
            )

        return sorted(
            (path for path in entries if path.is_file() and path.suffix == PDF_SUFFIX),
            key=lambda path: path.name,
        )

    def process_document(self, pdf_path: Path) -> ProcessingResult:
        """Split one source PDF on its marker pages and extract every part.

        Args:
            pdf_path: Source PDF

        Returns:
            ProcessingResult with one ExtractedContent per produced split, in
            range order
        """
        start_time = time.perf_counter_ns()
        result = ProcessingResult(source_pdf=pdf_path.name)

        if not pdf_path.is_file():
            logger.warning(f"Source PDF not found: {pdf_path}")
            result.failures.append(Failure(
                kind=FailureKind.SOURCE_MISSING,
                operation="process_document",
                message=f"PDF file not found: {pdf_path}",
                subject=pdf_path.name,
            ))
            result.processing_time_seconds = time.perf_counter_ns() - start_time
            return result

        logger.info(f"Processing: {pdf_path.name}")

        # Step 1: Find marker pages
        markers = self.marker_scanner.scan(pdf_path)
        if not markers.ok:
            result.failures.append(markers.failure)
        elif not markers.value:
            logger.info(f"  No '{self.marker_scanner.marker_token}' pages found in {pdf_path.name}")

        # Step 2: Compute ranges from a fresh page count
        total_pages = query_page_count(self.runner, pdf_path)
        if not total_pages.ok:
            result.failures.append(total_pages.failure)
        ranges = build_page_ranges(markers.value, total_pages.value)

        # Step 3: Split
        split_outcomes = self.pdf_splitter.split(pdf_path, ranges, self.output_dir)

        # Step 4: Extract text from each split file
        for outcome in split_outcomes:
            if not outcome.ok:
                result.failures.append(outcome.failure)
                continue
            result.split_files.append(self.text_extractor.extract(outcome.value))

        result.total_files_processed = len(result.split_files)
        result.processing_time_seconds = time.perf_counter_ns() - start_time

        logger.info(
            f"Completed: {pdf_path.name} ({result.total_files_processed} files created, "
            f"{result.processing_time_seconds / 1e9:.2f}s)"
        )
        return result

    def process_documents(self, pdf_paths: Sequence[Path]) -> List[ProcessingResult]:
        """Process source PDFs on a bounded worker pool.

        Results are returned in the order of ``pdf_paths`` regardless of the
        order in which workers finish.
        """
        max_workers = max(1, self.settings.max_workers)
        if max_workers == 1 or len(pdf_paths) <= 1:
            return [self.process_document(path) for path in pdf_paths]

        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="marksplit") as executor:
            return list(executor.map(self.process_document, pdf_paths))

    def write_results(self, results: Sequence[ProcessingResult], output_file: Path) -> Path:
        """Write results as a pretty-printed JSON array.

        Raises:
            OutputWriteError: If the file cannot be written
        """
        try:
            output_file.write_bytes(_results_adapter.dump_json(list(results), indent=2))
        except OSError as e:
            raise OutputWriteError(
                f"Failed to write JSON file {output_file}: {e}",
                details={"output_file": str(output_file)},
            )
        return output_file

    def run(self, input_dir: Optional[Path] = None) -> BatchSummary:
        """Process every PDF of ``input_dir`` and write the result file.

        Args:
            input_dir: Directory holding source PDFs (settings if not provided)

        Returns:
            BatchSummary of the run
        """
        start_time = time.perf_counter_ns()
        input_dir = input_dir or self.settings.input_dir

        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputWriteError(
                f"Failed to create output directory {self.output_dir}: {e}",
                details={"output_dir": str(self.output_dir)},
            )

        pdf_paths = self.discover_documents(input_dir)
        if not pdf_paths:
            logger.warning(f"No PDF files found in {input_dir}")

        results = self.process_documents(pdf_paths)
        output_file = self.write_results(results, self.settings.output_file)

        summary = BatchSummary(
            results=results,
            output_file=output_file,
            processing_time=(time.perf_counter_ns() - start_time) / 1e9,
        )

        logger.info(f"Processing complete! Results saved to: {output_file}")
        logger.info(f"Total PDFs processed: {summary.documents_processed}")
        logger.info(f"Total files extracted: {summary.files_extracted}")
        logger.info(f"Failures: {summary.failure_count}")
        return summary
