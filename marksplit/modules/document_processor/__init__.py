"""Document processor module for marksplit.

This module handles:
- Marker page detection
- Page range computation around markers
- PDF splitting into one file per range
- Native text extraction with OCR fallback
- Batch aggregation of per-document results
"""

from .batch_processor import BatchProcessor
from .marker_scanner import MarkerScanner
from .models import (
    BatchSummary,
    ExtractedContent,
    ExtractionMethod,
    PageRange,
    ProcessingResult,
)
from .ocr_handler import OCRHandler, OCRResult
from .pdf_splitter import PDFSplitter
from .range_builder import build_page_ranges
from .text_extractor import TextExtractor

__all__ = [
    "BatchProcessor",
    "MarkerScanner",
    "OCRHandler",
    "OCRResult",
    "PDFSplitter",
    "TextExtractor",
    "build_page_ranges",
    "BatchSummary",
    "ExtractedContent",
    "ExtractionMethod",
    "PageRange",
    "ProcessingResult",
]
