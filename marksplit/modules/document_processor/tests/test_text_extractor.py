"""Tests for native text extraction with OCR fallback."""

from datetime import datetime

import pytest

from marksplit.modules.tools import Capability
from marksplit.modules.tools.tests.fakes import FakeToolRunner
from marksplit.shared.exceptions import ExternalToolError
from marksplit.shared.outcome import FailureKind

from ..models import ExtractionMethod
from ..ocr_handler import OCRHandler, OCRResult
from ..text_extractor import TextExtractor

INFO_3_PAGES = "Pages:          3\n"


class StubOCRHandler(OCRHandler):
    """OCR handler returning a canned result and counting calls."""

    def __init__(self, result: OCRResult):
        super().__init__(FakeToolRunner())
        self.result = result
        self.calls = []

    def extract_text(self, pdf_path):
        self.calls.append(pdf_path)
        return self.result


class TestTextExtractor:
    """Test suite for TextExtractor."""

    @pytest.fixture
    def split_pdf(self, tmp_path):
        path = tmp_path / "bundle_part_001.pdf"
        path.write_bytes(b"%PDF-1.4 fake content")
        return path

    def test_native_text_accepted(self, split_pdf):
        runner = FakeToolRunner({
            Capability.EXTRACT_TEXT: "\n  Dear Sir,\nThe invoice...\n\f",
            Capability.DOCUMENT_INFO: INFO_3_PAGES,
        })
        ocr = StubOCRHandler(OCRResult(text="should not be used"))

        content = TextExtractor(runner, ocr).extract(split_pdf)

        assert content.text == "Dear Sir,\nThe invoice..."
        assert content.page_count == 3
        assert content.file_size_bytes == len(b"%PDF-1.4 fake content")
        assert content.file_name == "bundle_part_001.pdf"
        assert content.extraction_method == ExtractionMethod.NATIVE
        assert ocr.calls == []
        assert content.failures == []

    def test_whole_document_is_extracted(self, split_pdf):
        runner = FakeToolRunner({
            Capability.EXTRACT_TEXT: "text",
            Capability.DOCUMENT_INFO: INFO_3_PAGES,
        })

        TextExtractor(runner, StubOCRHandler(OCRResult())).extract(split_pdf)

        args = runner.calls(Capability.EXTRACT_TEXT)[0].args
        assert "first_page" not in args and "last_page" not in args

    @pytest.mark.parametrize("native_text", ["", "   \n\f\f  ", "\f"])
    def test_blank_native_text_falls_back_to_ocr(self, split_pdf, native_text):
        runner = FakeToolRunner({
            Capability.EXTRACT_TEXT: native_text,
            Capability.DOCUMENT_INFO: INFO_3_PAGES,
        })
        ocr = StubOCRHandler(OCRResult(text="Scanned letter", pages_rendered=3, pages_recognized=3))

        content = TextExtractor(runner, ocr).extract(split_pdf)

        assert ocr.calls == [split_pdf]
        assert content.text == "Scanned letter"
        assert content.extraction_method == ExtractionMethod.OCR

    def test_native_error_falls_back_to_ocr(self, split_pdf, caplog):
        runner = FakeToolRunner({
            Capability.EXTRACT_TEXT: ExternalToolError("pdftotext exited with status 1"),
            Capability.DOCUMENT_INFO: INFO_3_PAGES,
        })
        ocr = StubOCRHandler(OCRResult(text="Recovered"))

        content = TextExtractor(runner, ocr).extract(split_pdf)

        assert content.text == "Recovered"
        assert content.failures[0].operation == "extract_text"
        assert "Using OCR for: bundle_part_001.pdf" in caplog.text

    def test_ocr_page_count_comes_from_info_tool(self, split_pdf):
        runner = FakeToolRunner({
            Capability.EXTRACT_TEXT: "",
            Capability.DOCUMENT_INFO: "Pages:          5\n",
        })
        ocr = StubOCRHandler(OCRResult(text="partial", pages_rendered=2, pages_recognized=2))

        content = TextExtractor(runner, ocr).extract(split_pdf)

        assert content.page_count == 5

    def test_empty_ocr_still_reports_count_and_size(self, split_pdf):
        runner = FakeToolRunner({
            Capability.EXTRACT_TEXT: "",
            Capability.DOCUMENT_INFO: INFO_3_PAGES,
        })

        content = TextExtractor(runner, StubOCRHandler(OCRResult(text=""))).extract(split_pdf)

        assert content.text == ""
        assert content.page_count == 3
        assert content.file_size_bytes > 0

    def test_ocr_failures_are_carried(self, split_pdf):
        runner = FakeToolRunner({
            Capability.EXTRACT_TEXT: "",
            Capability.DOCUMENT_INFO: INFO_3_PAGES,
        })
        ocr_runner = FakeToolRunner({Capability.RASTERIZE: ExternalToolError("pdftoppm failed")})

        content = TextExtractor(runner, OCRHandler(ocr_runner)).extract(split_pdf)

        assert content.text == ""
        assert [f.operation for f in content.failures] == ["rasterize"]

    def test_info_failure_gives_zero_pages(self, split_pdf):
        runner = FakeToolRunner({
            Capability.EXTRACT_TEXT: "text",
            Capability.DOCUMENT_INFO: ExternalToolError("pdfinfo missing"),
        })

        content = TextExtractor(runner, StubOCRHandler(OCRResult())).extract(split_pdf)

        assert content.page_count == 0
        assert content.failures[0].operation == "document_info"

    def test_missing_file(self, tmp_path):
        runner = FakeToolRunner({
            Capability.EXTRACT_TEXT: ExternalToolError("no such file"),
            Capability.DOCUMENT_INFO: ExternalToolError("no such file"),
        })

        content = TextExtractor(runner, StubOCRHandler(OCRResult())).extract(tmp_path / "gone.pdf")

        assert content.file_size_bytes == 0
        assert content.failures[0].kind == FailureKind.SOURCE_MISSING

    def test_extracted_at_captured_at_start(self, split_pdf):
        before = datetime.now().astimezone()
        runner = FakeToolRunner({
            Capability.EXTRACT_TEXT: "text",
            Capability.DOCUMENT_INFO: INFO_3_PAGES,
        })

        content = TextExtractor(runner, StubOCRHandler(OCRResult())).extract(split_pdf)

        assert content.extracted_at.tzinfo is not None
        assert before <= content.extracted_at <= datetime.now().astimezone()

    def test_default_ocr_handler_shares_runner(self):
        runner = FakeToolRunner()
        extractor = TextExtractor(runner)
        assert extractor.ocr_handler.runner is runner
