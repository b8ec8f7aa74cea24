"""
In-process capability runner built on PyMuPDF and Tesseract.

Reproduces the output contracts of the command-line tools so that callers do
not care which backend is active:
- EXTRACT_TEXT terminates every page with a form feed
- DOCUMENT_INFO reports a ``Pages: <n>`` line
- RASTERIZE writes ``<prefix>-<n>.png`` with page numbers zero-padded to the
  width of the last page number
"""

import threading
from pathlib import Path
from typing import Any, Dict, Tuple

import fitz  # PyMuPDF
import pytesseract
from loguru import logger
from PIL import Image

from ...shared.exceptions import ExternalToolError
from .base_runner import PAGE_SEPARATOR, Capability, ToolInvocation, ToolOutput, ToolRunner

# PyMuPDF is not thread-safe; every document operation runs under this lock
_FITZ_LOCK = threading.RLock()


class NativeToolRunner(ToolRunner):
    """Runs capabilities with PyMuPDF (PDF work) and pytesseract (OCR).

    Invocations execute synchronously in the calling thread; the timeout of
    an invocation is only honoured by the OCR capability. PDF operations are
    serialized across threads, OCR runs concurrently.
    """

    def run(self, invocation: ToolInvocation) -> ToolOutput:
        handlers = {
            Capability.EXTRACT_TEXT: self._extract_text,
            Capability.DOCUMENT_INFO: self._document_info,
            Capability.EXTRACT_PAGES: self._extract_pages,
            Capability.RASTERIZE: self._rasterize,
            Capability.RECOGNIZE: self._recognize,
            Capability.WRITE_METADATA: self._write_metadata,
        }
        handler = handlers.get(invocation.capability)
        if handler is None:
            raise ExternalToolError(
                f"Unsupported capability: {invocation.capability}",
                capability=str(invocation.capability),
            )

        try:
            if invocation.capability == Capability.RECOGNIZE:
                return ToolOutput(stdout=handler(invocation))
            with _FITZ_LOCK:
                return ToolOutput(stdout=handler(invocation))
        except ExternalToolError:
            raise
        except KeyError as e:
            raise ExternalToolError(
                f"Missing argument {e} for {invocation.capability.value}",
                capability=invocation.capability.value,
            )
        except Exception as e:
            raise ExternalToolError(
                f"{invocation.capability.value} failed: {e}",
                capability=invocation.capability.value,
                details={"args": {k: str(v) for k, v in invocation.args.items()}},
            ) from e

    def is_available(self, capability: Capability) -> bool:
        if capability == Capability.RECOGNIZE:
            return self._verify_tesseract()
        return True

    def _verify_tesseract(self) -> bool:
        """Verify Tesseract is installed and accessible."""
        try:
            pytesseract.get_tesseract_version()
            return True
        except Exception as e:
            logger.warning(f"Tesseract is not installed or not in PATH: {e}")
            return False

    def _resolve(self, invocation: ToolInvocation, key: str) -> Path:
        path = Path(invocation.args[key])
        if invocation.cwd is not None and not path.is_absolute():
            path = Path(invocation.cwd) / path
        return path

    def _extract_text(self, invocation: ToolInvocation) -> str:
        pdf_path = self._resolve(invocation, "pdf")
        with fitz.open(str(pdf_path)) as doc:
            first = max(int(invocation.args.get("first_page") or 1), 1)
            last = min(int(invocation.args.get("last_page") or doc.page_count), doc.page_count)
            pages = []
            for page_num in range(first - 1, last):
                pages.append(doc[page_num].get_text() + PAGE_SEPARATOR)
        return "".join(pages)

    def _document_info(self, invocation: ToolInvocation) -> str:
        pdf_path = self._resolve(invocation, "pdf")
        with fitz.open(str(pdf_path)) as doc:
            metadata = doc.metadata or {}
            lines = [
                f"Title:          {metadata.get('title', '')}",
                f"Author:         {metadata.get('author', '')}",
                f"Producer:       {metadata.get('producer', '')}",
                f"Encrypted:      {'yes' if doc.is_encrypted else 'no'}",
                f"Pages:          {doc.page_count}",
                f"File size:      {pdf_path.stat().st_size} bytes",
            ]
        return "\n".join(lines) + "\n"

    def _extract_pages(self, invocation: ToolInvocation) -> str:
        pdf_path = self._resolve(invocation, "pdf")
        output_path = self._resolve(invocation, "output")
        start, end = self._parse_page_range(str(invocation.args["page_range"]))

        with fitz.open(str(pdf_path)) as src_pdf:
            if start < 1 or end > src_pdf.page_count or start > end:
                raise ExternalToolError(
                    f"Page range {start}-{end} outside document of {src_pdf.page_count} pages",
                    capability=Capability.EXTRACT_PAGES.value,
                )
            dest_pdf = fitz.open()
            try:
                dest_pdf.insert_pdf(src_pdf, from_page=start - 1, to_page=end - 1)
                dest_pdf.save(str(output_path))
            finally:
                dest_pdf.close()
        return ""

    def _parse_page_range(self, expression: str) -> Tuple[int, int]:
        """Parse an ``a-b`` (or single ``a``) page range expression."""
        parts = expression.split("-")
        try:
            if len(parts) == 1:
                return int(parts[0]), int(parts[0])
            if len(parts) == 2:
                return int(parts[0]), int(parts[1])
        except ValueError:
            pass
        raise ExternalToolError(
            f"Invalid page range expression: {expression!r}",
            capability=Capability.EXTRACT_PAGES.value,
        )

    def _rasterize(self, invocation: ToolInvocation) -> str:
        pdf_path = self._resolve(invocation, "pdf")
        prefix = self._resolve(invocation, "output_prefix")
        dpi = int(invocation.args["dpi"])
        mat = fitz.Matrix(dpi / 72.0, dpi / 72.0)

        with fitz.open(str(pdf_path)) as doc:
            width = len(str(doc.page_count))
            for page_num, page in enumerate(doc, start=1):
                pix = page.get_pixmap(matrix=mat)
                pix.save(f"{prefix}-{page_num:0{width}d}.png")
        return ""

    def _recognize(self, invocation: ToolInvocation) -> str:
        image_path = self._resolve(invocation, "image")
        language = invocation.args.get("language", "eng")
        with Image.open(image_path) as image:
            kwargs: Dict[str, Any] = {"lang": language}
            if invocation.timeout:
                kwargs["timeout"] = invocation.timeout
            return pytesseract.image_to_string(image, **kwargs)

    def _write_metadata(self, invocation: ToolInvocation) -> str:
        path = self._resolve(invocation, "path")
        # Buffer the file so the document can be rewritten in place
        data = path.read_bytes()
        with fitz.open(stream=data, filetype="pdf") as doc:
            metadata = {
                key: value
                for key, value in (doc.metadata or {}).items()
                if key not in ("format", "encryption")
            }
            metadata.update({
                "title": invocation.args.get("title", ""),
                "author": invocation.args.get("author", ""),
                "subject": invocation.args.get("subject", ""),
                "keywords": invocation.args.get("keywords", ""),
            })
            doc.set_metadata(metadata)
            doc.save(str(path))
        return ""
