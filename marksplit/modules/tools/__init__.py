"""External tool capabilities.

Every call into PDF and OCR tooling goes through a ``ToolRunner`` so the
pipeline can be driven by PyMuPDF/Tesseract in process, by the poppler/pdftk
command-line tools, or by a fake runner in tests.
"""

from typing import Optional

from ...config import RunnerBackend
from .base_runner import PAGE_SEPARATOR, Capability, ToolInvocation, ToolOutput, ToolRunner
from .native_runner import NativeToolRunner
from .subprocess_runner import SubprocessToolRunner


def create_runner(backend: RunnerBackend, default_timeout: Optional[float] = None) -> ToolRunner:
    """Create the runner for the configured backend."""
    if backend == RunnerBackend.SUBPROCESS:
        return SubprocessToolRunner(default_timeout=default_timeout)
    return NativeToolRunner(default_timeout=default_timeout)


__all__ = [
    "PAGE_SEPARATOR",
    "Capability",
    "ToolInvocation",
    "ToolOutput",
    "ToolRunner",
    "NativeToolRunner",
    "SubprocessToolRunner",
    "create_runner",
]
