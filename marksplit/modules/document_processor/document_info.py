"""Page count queries against the document info capability."""

import re
from pathlib import Path
from typing import Optional

from loguru import logger

from ...shared.exceptions import ExternalToolError
from ...shared.outcome import FailureKind, Outcome
from ..tools import Capability, ToolRunner

PAGES_PATTERN = re.compile(r"Pages:\s+(\d+)")


def parse_page_count(info_text: str) -> Optional[int]:
    """Read the ``Pages:`` line out of document info output."""
    match = PAGES_PATTERN.search(info_text)
    if not match:
        return None
    return int(match.group(1))


def query_page_count(runner: ToolRunner, pdf_path: Path) -> Outcome[int]:
    """Ask the info tool how many pages a PDF has.

    Never cached: callers query each time they need the count. Failures
    degrade to a count of 0.
    """
    try:
        output = runner.invoke(Capability.DOCUMENT_INFO, pdf=pdf_path)
    except ExternalToolError as e:
        logger.warning(f"Failed to get PDF info for {pdf_path.name}: {e.message}")
        return Outcome.failed(
            0,
            FailureKind.EXTERNAL_TOOL_FAILURE,
            "document_info",
            e.message,
            subject=pdf_path.name,
        )

    page_count = parse_page_count(output.stdout)
    if page_count is None:
        logger.warning(f"Could not determine page count for {pdf_path.name}")
        return Outcome.failed(
            0,
            FailureKind.INFO_QUERY_PARSE_FAILURE,
            "document_info",
            "No 'Pages:' line in document info output",
            subject=pdf_path.name,
        )

    return Outcome.success(page_count)
