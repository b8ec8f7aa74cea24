"""Base capability runner abstraction for external document tools."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional


class Capability(str, Enum):
    """External tool capabilities used by the pipeline."""
    EXTRACT_TEXT = "extract_text"      # page-separated plain text
    DOCUMENT_INFO = "document_info"    # info text with a "Pages:" line
    EXTRACT_PAGES = "extract_pages"    # new PDF from a page range
    RASTERIZE = "rasterize"            # one PNG per page
    RECOGNIZE = "recognize"            # OCR of a single image
    WRITE_METADATA = "write_metadata"  # title/author/subject/keywords


# Reserved character terminating every page in EXTRACT_TEXT output
PAGE_SEPARATOR = "\f"


@dataclass
class ToolInvocation:
    """Request to run one capability."""
    capability: Capability
    args: Dict[str, Any] = field(default_factory=dict)
    cwd: Optional[Path] = None
    timeout: Optional[float] = None


@dataclass
class ToolOutput:
    """Result of a successful capability invocation."""
    stdout: str = ""
    return_code: int = 0


class ToolRunner(ABC):
    """Abstract base class for capability runners.

    Implementations raise ``ExternalToolError`` for every failure, including
    a missing tool, a non-zero exit and a timeout.
    """

    def __init__(self, default_timeout: Optional[float] = None):
        self.default_timeout = default_timeout

    @abstractmethod
    def run(self, invocation: ToolInvocation) -> ToolOutput:
        """Run a capability.

        Args:
            invocation: Capability, arguments, working directory and timeout

        Returns:
            Tool output
        """
        pass

    @abstractmethod
    def is_available(self, capability: Capability) -> bool:
        """Check whether a capability can be executed.

        Args:
            capability: Capability to check

        Returns:
            True if the backing tool is present
        """
        pass

    def invoke(
        self,
        capability: Capability,
        cwd: Optional[Path] = None,
        timeout: Optional[float] = None,
        **args: Any,
    ) -> ToolOutput:
        """Convenience wrapper building a ``ToolInvocation`` with the default timeout."""
        invocation = ToolInvocation(
            capability=capability,
            args=args,
            cwd=cwd,
            timeout=timeout if timeout is not None else self.default_timeout,
        )
        return self.run(invocation)
