"""Capability runner backed by command-line tools.

Uses poppler (``pdftotext``, ``pdfinfo``, ``pdftoppm``), ``pdftk``,
``tesseract`` and ``exiftool``. Each capability is a single blocking
``subprocess.run`` call with an optional timeout.
"""

import shutil
import subprocess
from typing import Dict, List

from loguru import logger

from ...shared.exceptions import ExternalToolError, ExternalToolTimeout
from .base_runner import Capability, ToolInvocation, ToolOutput, ToolRunner


class SubprocessToolRunner(ToolRunner):
    """Runs capabilities by spawning external programs."""

    EXECUTABLES: Dict[Capability, str] = {
        Capability.EXTRACT_TEXT: "pdftotext",
        Capability.DOCUMENT_INFO: "pdfinfo",
        Capability.EXTRACT_PAGES: "pdftk",
        Capability.RASTERIZE: "pdftoppm",
        Capability.RECOGNIZE: "tesseract",
        Capability.WRITE_METADATA: "exiftool",
    }

    def build_command(self, invocation: ToolInvocation) -> List[str]:
        """Translate an invocation into an argument vector."""
        args = invocation.args
        executable = self.EXECUTABLES[invocation.capability]
        capability = invocation.capability

        try:
            if capability == Capability.EXTRACT_TEXT:
                command = [executable]
                if args.get("first_page") is not None:
                    command += ["-f", str(args["first_page"])]
                if args.get("last_page") is not None:
                    command += ["-l", str(args["last_page"])]
                return command + [str(args["pdf"]), "-"]

            if capability == Capability.DOCUMENT_INFO:
                return [executable, str(args["pdf"])]

            if capability == Capability.EXTRACT_PAGES:
                return [
                    executable, str(args["pdf"]),
                    "cat", str(args["page_range"]),
                    "output", str(args["output"]),
                ]

            if capability == Capability.RASTERIZE:
                return [
                    executable, "-png", "-r", str(args["dpi"]),
                    str(args["pdf"]), str(args["output_prefix"]),
                ]

            if capability == Capability.RECOGNIZE:
                return [executable, str(args["image"]), "stdout", "-l", str(args["language"])]

            if capability == Capability.WRITE_METADATA:
                return [
                    executable,
                    "-overwrite_original",
                    f"-Title={args.get('title', '')}",
                    f"-Author={args.get('author', '')}",
                    f"-Subject={args.get('subject', '')}",
                    f"-Keywords={args.get('keywords', '')}",
                    str(args["path"]),
                ]
        except KeyError as e:
            raise ExternalToolError(
                f"Missing argument {e} for {capability.value}",
                capability=capability.value,
            )

        raise ExternalToolError(f"Unsupported capability: {capability}", capability=str(capability))

    def run(self, invocation: ToolInvocation) -> ToolOutput:
        command = self.build_command(invocation)
        capability = invocation.capability.value
        logger.debug(f"Running {' '.join(command)}")

        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                cwd=str(invocation.cwd) if invocation.cwd else None,
                timeout=invocation.timeout,
            )
        except subprocess.TimeoutExpired:
            raise ExternalToolTimeout(
                f"{command[0]} timed out after {invocation.timeout}s",
                capability=capability,
                details={"command": command},
            )
        except OSError as e:
            raise ExternalToolError(
                f"Failed to start {command[0]}: {e}",
                capability=capability,
                details={"command": command},
            )

        if completed.returncode != 0:
            raise ExternalToolError(
                f"{command[0]} exited with status {completed.returncode}: "
                f"{completed.stderr.strip()[:200]}",
                capability=capability,
                details={"command": command, "return_code": completed.returncode},
            )

        return ToolOutput(stdout=completed.stdout, return_code=completed.returncode)

    def is_available(self, capability: Capability) -> bool:
        return shutil.which(self.EXECUTABLES[capability]) is not None
