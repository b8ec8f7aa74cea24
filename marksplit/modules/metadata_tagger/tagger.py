"""Copy split PDFs to their final names and embed descriptive metadata."""

import json
import shutil
from pathlib import Path
from typing import List, Optional

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from ...shared.exceptions import ExternalToolError, MetadataFileError
from ...shared.outcome import FailureKind, Outcome
from ..tools import Capability, ToolRunner
from .models import FileMetadata, TaggingSummary

_metadata_adapter = TypeAdapter(List[FileMetadata])


class MetadataTagger:
    """Applies a hand-authored metadata list to split files.

    Each entry names a file in ``source_dir``. The file is copied to
    ``output_dir`` under its new name and, when the metadata writer is
    available, its title, author, subject and keywords are overwritten on the
    copy. Without a writer the files are only copied.
    """

    def __init__(self, runner: ToolRunner, source_dir: Path, output_dir: Path):
        self.runner = runner
        self.source_dir = source_dir
        self.output_dir = output_dir

    def load_metadata(self, metadata_file: Path) -> List[FileMetadata]:
        """Read the metadata list.

        Raises:
            MetadataFileError: If the file is missing or not a valid list
        """
        try:
            raw = json.loads(metadata_file.read_text(encoding="utf-8"))
            return _metadata_adapter.validate_python(raw)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise MetadataFileError(
                f"Error reading metadata from {metadata_file}: {e}",
                details={"metadata_file": str(metadata_file)},
            )

    def tag_file(self, file_meta: FileMetadata, write_metadata: bool) -> Outcome[Optional[Path]]:
        """Copy one file to its new name and optionally tag the copy."""
        if not file_meta.file_name or not file_meta.new_filename:
            return Outcome.failed(
                None,
                FailureKind.SOURCE_MISSING,
                "tag_file",
                "metadata entry needs both file_name and new_filename",
                subject=file_meta.file_name or None,
            )

        source_path = self.source_dir / file_meta.file_name
        output_path = self.output_dir / file_meta.new_filename

        if not source_path.is_file():
            return Outcome.failed(
                None,
                FailureKind.SOURCE_MISSING,
                "tag_file",
                f"source file does not exist: {source_path}",
                subject=file_meta.file_name,
            )

        try:
            shutil.copyfile(source_path, output_path)
        except OSError as e:
            return Outcome.failed(
                None,
                FailureKind.IO_FAILURE,
                "tag_file",
                f"error copying file: {e}",
                subject=file_meta.file_name,
            )

        if write_metadata:
            try:
                self.runner.invoke(
                    Capability.WRITE_METADATA,
                    path=output_path,
                    title=file_meta.title,
                    author=file_meta.composer,
                    subject=file_meta.genre,
                    keywords=file_meta.keywords,
                )
            except ExternalToolError as e:
                return Outcome.failed(
                    output_path,
                    FailureKind.EXTERNAL_TOOL_FAILURE,
                    "tag_file",
                    f"error modifying PDF metadata: {e.message}",
                    subject=file_meta.file_name,
                )

        return Outcome.success(output_path)

    def run(self, metadata_file: Path) -> TaggingSummary:
        """Tag every file listed in ``metadata_file``.

        Raises:
            MetadataFileError: If the metadata file cannot be read
        """
        entries = self.load_metadata(metadata_file)
        self.output_dir.mkdir(parents=True, exist_ok=True)

        summary = TaggingSummary(
            metadata_embedded=self.runner.is_available(Capability.WRITE_METADATA),
        )

        for index, file_meta in enumerate(entries):
            outcome = self.tag_file(file_meta, summary.metadata_embedded)
            if not outcome.ok:
                name = file_meta.file_name or f"entry {index}"
                logger.warning(f"Error processing {name}: {outcome.failure.message}")
                summary.errors += 1
                summary.failed_files.append(name)
                continue

            logger.info(f"Processed with metadata: {file_meta.file_name} -> {file_meta.new_filename}")
            summary.processed += 1

        logger.info(f"Successfully processed: {summary.processed} files")
        logger.info(f"Errors: {summary.errors} files")
        logger.info(f"Files saved to: {self.output_dir}/")
        if not summary.metadata_embedded:
            logger.warning("Metadata writer not available. Files were copied but metadata not embedded.")

        return summary
