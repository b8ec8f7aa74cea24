"""Entry points for marksplit.

- ``marksplit [INPUT_DIR]``: split and extract every PDF of a directory
- ``marksplit-truncate``: write the short preview of the result file
- ``marksplit-tag``: copy and tag split files from the metadata list
"""

import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger

from .config import Settings, settings
from .modules.document_processor import BatchProcessor
from .modules.json_truncator import truncate_file
from .modules.metadata_tagger import MetadataTagger
from .modules.tools import create_runner
from .shared.exceptions import MarksplitException


def configure_logging(app_settings: Settings) -> None:
    """Send logs to stderr and to a rotating file."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=app_settings.log_level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
    )
    logger.add(
        str(app_settings.log_dir / "marksplit_{time}.log"),
        rotation="1 day",
        retention="7 days",
        level=app_settings.log_level,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Process a directory of PDFs; the only argument is the input directory."""
    argv = sys.argv[1:] if argv is None else argv
    configure_logging(settings)

    input_dir = Path(argv[0]) if argv else settings.input_dir
    logger.info(f"Starting {settings.app_name} v{settings.app_version} on {input_dir}")

    try:
        BatchProcessor(settings).run(input_dir)
    except MarksplitException as e:
        logger.error(e.message)
        return 1
    return 0


def truncate_main() -> int:
    """Write the truncated preview of the result file."""
    configure_logging(settings)

    try:
        truncate_file(settings.output_file, settings.preview_file, settings.truncate_length)
    except MarksplitException as e:
        logger.error(e.message)
        return 1
    return 0


def tag_main() -> int:
    """Copy and tag split files listed in the metadata file."""
    configure_logging(settings)

    runner = create_runner(settings.runner_backend, default_timeout=settings.tool_timeout_seconds)
    tagger = MetadataTagger(runner, settings.metadata_source_dir, settings.metadata_output_dir)

    try:
        summary = tagger.run(settings.metadata_file)
    except MarksplitException as e:
        logger.error(e.message)
        return 1
    return 0 if summary.errors == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
