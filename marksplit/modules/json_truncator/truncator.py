"""Shrink long strings in result JSON for quick previews."""

import json
from pathlib import Path
from typing import Any

from loguru import logger

from ...shared.exceptions import TruncationError

DEFAULT_MAX_LENGTH = 250


def truncate_string(value: str, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    if len(value) <= max_length:
        return value
    return value[:max_length]


def truncate_value(value: Any, max_length: int = DEFAULT_MAX_LENGTH) -> Any:
    """Recursively cut every string leaf to ``max_length`` characters.

    Dicts and lists are rebuilt with the same keys, order and length; values
    that are not strings are returned unchanged. Applying it twice gives the
    same result as applying it once.
    """
    if isinstance(value, dict):
        return {key: truncate_value(item, max_length) for key, item in value.items()}
    if isinstance(value, list):
        return [truncate_value(item, max_length) for item in value]
    if isinstance(value, str):
        return truncate_string(value, max_length)
    return value


def truncate_file(source: Path, destination: Path, max_length: int = DEFAULT_MAX_LENGTH) -> Path:
    """Write a truncated copy of a JSON file.

    Raises:
        TruncationError: If the source cannot be read or parsed, or the
            destination cannot be written
    """
    try:
        data = json.loads(source.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise TruncationError(f"Error reading {source}: {e}", details={"source": str(source)})

    truncated = truncate_value(data, max_length)

    try:
        destination.write_text(json.dumps(truncated, indent=2, ensure_ascii=False), encoding="utf-8")
    except OSError as e:
        raise TruncationError(
            f"Error writing {destination}: {e}", details={"destination": str(destination)}
        )

    logger.info(
        f"Created {destination.name} with truncated text values ({max_length} characters max)"
    )
    return destination
