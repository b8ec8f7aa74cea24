"""JSON truncator producing short previews of result files."""

from .truncator import DEFAULT_MAX_LENGTH, truncate_file, truncate_string, truncate_value

__all__ = ["DEFAULT_MAX_LENGTH", "truncate_file", "truncate_string", "truncate_value"]
