"""Metadata tagger: copy split files under new names and tag them."""

from .models import FileMetadata, TaggingSummary
from .tagger import MetadataTagger

__all__ = ["FileMetadata", "MetadataTagger", "TaggingSummary"]
