"""Pydantic models for metadata tagging."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FileMetadata(BaseModel):
    """One entry of the hand-authored metadata file.

    Field aliases match the keys used in the file itself. Missing keys and
    null values fall back to empty defaults so that an incomplete entry is
    reported when it is tagged rather than rejecting the whole list.
    """

    file_name: str = Field(default="", description="Split file to tag, relative to the source directory")
    title: str = Field(default="", alias="Title")
    genre: str = Field(default="", alias="Genre")
    tags: List[str] = Field(default_factory=list, alias="Tags")
    composer: str = Field(default="", alias="Composer")
    new_filename: str = Field(default="", description="Name of the tagged copy")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("file_name", "title", "genre", "composer", "new_filename", mode="before")
    @classmethod
    def none_to_empty(cls, value):
        return "" if value is None else value

    @field_validator("tags", mode="before")
    @classmethod
    def none_to_no_tags(cls, value):
        return [] if value is None else value

    @property
    def keywords(self) -> str:
        return ", ".join(self.tags)


class TaggingSummary(BaseModel):
    """Counts for one tagging run."""

    processed: int = 0
    errors: int = 0
    metadata_embedded: bool = False
    failed_files: List[str] = Field(default_factory=list)
