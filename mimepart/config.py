"""Configuration module for mimepart.

Defines the codec and I/O settings a Part uses when it encodes its payload.
"""

import sys

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import DEFAULT_CHUNK_SIZE, DEFAULT_MAX_CONTENT_SIZE, LINE_LENGTH, LINEEND
from .encoding import MIN_LINE_LENGTH


class StrictBaseModel(BaseModel):
    """Base model with immutable (frozen) configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class PartSettings(StrictBaseModel):
    """Encoding and I/O settings for MIME parts.

    Attributes:
        line_end: Line terminator used for encoded content and header blocks
        line_length: Maximum characters per encoded line (RFC 2045 allows 76)
        chunk_size: Number of bytes pulled from a stream per read
        max_content_size: Upper bound for content loaded by ``Part.from_file``
    """

    line_end: str = Field(default=LINEEND, alias="LINE_END")
    line_length: int = Field(default=LINE_LENGTH, alias="LINE_LENGTH", ge=MIN_LINE_LENGTH, le=998)
    chunk_size: int = Field(default=DEFAULT_CHUNK_SIZE, alias="CHUNK_SIZE", gt=0)
    max_content_size: int = Field(
        default=DEFAULT_MAX_CONTENT_SIZE, alias="MAX_CONTENT_SIZE", gt=0
    )

    @field_validator("line_end")
    @classmethod
    def validate_line_end(cls, v: str) -> str:
        """Validate that the line end is made of CR and LF characters only."""
        if not v or v.strip("\r\n"):
            raise ValueError(f"Invalid line end: {v!r}. Must consist of CR and/or LF characters")
        return v

    @classmethod
    def parse_yaml(cls, path: str) -> "PartSettings":
        """Parse settings from YAML file.

        Args:
            path: Path to YAML settings file

        Returns:
            Validated PartSettings instance

        Raises:
            SystemExit: If settings file is not found
        """
        try:
            with open(path, "r") as f:
                return cls.model_validate(yaml.safe_load(f) or {})
        except FileNotFoundError:
            print(f"Settings file not found: {path}", file=sys.stderr)
            raise SystemExit(1)


DEFAULT_SETTINGS = PartSettings()
