"""
Manifest dialect options.

Defaults match the manifest format: comma separated fields, ``;`` comment
lines, UTF-8 text.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Characters the CSV reader reserves for itself
_RESERVED_CHARS = {'"', "\r", "\n"}


class ParseOptions(BaseModel):
    """Tokenizer and file settings for reading and writing manifests."""

    model_config = ConfigDict(frozen=True)

    delimiter: str = Field(
        default=",", min_length=1, max_length=1, description="Field separator"
    )
    comment: str | None = Field(
        default=";",
        min_length=1,
        max_length=1,
        description="Comment leader; lines starting with it are skipped. None disables comments.",
    )
    encoding: str = Field(default="utf-8", description="Text encoding of manifest files")

    @model_validator(mode="after")
    def _check_dialect(self) -> ParseOptions:
        if self.delimiter in _RESERVED_CHARS:
            raise ValueError(f"invalid delimiter: {self.delimiter!r}")
        if self.comment is not None:
            if self.comment in _RESERVED_CHARS:
                raise ValueError(f"invalid comment leader: {self.comment!r}")
            if self.comment == self.delimiter:
                raise ValueError("comment leader and delimiter must differ")
        return self

    def with_overrides(self, **overrides: Any) -> ParseOptions:
        """
        Return a copy with the given non-None settings replaced.

        Args:
            **overrides: Option values; None entries are ignored.

        Returns:
            New validated ParseOptions.
        """
        data = self.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return ParseOptions.model_validate(data)

    def without_comments(self) -> ParseOptions:
        """Return a copy that reads comment lines as ordinary records."""
        data = self.model_dump()
        data["comment"] = None
        return ParseOptions.model_validate(data)

    @classmethod
    def from_yaml(cls, path: str | Path) -> ParseOptions:
        """
        Load options from a YAML file.

        Expected format:
        ```yaml
        delimiter: ","
        comment: ";"
        encoding: utf-8
        ```

        An explicit ``comment: null`` disables comment handling. A missing
        key keeps its default.

        Args:
            path: Path to YAML file.

        Returns:
            Loaded ParseOptions.
        """
        import yaml

        data = yaml.safe_load(Path(path).read_text()) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Options file must contain a mapping: {path}")
        return cls.model_validate(data)
