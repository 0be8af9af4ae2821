"""
Manifest problem reporting.

Two severities are kept apart:

- ``ManifestWarning`` is a value describing one bad record. Parsing carries on
  and the warning is returned next to the records that did parse.
- ``ManifestError`` is raised when the stream itself cannot be trusted
  (broken quoting, unreadable file). Nothing parsed so far is returned.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class WarningKind(str, Enum):
    """Kind of record-level problem."""

    INVALID_FIELD_COUNT = "invalid_field_count"
    INVALID_COORDINATE = "invalid_coordinate"


class ErrorKind(str, Enum):
    """Kind of stream-level failure."""

    SYNTAX = "syntax"
    IO = "io"


class ManifestWarning(BaseModel):
    """A recoverable problem with a single manifest record."""

    model_config = ConfigDict(frozen=True)

    kind: WarningKind = Field(description="Type of problem")
    message: str = Field(description="Human readable description")
    path: str = Field(description="Manifest the record came from")
    line: int = Field(ge=1, description="Line on which the record starts")
    record: tuple[str, ...] = Field(description="Tokenized record fields")
    data: str = Field(description="Raw record text")

    # Set for coordinate failures only
    field: str | None = Field(default=None, description="Offending field text")
    column: str | None = Field(default=None, description="Offending column name")

    def __str__(self) -> str:
        return f"invalid CSV record in {self.path} line {self.line}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return self.model_dump(mode="json")

    @classmethod
    def invalid_field_count(
        cls,
        path: str,
        line: int,
        fields: list[str],
        data: str,
    ) -> ManifestWarning:
        """
        Create a warning for a record that is neither 2 nor 6 fields long.

        Args:
            path: Manifest identifier.
            line: Line on which the record starts.
            fields: Tokenized fields.
            data: Raw record text.

        Returns:
            ManifestWarning with invalid field count kind.
        """
        return cls(
            kind=WarningKind.INVALID_FIELD_COUNT,
            message=f"invalid number of image CSV fields ({len(fields)}): {data!r}",
            path=path,
            line=line,
            record=tuple(fields),
            data=data,
        )

    @classmethod
    def invalid_coordinate(
        cls,
        path: str,
        line: int,
        fields: list[str],
        data: str,
        column: str,
        field: str,
        reason: str,
    ) -> ManifestWarning:
        """
        Create a warning for a partial image with a bad coordinate.

        Args:
            path: Manifest identifier.
            line: Line on which the record starts.
            fields: Tokenized fields.
            data: Raw record text.
            column: Coordinate column name (ax, ay, bx or by).
            field: Text that failed to parse.
            reason: Parse failure detail.

        Returns:
            ManifestWarning with invalid coordinate kind.
        """
        return cls(
            kind=WarningKind.INVALID_COORDINATE,
            message=f"failed to parse image coordinate {column}: {reason}",
            path=path,
            line=line,
            record=tuple(fields),
            data=data,
            column=column,
            field=field,
        )


class ManifestError(Exception):
    """The manifest stream is unreadable or syntactically broken."""

    def __init__(
        self,
        message: str,
        path: str,
        kind: ErrorKind = ErrorKind.SYNTAX,
        line: int | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.path = path
        self.kind = kind
        self.line = line

    def __str__(self) -> str:
        where = self.path if self.line is None else f"{self.path} line {self.line}"
        return f"{where}: {self.message}"
