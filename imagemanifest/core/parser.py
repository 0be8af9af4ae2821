"""
Image manifest parser.

Decodes a CSV manifest where every record is one of:

1. a full image: ``name,image path``
2. a partial image: ``name,image path,ax,ay,bx,by`` where the four
   coordinates are unsigned integers
3. a comment starting with ``;`` (ignored)

Records that match neither shape produce warnings and are skipped. A stream
that cannot be tokenized (unbalanced quotes, read failure) raises
ManifestError and nothing is returned.
"""

from __future__ import annotations

import csv
import re
import sys
from enum import Enum
from typing import Any, Iterable, Iterator

from pydantic import BaseModel, ConfigDict, Field

from imagemanifest.core.issues import ErrorKind, ManifestError, ManifestWarning
from imagemanifest.core.options import ParseOptions
from imagemanifest.core.schema import (
    COORDINATE_COLUMNS,
    MAX_COORDINATE,
    Image,
    PartialImage,
)

_DIGITS = re.compile(r"[0-9]+")

# Fields have no length limit of their own; csv defaults to 131072 characters.
# The C long behind csv.field_size_limit may be 32 bits wide.
FIELD_SIZE_LIMIT = min(sys.maxsize, 2**31 - 1)


class RecordKind(str, Enum):
    """Shape of a tokenized record, decided by its field count."""

    FULL = "full"
    PARTIAL = "partial"
    INVALID = "invalid"


class ManifestResult(BaseModel):
    """Records and warnings read from one manifest, in stream order."""

    model_config = ConfigDict(frozen=True)

    source: str = Field(description="Manifest identifier")
    images: tuple[Image, ...] = Field(default=())
    partial_images: tuple[PartialImage, ...] = Field(default=())
    warnings: tuple[ManifestWarning, ...] = Field(default=())

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON/YAML output."""
        return self.model_dump(mode="json")


def classify_record(fields: list[str]) -> RecordKind:
    """Classify a record by its number of fields."""
    if len(fields) == 2:
        return RecordKind.FULL
    if len(fields) == 6:
        return RecordKind.PARTIAL
    return RecordKind.INVALID


def parse_coordinate(text: str) -> int:
    """
    Parse an unsigned base-10 coordinate.

    Only ASCII digits are accepted: no sign, whitespace, underscores or
    decimal point. The value must fit in 64 bits.

    Raises:
        ValueError: If the text is not a valid coordinate.
    """
    if not _DIGITS.fullmatch(text):
        raise ValueError(f"parsing {text!r}: invalid syntax")
    # 2**64 - 1 has 20 digits; skip int() on anything longer
    if len(text.lstrip("0")) > 20:
        raise ValueError(f"parsing {text!r}: value out of range")
    value = int(text)
    if value > MAX_COORDINATE:
        raise ValueError(f"parsing {text!r}: value out of range")
    return value


def find_bare_quote(raw: str, delimiter: str) -> int | None:
    """
    Find a ``"`` inside an unquoted field of a raw record.

    Only fields that start with a quote may contain quotes. csv.reader keeps
    such stray quotes as text, so they are checked separately here.

    Returns:
        Offset of the first bare quote, or None.
    """
    field_start = True
    in_quotes = False
    i = 0
    while i < len(raw):
        c = raw[i]
        if in_quotes:
            if c == '"':
                if raw[i + 1 : i + 2] == '"':
                    i += 1
                else:
                    in_quotes = False
        elif field_start and c == '"':
            in_quotes = True
            field_start = False
        elif c == delimiter or c in "\r\n":
            field_start = True
        elif c == '"':
            return i
        else:
            field_start = False
        i += 1
    return None


class _RecordLines:
    """
    Line source for csv.reader that drops comment lines.

    A line is only a comment when it starts a new record; continuation lines
    of a multi-line quoted field are passed through untouched. The caller
    sets ``at_record_start`` before asking the reader for each record.

    CRLF endings are turned into LF, so line breaks inside quoted fields
    read back as ``\\n``. The lines of the current record are kept in
    ``record_text``.
    """

    def __init__(self, lines: Iterable[str], comment: str | None):
        self._lines = iter(lines)
        self._comment = comment
        self.at_record_start = True
        self.line_num = 0
        self.record_line = 0
        self.record_text: list[str] = []

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        while True:
            line = next(self._lines)
            self.line_num += 1
            if line.endswith("\r\n"):
                line = line[:-2] + "\n"
            if self.at_record_start:
                if self._comment is not None and line.startswith(self._comment):
                    continue
                self.record_line = self.line_num
                self.record_text = []
                self.at_record_start = False
            self.record_text.append(line)
            return line


def parse_manifest(
    stream: Iterable[str],
    source: str = "<stream>",
    options: ParseOptions | None = None,
) -> ManifestResult:
    """
    Parse image definitions from a text stream.

    The stream is read to the end but never closed. Open files with
    ``newline=""`` so quoted fields keep their embedded line breaks.

    Empty lines are skipped without a warning. A line holding only
    whitespace is a one-field record and is warned about.

    Args:
        stream: Text stream or any iterable of lines.
        source: Identifier used in warnings and errors.
        options: Dialect options (defaults to comma + ``;`` comments).

    Returns:
        ManifestResult with images, partial images and warnings.

    Raises:
        ManifestError: If the stream is syntactically broken or unreadable.
    """
    previous_limit = csv.field_size_limit(FIELD_SIZE_LIMIT)
    try:
        return _parse(stream, source, options or ParseOptions())
    finally:
        csv.field_size_limit(previous_limit)


def _parse(stream: Iterable[str], source: str, options: ParseOptions) -> ManifestResult:
    lines = _RecordLines(stream, options.comment)
    reader = csv.reader(lines, delimiter=options.delimiter, strict=True)

    images: list[Image] = []
    partial_images: list[PartialImage] = []
    warnings: list[ManifestWarning] = []

    while True:
        lines.at_record_start = True
        try:
            fields = next(reader)
        except StopIteration:
            break
        except csv.Error as e:
            raise ManifestError(str(e), source, ErrorKind.SYNTAX, lines.record_line) from e
        except (OSError, UnicodeDecodeError) as e:
            raise ManifestError(str(e), source, ErrorKind.IO, lines.line_num + 1) from e

        if not fields:
            continue

        line = lines.record_line
        raw = "".join(lines.record_text)
        bare = find_bare_quote(raw, options.delimiter)
        if bare is not None:
            raise ManifestError(
                'bare " in non-quoted field',
                source,
                ErrorKind.SYNTAX,
                line + raw.count("\n", 0, bare),
            )

        kind = classify_record(fields)

        if kind == RecordKind.FULL:
            images.append(Image(name=fields[0], path=fields[1]))
        elif kind == RecordKind.PARTIAL:
            coords: dict[str, int] = {}
            for column, text in zip(COORDINATE_COLUMNS, fields[2:]):
                try:
                    coords[column] = parse_coordinate(text)
                except ValueError as e:
                    warnings.append(
                        ManifestWarning.invalid_coordinate(
                            path=source,
                            line=line,
                            fields=fields,
                            data=options.delimiter.join(fields),
                            column=column,
                            field=text,
                            reason=str(e),
                        )
                    )
                    break
            else:
                partial_images.append(
                    PartialImage(name=fields[0], path=fields[1], **coords)
                )
        else:
            warnings.append(
                ManifestWarning.invalid_field_count(
                    path=source,
                    line=line,
                    fields=fields,
                    data=options.delimiter.join(fields),
                )
            )

    return ManifestResult(
        source=source,
        images=tuple(images),
        partial_images=tuple(partial_images),
        warnings=tuple(warnings),
    )
