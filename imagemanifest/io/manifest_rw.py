"""
Manifest Read/Write Utilities.

File-level entry points around the parser, and a writer producing manifests
that read back to the same records.
"""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Iterable

from imagemanifest.core.issues import ErrorKind, ManifestError
from imagemanifest.core.options import ParseOptions
from imagemanifest.core.parser import ManifestResult, parse_manifest
from imagemanifest.core.schema import Image, PartialImage


def read_manifest(
    path: str | Path,
    options: ParseOptions | None = None,
) -> ManifestResult:
    """
    Read and parse a manifest file.

    The file is opened read-only and always closed, even when parsing fails.

    Args:
        path: Path to the manifest.
        options: Dialect options.

    Returns:
        ManifestResult for the file.

    Raises:
        ManifestError: If the file cannot be opened or read, or is
            syntactically broken.

    Example:
        >>> result = read_manifest("images.csv")
        >>> for warning in result.warnings:
        ...     print(warning)
    """
    options = options or ParseOptions()
    path = Path(path)

    try:
        f = path.open("r", encoding=options.encoding, newline="")
    except OSError as e:
        raise ManifestError(
            f"cannot open manifest: {e.strerror or e}", str(path), ErrorKind.IO
        ) from e

    with f:
        return parse_manifest(f, source=str(path), options=options)


def format_record(
    record: Image,
    options: ParseOptions | None = None,
) -> str:
    """
    Format one image or partial image as a CSV line.

    Fields are quoted where needed. A first field starting with the comment
    leader is quoted too, so it is not read back as a comment.

    Args:
        record: Image or PartialImage.
        options: Dialect options.

    Returns:
        CSV line including the trailing newline.
    """
    options = options or ParseOptions()
    fields = record.to_record()

    quoting = csv.QUOTE_MINIMAL
    if options.comment is not None and fields[0].startswith(options.comment):
        quoting = csv.QUOTE_ALL

    buf = io.StringIO()
    writer = csv.writer(
        buf, delimiter=options.delimiter, quoting=quoting, lineterminator="\n"
    )
    writer.writerow(fields)
    return buf.getvalue()


def dump_manifest(
    images: Iterable[Image] = (),
    partial_images: Iterable[PartialImage] = (),
    options: ParseOptions | None = None,
) -> str:
    """Serialize images followed by partial images to manifest text."""
    lines = [format_record(image, options) for image in images]
    lines.extend(format_record(image, options) for image in partial_images)
    return "".join(lines)


def write_manifest(
    path: str | Path,
    images: Iterable[Image] = (),
    partial_images: Iterable[PartialImage] = (),
    options: ParseOptions | None = None,
) -> None:
    """
    Write a manifest file.

    Args:
        path: Output path; parent directories are created.
        images: Full images, written first.
        partial_images: Partial images, written after the full images.
        options: Dialect options.
    """
    options = options or ParseOptions()
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with path.open("w", encoding=options.encoding, newline="") as f:
        f.write(dump_manifest(images, partial_images, options))
