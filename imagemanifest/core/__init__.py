"""Core manifest handling: record schema, options, parser, problem reporting."""

from imagemanifest.core.schema import Image, PartialImage
from imagemanifest.core.issues import (
    ErrorKind,
    ManifestError,
    ManifestWarning,
    WarningKind,
)
from imagemanifest.core.options import ParseOptions
from imagemanifest.core.parser import (
    ManifestResult,
    RecordKind,
    classify_record,
    parse_coordinate,
    parse_manifest,
)

__all__ = [
    "Image",
    "PartialImage",
    "ErrorKind",
    "ManifestError",
    "ManifestWarning",
    "WarningKind",
    "ParseOptions",
    "ManifestResult",
    "RecordKind",
    "classify_record",
    "parse_coordinate",
    "parse_manifest",
]
