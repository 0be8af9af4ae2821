"""Manifest file I/O."""

from imagemanifest.io.manifest_rw import (
    dump_manifest,
    format_record,
    read_manifest,
    write_manifest,
)

__all__ = [
    "dump_manifest",
    "format_record",
    "read_manifest",
    "write_manifest",
]
