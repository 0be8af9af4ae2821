"""
imagemanifest: tolerant parser for CSV image manifests.

Reads full and partial (cropped) image references, collecting per-record
warnings instead of failing on the first bad line.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
