"""
Image record schema.

A manifest row describes either a whole image or a crop rectangle within it.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# Coordinates must fit an unsigned 64-bit integer.
MAX_COORDINATE = 2**64 - 1

COORDINATE_COLUMNS = ("ax", "ay", "bx", "by")


class Image(BaseModel):
    """A full, unambiguous image reference."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Image name")
    path: str = Field(description="Path to the image file")

    def to_record(self) -> list[str]:
        """Fields of this image as a CSV record."""
        return [self.name, self.path]


class PartialImage(Image):
    """
    A crop rectangle within a referenced image.

    The corners are not required to be ordered: ``ax`` may exceed ``bx``
    and ``ay`` may exceed ``by``.
    """

    ax: int = Field(ge=0, le=MAX_COORDINATE, description="First corner x")
    ay: int = Field(ge=0, le=MAX_COORDINATE, description="First corner y")
    bx: int = Field(ge=0, le=MAX_COORDINATE, description="Second corner x")
    by: int = Field(ge=0, le=MAX_COORDINATE, description="Second corner y")

    @property
    def box(self) -> tuple[int, int, int, int]:
        return (self.ax, self.ay, self.bx, self.by)

    def to_record(self) -> list[str]:
        return [self.name, self.path, *(str(v) for v in self.box)]
