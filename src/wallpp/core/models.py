"""Pydantic models for images, wallpapers and the cache document.

These models define both the in-memory records passed between the pipeline
stages and the JSON schema of the cache file. Field names in JSON are
camelCase (``compositeImage``, ``sourceImages``) so cache files written by
earlier versions stay readable; Python code uses the snake_case attribute
names.

Models
------
ImageRecord
    One probed image: where it lives, its identity and its aspect ratio.
Wallpaper
    A written composite plus the ordered source images that produced it.
CacheDocument
    The on-disk root object, ``{"wallpapers": [...]}``.
RunSummary
    Counters reported at the end of a run.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field


class ImageRecord(BaseModel):
    """A probed image.

    Identity is ``filename``; two records with the same filename are treated
    as the same image even when their paths differ.

    Attributes:
        filepath: Canonical path of the file.
        filename: Final path component, unique within a run.
        ratio: Width divided by height, always positive.
    """

    model_config = ConfigDict(frozen=True)

    filepath: str = Field(..., description="Canonical path of the image file.")
    filename: str = Field(..., description="File name; the record's identity.")
    ratio: float = Field(..., gt=0, description="Width / height.")


class Wallpaper(BaseModel):
    """A composite image and the provenance of everything that went into it.

    Attributes:
        composite_image: The written composite.
        source_images: Original source images in the order they were
            consumed, including sources carried over from any older
            composite this one absorbed.
    """

    model_config = ConfigDict(populate_by_name=True)

    composite_image: ImageRecord = Field(..., alias="compositeImage")
    source_images: list[ImageRecord] = Field(default_factory=list, alias="sourceImages")

    def source_filenames(self) -> set[str]:
        """Return the identities of all source images."""
        return {image.filename for image in self.source_images}


class CacheDocument(BaseModel):
    """Root object of ``database.json``."""

    wallpapers: list[Wallpaper] = Field(default_factory=list)


@dataclass
class RunSummary:
    """Counters describing what a single run did."""

    catalog_size: int = 0
    invalidated: int = 0
    regenerated: int = 0
    composites_written: int = 0
    composites_subsumed: int = 0
