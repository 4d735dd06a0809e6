"""Exception types raised by the wallpaper pipeline.

Every error the pipeline raises on purpose derives from :class:`WallppError`,
so the command line entry point can turn any of them into a non-zero exit
code with a single ``except`` clause. Library exceptions (Pillow, torch,
pydantic, json) are wrapped at the collaborator boundary with
``raise ... from e`` so the original traceback is kept.

Only :class:`ProbeError` is recovered from: a file that cannot be probed is
skipped while the catalog is built. Everything else aborts the run.
"""


class WallppError(Exception):
    """Base class for all wallpaper pipeline errors."""

    pass


class PathError(WallppError):
    """A directory or file could not be read."""

    pass


class ProbeError(WallppError):
    """No usable width/height could be determined for an image file."""

    pass


class DecodeError(WallppError):
    """An image file could not be decoded into a raster."""

    pass


class ResampleError(WallppError):
    """The upscaler or resize step failed."""

    pass


class WriteError(WallppError):
    """A composite image could not be written to disk."""

    pass


class CacheParseError(WallppError):
    """The wallpaper cache file exists but could not be parsed."""

    pass


__all__ = [
    "WallppError",
    "PathError",
    "ProbeError",
    "DecodeError",
    "ResampleError",
    "WriteError",
    "CacheParseError",
]
