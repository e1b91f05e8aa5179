from __future__ import annotations
from pathlib import Path


class PgmError(Exception):
    """Base class for every error raised while reading, filtering or writing PGM files."""


class PgmReadError(PgmError):
    """A file could not be opened/read, or a directory could not be listed."""

    def __init__(self, path: Path | str, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot read {path}: {reason}")


class PgmParseError(PgmError):
    """The file content is not a valid ASCII (P2) PGM image."""

    def __init__(self, message: str, path: Path | str | None = None, line_number: int | None = None):
        self.message = message
        self.path = Path(path) if path is not None else None
        self.line_number = line_number
        location = str(path) if path is not None else "<input>"
        if line_number is not None:
            location = f"{location}:{line_number}"
        super().__init__(f"{location}: {message}")


class UnsupportedFormatError(PgmParseError):
    """Recognizable Netpbm content this reader does not handle (P5, PPM, max value > 255...)."""


class ShapeMismatchError(PgmError):
    def __init__(self, width: int, height: int, pixel_count: int, path: Path | str | None = None):
        self.width = width
        self.height = height
        self.pixel_count = pixel_count
        self.path = Path(path) if path is not None else None
        source = f" in {path}" if path is not None else ""
        super().__init__(
            f"Expected {width}x{height} = {width * height} pixels{source}, got {pixel_count}"
        )


class PgmWriteError(PgmError):
    """The output directory could not be created or a file could not be written."""

    def __init__(self, path: Path | str, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot write {path}: {reason}")


class BatchStepError(PgmError):
    """
    Wraps the failure of one pipeline step for one file, so the message always
    says which file and which step (read / filter / write) broke.
    """

    def __init__(self, path: Path | str, step: str, cause: Exception):
        self.path = Path(path)
        self.step = step
        self.cause = cause
        super().__init__(f"[{step}] {path}: {cause}")
