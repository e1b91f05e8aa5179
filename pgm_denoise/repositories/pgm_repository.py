from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Iterator, List, Union

import numpy as np

from ..models.errors import (
    PgmParseError,
    PgmReadError,
    PgmWriteError,
    UnsupportedFormatError,
)
from ..models.image import Image
from ..models.reader_state import ReaderState

logger = logging.getLogger(__name__)

P2_TAG = "P2"
MAX_GRAY = 255
PGM_SUFFIX = ".pgm"

_UNSIGNED = re.compile(r"[0-9]+")
_NETPBM_MAGIC = re.compile(r"P[1-7]")


def _parse_unsigned(token: str) -> int | None:
    if _UNSIGNED.fullmatch(token) is None:
        return None
    return int(token)


class PgmRepository:
    """
    Handles file I/O for Image entities stored as ASCII (P2) PGM.
    No filtering logic in here.
    """

    @staticmethod
    def create_image(width: int, height: int, pixels: np.ndarray, path: Union[str, Path] = None) -> Image:
        pixels = np.asarray(pixels, dtype=np.uint8).reshape(-1)
        if path is None:
            return Image(width, height, pixels)
        return Image(width=width, height=height, pixels=pixels, path=Path(path))

    # ---------- reading ----------
    @staticmethod
    def parse_lines(lines: Iterable[str], path: Union[str, Path] = None) -> Image:
        """
        Parse the lines of a P2 file into an Image.

        Comment lines (leading '#') and blank lines are skipped in every state.
        The pixel count is NOT checked against width * height here.
        """
        state = ReaderState.EXPECTING_TAG
        width = height = 0
        values: List[int] = []

        for line_number, raw in enumerate(lines, start=1):
            line = raw.strip()
            if not line or line.startswith("#"):
                continue

            if state is ReaderState.EXPECTING_TAG:
                if line == P2_TAG:
                    state = ReaderState.EXPECTING_DIMENSIONS
                    continue
                if _NETPBM_MAGIC.fullmatch(line):
                    raise UnsupportedFormatError(
                        f"Only ASCII PGM ({P2_TAG}) is supported, found {line}", path, line_number
                    )
                # No tag line: this line has to be the dimensions.
                state = ReaderState.EXPECTING_DIMENSIONS

            if state is ReaderState.EXPECTING_DIMENSIONS:
                if line == P2_TAG:
                    continue
                tokens = line.split()
                dims = [_parse_unsigned(t) for t in tokens]
                if len(dims) != 2 or None in dims:
                    raise PgmParseError(f"Invalid dimensions line {line!r}, expected '<width> <height>'",
                                        path, line_number)
                width, height = dims
                state = ReaderState.EXPECTING_MAX_VALUE

            elif state is ReaderState.EXPECTING_MAX_VALUE:
                if line == P2_TAG:
                    continue
                max_value = _parse_unsigned(line)
                if max_value is None:
                    raise PgmParseError(f"Invalid maximum gray value line {line!r}", path, line_number)
                if max_value > MAX_GRAY:
                    raise UnsupportedFormatError(
                        f"Maximum gray value {max_value} exceeds {MAX_GRAY}", path, line_number
                    )
                if max_value == 0:
                    raise PgmParseError("Maximum gray value must be positive", path, line_number)
                state = ReaderState.READING_PIXELS

            elif state is ReaderState.READING_PIXELS:
                for token in line.split():
                    value = _parse_unsigned(token)
                    if value is None or value > MAX_GRAY:
                        raise PgmParseError(f"Invalid pixel value {token!r}", path, line_number)
                    values.append(value)

        if state.in_header:
            logger.debug(f"{path or '<input>'}: ended in state {state.value}, no pixel data")

        pixels = np.array(values, dtype=np.uint8)
        return Image(width=width, height=height, pixels=pixels, path=Path(path) if path is not None else None)

    @classmethod
    def load(cls, path: Union[str, Path]) -> Image:
        path = Path(path)
        try:
            with path.open("r", encoding="utf-8") as fh:
                image = cls.parse_lines(fh, path)
        except UnicodeDecodeError as err:
            raise PgmParseError(f"Not a text file ({err.reason})", path) from err
        except OSError as err:
            raise PgmReadError(path, err.strerror or str(err)) from err

        logger.debug(f"Loaded {path}: {image.width}x{image.height}, {image.pixel_count} pixels")
        return image

    # ---------- writing ----------
    @staticmethod
    def encode(image: Image) -> str:
        """
        Serialize to P2 text: every value is followed by a space and a newline
        follows every width-th value. A trailing partial row gets no newline.
        """
        parts = [f"{P2_TAG}\n", f"{image.width} {image.height}\n", f"{MAX_GRAY}\n"]
        for i, value in enumerate(image.pixels.tolist(), start=1):
            parts.append(f"{value} ")
            if image.width and i % image.width == 0:
                parts.append("\n")
        return "".join(parts)

    @classmethod
    def save(cls, image: Image, path: Union[str, Path] = None) -> Path:
        target = Path(path) if path is not None else image.path
        if target is None:
            raise ValueError("Image has no path to save to")

        content = cls.encode(image)
        try:
            with target.open("w", encoding="ascii", newline="") as fh:
                fh.write(content)
        except OSError as err:
            raise PgmWriteError(target, err.strerror or str(err)) from err
        return target

    # ---------- directories ----------
    @staticmethod
    def ensure_dir(folder: Union[str, Path]) -> Path:
        folder = Path(folder)
        try:
            folder.mkdir(parents=True, exist_ok=True)
        except OSError as err:
            raise PgmWriteError(folder, err.strerror or str(err)) from err
        return folder

    @staticmethod
    def iter_dir(folder: Union[str, Path], *, suffix: str = PGM_SUFFIX) -> Iterator[Path]:
        """
        Yield the regular files directly inside *folder* whose suffix is exactly
        *suffix*, in directory listing order (unsorted).
        """
        folder = Path(folder)
        try:
            entries = list(folder.iterdir())
        except OSError as err:
            raise PgmReadError(folder, err.strerror or str(err)) from err

        for p in entries:
            if p.suffix != suffix:
                logger.debug(f"Skipping due to extension: {p}")
                continue
            try:
                is_regular = p.is_file()
            except OSError as err:
                raise PgmReadError(p, err.strerror or str(err)) from err
            if not is_regular:
                logger.debug(f"Skipping because not file: {p}")
                continue
            yield p
