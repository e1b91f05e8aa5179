from enum import Enum


class ReaderState(Enum):
    """
    Phases of the line-oriented P2 parser.

    EXPECTING_TAG -> EXPECTING_DIMENSIONS -> EXPECTING_MAX_VALUE -> READING_PIXELS
    """
    EXPECTING_TAG = "expecting_tag"
    EXPECTING_DIMENSIONS = "expecting_dimensions"
    EXPECTING_MAX_VALUE = "expecting_max_value"
    READING_PIXELS = "reading_pixels"

    @property
    def in_header(self) -> bool:
        return self is not ReaderState.READING_PIXELS
