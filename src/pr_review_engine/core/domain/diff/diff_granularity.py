from enum import StrEnum


class DiffGranularity(StrEnum):
    """How a raw diff is cut into review units."""

    FILE = "file"
    HUNK = "hunk"
