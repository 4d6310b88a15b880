"""FileMaker Data API client.

Every operation returns a FileMakerResult; none raise on server or
transport failure.
"""

from .layouts import get_layout_metadata, reduce_field_metadata
from .records import build_find_query, find_records
from .session import acquire_token, release_token

__all__ = [
    # Session
    "acquire_token",
    "release_token",
    # Records
    "build_find_query",
    "find_records",
    # Layouts
    "get_layout_metadata",
    "reduce_field_metadata",
]
