"""Activity feed use cases."""

from .feed import (
    get_activity_detail,
    get_activity_feed,
    ingest_activity,
    list_activities,
    mark_content_deleted,
)
from .grouping import (
    extract_first_name,
    group_activities,
    group_key_for,
    grouped_activity_text,
)
from .normalizer import (
    NormalizationError,
    normalize,
    normalize_many,
    parse_metadata,
    visible_activities,
)

__all__ = [
    "get_activity_detail",
    "get_activity_feed",
    "ingest_activity",
    "list_activities",
    "mark_content_deleted",
    "extract_first_name",
    "group_activities",
    "group_key_for",
    "grouped_activity_text",
    "NormalizationError",
    "normalize",
    "normalize_many",
    "parse_metadata",
    "visible_activities",
]
