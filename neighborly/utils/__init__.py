"""Utility helpers for reusable functionality."""

from .datetime import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    get_app_timezone,
    local_calendar_day,
    now_in_app_naive_datetime,
    now_in_app_timezone,
    parse_timestamp,
)

__all__ = [
    "ensure_app_naive_datetime",
    "ensure_app_timezone",
    "get_app_timezone",
    "local_calendar_day",
    "now_in_app_naive_datetime",
    "now_in_app_timezone",
    "parse_timestamp",
]
