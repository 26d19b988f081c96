"""
date_time_helper.py

Helper functions for date and time values. Timestamps are stored as UTC
ISO8601 strings; display uses the campus timezone (Asia/Manila).

All features should use ONLY these helpers for date/time logic.
"""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

# Local timezone for display
LOCAL_TZ = ZoneInfo("Asia/Manila")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """
    Returns the current UTC time as an ISO8601 string with millisecond precision.
    Used for activity log entries, revision notes and ``lastUpdated`` fields.
    """
    return utc_now().isoformat(timespec="milliseconds")


def date_stamp(day: date | None = None) -> str:
    return (day or datetime.now(LOCAL_TZ).date()).strftime("%Y-%m-%d")


def today_iso() -> str:
    """Local calendar date as ``YYYY-MM-DD`` (whitelist ``dateAdded``, content ``lastUpdated``)."""
    return date_stamp()


def utc_to_local_str(utc_iso: str) -> str:
    """
    Formats a UTC ISO8601 timestamp for display.

    :param utc_iso: UTC time as ISO string
    :return: String in format "MM/DD/YYYY HH:MM:SS" (local time)
    """
    dt_utc = datetime.fromisoformat(utc_iso.replace("Z", "+00:00"))
    if dt_utc.tzinfo is None:
        dt_utc = dt_utc.replace(tzinfo=timezone.utc)
    return dt_utc.astimezone(LOCAL_TZ).strftime("%m/%d/%Y %H:%M:%S")
