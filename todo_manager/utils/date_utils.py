"""
Centralized date/time utilities
All timestamps are timezone-aware UTC
"""

from datetime import date, datetime, timezone


def get_current_datetime() -> datetime:
    """
    Get current datetime in UTC
    
    Returns:
        Current timezone-aware datetime
    """
    return datetime.now(timezone.utc)


def get_current_date() -> date:
    """Get current local calendar date"""
    return date.today()


def to_timestamp(value: datetime) -> float:
    """Convert a datetime to epoch seconds (naive values are taken as UTC)"""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.timestamp()


def from_timestamp(ts: float) -> datetime:
    """Convert epoch seconds to a UTC datetime"""
    return datetime.fromtimestamp(ts, tz=timezone.utc)


def get_backup_timestamp() -> str:
    """
    Get timestamp for backup file names
    
    Format: "YYYY-MM-DDTHH-MM-SS"
    Example: "2025-11-13T15-30-45"
    """
    return get_current_datetime().strftime("%Y-%m-%dT%H-%M-%S")
