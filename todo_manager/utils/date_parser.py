"""
Date parsing utilities for due dates
"""

from datetime import date, datetime, timedelta
from typing import Optional, Union
from todo_manager.utils.date_utils import get_current_date


def parse_due_date(value: Union[str, date, datetime, None]) -> Optional[date]:
    """
    Parse a due date into a calendar date
    
    Args:
        value: Date value (e.g., "2024-11-05", "2024-11-05T00:00:00.000Z",
            "today", "tomorrow", a date object, "" or None)
        
    Returns:
        Calendar date, or None when no deadline is given
        
    Raises:
        ValueError: If the value cannot be interpreted as a date
    """
    if value is None:
        return None
    
    if isinstance(value, datetime):
        return value.date()
    
    if isinstance(value, date):
        return value
    
    if not isinstance(value, str):
        raise ValueError(f"Invalid due date: {value!r}")
    
    date_str = value.strip()
    if not date_str:
        return None
    
    date_str_lower = date_str.lower()
    today = get_current_date()
    
    # Relative dates
    if date_str_lower == "today":
        return today
    
    if date_str_lower == "tomorrow":
        return today + timedelta(days=1)
    
    if date_str_lower == "yesterday":
        return today - timedelta(days=1)
    
    # Plain calendar date
    try:
        return date.fromisoformat(date_str)
    except ValueError:
        pass
    
    # ISO datetime, as written by older exports; the date part is kept
    try:
        return datetime.fromisoformat(date_str.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    
    raise ValueError(f"Invalid due date: {value!r}")
