"""
Application constants
"""

# Task statuses
TASK_STATUSES = ("todo", "progress", "completed")

# Task defaults
TASK_DEFAULT_STATUS = "todo"
TASK_DEFAULT_PRIORITY = "medium"
TASK_DEFAULT_CATEGORY = "general"

# Store ids are uuid4 hex strings
TASK_ID_PATTERN = r"^[0-9a-f]{32}$"

# Client view
FILTER_ALL = "all"
DEFAULT_SORT = "newest"
PRIORITY_ORDER = {"high": 3, "medium": 2, "low": 1}
STATUS_CYCLE = {
    "todo": "progress",
    "progress": "completed",
    "completed": "todo",
}

# Undo window in seconds
UNDO_DURATION = 5

# HTTP client
REQUEST_TIMEOUT = 30  # seconds

# Export
EXPORT_FILE_PREFIX = "todo-backup"

# Logging
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_NAME = "todo_manager.log"
LOG_MAX_BYTES = 1_000_000
LOG_BACKUP_COUNT = 3
