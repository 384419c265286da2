"""
Task model
"""

from typing import Optional, Dict, Any
from datetime import date, datetime
from enum import Enum
from pydantic import BaseModel, Field, ConfigDict, field_validator
from todo_manager.utils.date_parser import parse_due_date


class TaskStatus(str, Enum):
    """Task status"""
    TODO = "todo"
    PROGRESS = "progress"
    COMPLETED = "completed"


class TaskPriority(str, Enum):
    """Task priority"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskCategory(str, Enum):
    """Task category"""
    GENERAL = "general"
    WORK = "work"
    PERSONAL = "personal"
    SHOPPING = "shopping"
    HEALTH = "health"
    STUDY = "study"


def clean_title(title: Optional[str]) -> str:
    """
    Trim a task title and reject empty ones
    
    Args:
        title: Raw title
        
    Returns:
        Trimmed title
        
    Raises:
        ValueError: If the title is missing or blank
    """
    if title is None or not title.strip():
        raise ValueError("Title is required")
    return title.strip()


class Task(BaseModel):
    """Task model"""
    
    model_config = ConfigDict(populate_by_name=True)
    
    id: str
    title: str
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    category: TaskCategory = TaskCategory.GENERAL
    due_date: Optional[date] = Field(None, alias="dueDate")
    created_at: datetime = Field(..., alias="createdAt")
    
    @field_validator("due_date", mode="before")
    @classmethod
    def _parse_due_date(cls, value):
        return parse_due_date(value)
    
    def to_json(self) -> Dict[str, Any]:
        """JSON representation with camelCase keys"""
        return self.model_dump(mode="json", by_alias=True)
    
    def to_create_payload(self) -> Dict[str, Any]:
        """Fields needed to re-create an equivalent task (new id and createdAt)"""
        return {
            "title": self.title,
            "status": self.status.value,
            "priority": self.priority.value,
            "category": self.category.value,
            "dueDate": self.due_date.isoformat() if self.due_date else None,
        }


class TaskCreate(BaseModel):
    """Task creation model"""
    
    model_config = ConfigDict(populate_by_name=True)
    
    title: str
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    category: TaskCategory = TaskCategory.GENERAL
    due_date: Optional[date] = Field(None, alias="dueDate")
    
    @field_validator("title")
    @classmethod
    def _clean_title(cls, value: str) -> str:
        return clean_title(value)
    
    @field_validator("due_date", mode="before")
    @classmethod
    def _parse_due_date(cls, value):
        return parse_due_date(value)
    
    @field_validator("status", "priority", "category", mode="before")
    @classmethod
    def _default_when_empty(cls, value, info):
        # Empty values take the defaults, like omitted ones
        if value is None or value == "":
            return cls.model_fields[info.field_name].default
        return value


class TaskUpdate(BaseModel):
    """Task update model; only the fields present in the request are applied"""
    
    model_config = ConfigDict(populate_by_name=True)
    
    title: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    category: Optional[TaskCategory] = None
    due_date: Optional[date] = Field(None, alias="dueDate")
    
    @field_validator("title")
    @classmethod
    def _clean_title(cls, value: Optional[str]) -> str:
        return clean_title(value)
    
    @field_validator("status", "priority", "category")
    @classmethod
    def _reject_null(cls, value, info):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value
    
    @field_validator("due_date", mode="before")
    @classmethod
    def _parse_due_date(cls, value):
        return parse_due_date(value)
    
    def changes(self) -> Dict[str, Any]:
        """Fields explicitly supplied by the caller"""
        return self.model_dump(exclude_unset=True)


class PendingUndo(BaseModel):
    """Snapshot of the most recently deleted task and the instant its undo expires"""
    task: Task
    expires_at: datetime
    
    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at
