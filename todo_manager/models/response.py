"""
Response models for the Task API
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from todo_manager.models.task import Task


class ErrorResponse(BaseModel):
    """Error response model"""
    error: str
    status_code: int = Field(500, exclude=True)


class DeleteResponse(BaseModel):
    """Single delete response"""
    message: str = "Todo deleted successfully"
    todo: Task


class ClearResponse(BaseModel):
    """Delete-all response"""
    
    model_config = ConfigDict(populate_by_name=True)
    
    message: str = "All todos cleared successfully"
    deleted_count: int = Field(0, alias="deletedCount")


class HealthResponse(BaseModel):
    """Liveness probe response"""
    status: str = "OK"
    message: Optional[str] = "Server is running"
