"""
Error handling utilities
"""

from todo_manager.models.response import ErrorResponse
from todo_manager.utils.logger import logger


class TodoError(Exception):
    """Base exception for todo manager errors"""
    
    status_code = 500
    
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ValidationError(TodoError):
    """Missing/blank title, malformed id or a value outside its enumeration"""
    status_code = 400


class NotFoundError(TodoError):
    """Unknown task id"""
    status_code = 404


class StoreFault(TodoError):
    """Persistence unavailable or failed; also used for network failures on the client"""
    status_code = 500


def error_for_status(status_code: int, message: str) -> TodoError:
    """
    Map an HTTP status code back onto the error taxonomy
    
    Args:
        status_code: HTTP status of a failed response
        message: Error message from the response body
        
    Returns:
        Matching TodoError instance
    """
    if status_code == 404:
        return NotFoundError(message)
    if 400 <= status_code < 500:
        return ValidationError(message)
    return StoreFault(message)


def handle_error(error: Exception) -> ErrorResponse:
    """
    Handle error and return user-friendly message
    
    Args:
        error: Exception to handle
        
    Returns:
        ErrorResponse with user-friendly message
    """
    if isinstance(error, (ValidationError, NotFoundError)):
        logger.warning(f"Request rejected: {error}")
        return ErrorResponse(error=error.message, status_code=error.status_code)
    
    logger.error(f"Error occurred: {error}", exc_info=error)
    
    if isinstance(error, StoreFault):
        return ErrorResponse(error=error.message, status_code=error.status_code)
    
    # Generic error message
    return ErrorResponse(error="Internal server error", status_code=500)
