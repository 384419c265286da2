"""
Application settings and configuration
"""

import os
from dotenv import load_dotenv
from todo_manager.config.constants import REQUEST_TIMEOUT, UNDO_DURATION, LOG_MAX_BYTES, LOG_BACKUP_COUNT

# Load environment variables from .env in the working directory
load_dotenv()


class Settings:
    """Application settings loaded from environment variables"""
    
    # Storage
    DATABASE_PATH: str = os.getenv("DATABASE_PATH", "todos.sqlite3")
    
    # Server
    API_PREFIX: str = os.getenv("API_PREFIX", "")
    WEB_HOST: str = os.getenv("WEB_HOST", "0.0.0.0")
    WEB_PORT: int = int(os.getenv("WEB_PORT", "5000"))
    
    # Client
    API_BASE_URL: str = os.getenv("API_BASE_URL", "http://localhost:5000")
    REQUEST_TIMEOUT: float = float(os.getenv("REQUEST_TIMEOUT", str(REQUEST_TIMEOUT)))
    UNDO_DURATION: float = float(os.getenv("UNDO_DURATION", str(UNDO_DURATION)))
    
    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_DIR: str = os.getenv("LOG_DIR", "logs")
    LOG_MAX_BYTES: int = int(os.getenv("LOG_MAX_BYTES", str(LOG_MAX_BYTES)))
    LOG_BACKUP_COUNT: int = int(os.getenv("LOG_BACKUP_COUNT", str(LOG_BACKUP_COUNT)))
    
    @classmethod
    def validate(cls) -> bool:
        """Validate settings that cannot be checked by their type"""
        if cls.API_PREFIX and not cls.API_PREFIX.startswith("/"):
            raise ValueError(f"API_PREFIX must start with '/': {cls.API_PREFIX!r}")
        
        if cls.UNDO_DURATION <= 0:
            raise ValueError(f"UNDO_DURATION must be positive: {cls.UNDO_DURATION}")
        
        return True


# Global settings instance
settings = Settings()
