"""
Main application entry point
"""

import sys
import uvicorn
from todo_manager.config.settings import settings
from todo_manager.services.task_store import TaskStore
from todo_manager.utils.error_handler import StoreFault
from todo_manager.utils.logger import logger
from todo_manager.web.main import create_app


def main():
    """Open the task store and serve the Task API"""
    try:
        settings.validate()
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)
    
    try:
        store = TaskStore(settings.DATABASE_PATH)
    except StoreFault as e:
        logger.error(f"Task store connection error: {e}")
        sys.exit(1)
    
    app = create_app(store)
    
    logger.info(f"Server running on http://localhost:{settings.WEB_PORT}")
    logger.info(f"API: http://localhost:{settings.WEB_PORT}{settings.API_PREFIX}/todos")
    uvicorn.run(app, host=settings.WEB_HOST, port=settings.WEB_PORT)


if __name__ == "__main__":
    main()
