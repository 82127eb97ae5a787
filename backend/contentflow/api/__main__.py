"""API server entry point for python -m contentflow.api"""
import uvicorn

from contentflow import configure_logging
from contentflow.config import settings

if __name__ == "__main__":
    configure_logging(settings.logging.level)
    uvicorn.run(
        "contentflow.api.app:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=False,
    )
