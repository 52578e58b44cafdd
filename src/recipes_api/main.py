"""Application entry point.

Usage:
    # Development with auto-reload
    uvicorn recipes_api.main:app --reload

    # Installed console script
    recipes-api
"""

import uvicorn

from recipes_api.core.config import get_settings
from recipes_api.factory import create_app


# Create the application instance
app = create_app()


def run() -> None:
    """Serve the app with uvicorn on the configured host and port."""
    settings = get_settings()

    uvicorn.run(
        "recipes_api.main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.is_development,
        log_level=settings.logging.level.lower(),
    )


if __name__ == "__main__":
    run()
