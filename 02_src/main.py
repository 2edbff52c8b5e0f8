"""Main entry point for the Roboclic bot."""

import uvicorn
from dotenv import load_dotenv

from roboclic.api import create_fastapi_app
from roboclic.config import PROJECT_ROOT, get_settings
from roboclic.logging_config import setup_logging


def main():
    """Run the bot webhook server."""
    load_dotenv(PROJECT_ROOT / ".env")

    settings = get_settings()
    setup_logging(settings.log_level)

    app = create_fastapi_app()

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level="info",
        log_config=None,  # keep the JSON logging set up above
    )


if __name__ == "__main__":
    main()
