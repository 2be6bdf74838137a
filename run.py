"""Entry point for the Trip Planner API server.

Runs the FastAPI application under Uvicorn.  Host and port come from
the ``HOST`` and ``PORT`` environment variables (defaults ``0.0.0.0``
and ``3000``).  On Ctrl+C or SIGTERM Uvicorn runs the application's
shutdown phase, which closes the database connection and the HTTP
client before the process exits.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from trip_planner_api.app.core.config import settings
from trip_planner_api.app.main import app


async def main() -> None:
    """Serve the API until the process is asked to stop."""
    config = Config(app=app, host=settings.host, port=settings.port, reload=False, log_level=settings.log_level.lower())
    server = Server(config)
    logging.getLogger(__name__).info(
        "Server running on http://%s:%s (environment: %s)", settings.host, settings.port, settings.environment
    )
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
