"""
Uvicorn launcher for the TickerLens API.

Usage:
    python -m tickerlens.api.main
"""

import uvicorn

from tickerlens.utils.logger import get_logger

logger = get_logger(__name__)


def start_api(host: str = "0.0.0.0", port: int = 8000, reload: bool = False):
    """
    Start the FastAPI server using Uvicorn.

    Args:
        host (str): Host address to bind.
        port (int): Port number to listen on.
        reload (bool): Restart on code changes (development only).
    """
    logger.info(f"Starting API server on {host}:{port}")
    uvicorn.run("tickerlens.api.main_api:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    start_api()
