"""Run the Favorite Places API.

Usage:
    python -m favplaces

Equivalent to `uvicorn favplaces.main:app --host $BACKEND_HOST --port $BACKEND_PORT`.
"""

import uvicorn

from favplaces.config import settings


def main() -> None:
    uvicorn.run(
        "favplaces.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
