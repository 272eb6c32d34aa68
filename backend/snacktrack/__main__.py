"""Run the API with uvicorn on BACKEND_HOST:PORT (`python -m snacktrack`)."""

import uvicorn

from snacktrack.config import settings


def main() -> None:
    uvicorn.run(
        "snacktrack.main:app",
        host=settings.backend_host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
