"""Run the service with uvicorn: `python -m intake`."""

import uvicorn

from intake.config import settings


def main() -> None:
    uvicorn.run(
        "intake.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
