"""Run the API server: `python -m eduportal`."""

import uvicorn

from .config import Settings


def main():
    settings = Settings()
    uvicorn.run("eduportal.main:app", host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
