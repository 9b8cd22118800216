"""Run the API server with ``python -m educourse``."""

import uvicorn

from educourse.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "educourse.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        workers=1 if settings.api_reload else settings.api_workers,
        log_level=settings.log_level.lower(),
        # request logging is done by RequestContextMiddleware
        access_log=False,
    )


if __name__ == "__main__":
    main()
