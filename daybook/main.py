"""Process entrypoint for the `daybook-api` console script."""

import uvicorn

from daybook.core.config import get_settings


def run() -> None:
    settings = get_settings()
    # Factory mode builds the app inside the worker, so reload picks up code changes.
    uvicorn.run(
        "daybook.core.app:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
