"""Run the API with uvicorn: ``python -m comment_api``."""

import uvicorn

from comment_api.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "comment_api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        workers=settings.api_workers,
        reload=settings.api_reload and settings.is_development,
        log_config=None,  # structlog owns logging
    )


if __name__ == "__main__":
    main()
