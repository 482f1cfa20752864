"""Run the API server: ``python -m issuetrack``."""
import uvicorn

from issuetrack.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "issuetrack.api.app:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
