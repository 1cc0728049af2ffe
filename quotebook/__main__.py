"""Run the API with uvicorn: ``python -m quotebook``."""
import uvicorn

from quotebook.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "quotebook.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
    )


if __name__ == "__main__":
    main()
