import uvicorn

from resume_scan.core.app_factory import create_app
from resume_scan.core.config import load_settings


def main() -> None:
    settings = load_settings()
    uvicorn.run(
        create_app(settings),
        host=settings.app.host,
        port=settings.app.port,
    )


if __name__ == "__main__":
    main()
