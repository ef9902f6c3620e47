import uvicorn

from trippino.core.app import create_app
from trippino.core.settings import settings

app = create_app()


def run() -> None:
    uvicorn.run(
        "trippino.main:app",
        host=settings.uvicorn_host,
        port=settings.uvicorn_port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
