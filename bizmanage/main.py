"""
BizManage Pro API

Application entry point: `uvicorn bizmanage.main:app` or the
`bizmanage-api` console script.
"""

import uvicorn

from bizmanage.config import get_settings
from bizmanage.serving.api import create_api_app

app = create_api_app()


def run() -> None:
    """Serve the API with the host, port and worker count from settings."""
    settings = get_settings()
    uvicorn.run(
        "bizmanage.main:app",
        host=settings.api_host,
        port=settings.api_port,
        workers=1 if settings.is_development else settings.api_workers,
        reload=settings.is_development,
        log_level=settings.monitoring.log_level.lower(),
        proxy_headers=True,
        server_header=False,
    )


if __name__ == "__main__":
    run()
