"""
python -m restaurant_api 启动服务
"""

import uvicorn

from .config.settings import settings


def main():
    uvicorn.run(
        "restaurant_api.app:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
