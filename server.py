import uvicorn
from loguru import logger

from medbook.api.app import create_app
from medbook.config import AppConfig


def main() -> None:
    config = AppConfig()
    app = create_app(config)

    logger.info("Starting medbook on http://{}:{}", config.server.host, config.server.port)
    uvicorn.run(app, host=config.server.host, port=config.server.port)


if __name__ == "__main__":
    main()
