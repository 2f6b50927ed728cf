from contextlib import AsyncExitStack

import anyio
from dotenv import load_dotenv
from fastapi import FastAPI
from loguru import logger

from fanwrite.api import WriteSettings, router
from fanwrite.config import Config
from fanwrite.depends import bind
from fanwrite.errors import ConfigurationError
from fanwrite.logging_config import setup_logging
from fanwrite.storage import StorageBackend


def make_app(storage: StorageBackend, settings: WriteSettings) -> FastAPI:
    app = FastAPI()
    app.include_router(router)
    bind(app, StorageBackend, storage)
    bind(app, WriteSettings, settings)
    return app


async def main(config: Config) -> None:
    import uvicorn

    from fanwrite.storage.memory import InMemoryBackend
    from fanwrite.storage.s3 import S3Storage

    async with AsyncExitStack() as stack:
        fs: StorageBackend
        if config.storage == "memory":
            fs = InMemoryBackend()
        else:
            fs = await stack.enter_async_context(
                S3Storage.connect(
                    region=config.region,
                    access_key_id=config.access_key_id,
                    access_key_secret=config.access_key_secret,
                    endpoint=config.endpoint,
                )
            )
        settings = WriteSettings(
            bucket=config.bucket,
            timeout=config.timeout,
            object_size=config.object_size,
        )
        app = make_app(fs, settings)

        logger.info("Starting server on port {} and writing to {}", config.port, config.bucket)
        server = uvicorn.Server(uvicorn.Config(app, host=config.host, port=config.port))
        await server.serve()


def run() -> None:
    load_dotenv()
    try:
        config = Config.from_env()
    except ConfigurationError as exc:
        setup_logging()
        logger.critical("Invalid configuration: {} {}", exc.message, exc.details or "")
        raise SystemExit(1) from exc
    setup_logging(level=config.log_level, json_format=config.json_logging)
    try:
        anyio.run(main, config)
    except Exception as exc:
        logger.opt(exception=exc).critical("Server exited with an error: {}", exc)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    run()
