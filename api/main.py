import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core import config, db
from core.middleware import RequestContextMiddleware
from resources import router as resources_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Initialize the DB pool once per process.
    await db.init_pool()
    try:
        await db.ensure_schema()
        yield
    finally:
        await db.close_pool()


def create_app() -> FastAPI:
    app = FastAPI(title="Simple Resource Service", lifespan=lifespan)

    origins = config.cors_allowed_origins()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_origin_regex=None if origins else config.DEFAULT_CORS_ORIGIN_REGEX,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Accept", "Authorization", "Content-Type", "X-CSRF-Token"],
        expose_headers=["Link"],
        max_age=300,
    )
    app.add_middleware(RequestContextMiddleware)

    app.include_router(resources_router.router, tags=["resources"])

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=config.log_level())
    logger.info("Listening for requests at http://%s:%s", config.host(), config.port())
    uvicorn.run(app, host=config.host(), port=config.port(), log_level=config.log_level().lower())
