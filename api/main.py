import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI

from core.config import Settings
from core.db import Connection
from core.http import PermissiveCorsMiddleware, register_error_handlers
from core.logging import LogConfig, get_logger, setup_logging
from patients import router as patients_router
from patients.service import PatientService
from query import router as query_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Both sessions must be up before the first request is served.
    insert_db: Connection = app.state.insert_db
    read_db: Connection = app.state.read_db
    # Wait for both attempts so a session that opens late is still closed.
    results = await asyncio.gather(insert_db.connect(), read_db.connect(), return_exceptions=True)
    errors = [r for r in results if isinstance(r, BaseException)]
    if errors:
        for exc in errors:
            logger.error("DB connection error: %s", exc)
        await asyncio.gather(insert_db.close(), read_db.close())
        raise errors[0]

    settings: Settings = app.state.settings
    logger.info("Server running at http://%s:%s", settings.host, settings.port)
    try:
        yield
    finally:
        await asyncio.gather(insert_db.close(), read_db.close())


def create_app(
    settings: Settings | None = None,
    *,
    insert_db: Connection | None = None,
    read_db: Connection | None = None,
) -> FastAPI:
    if settings is None:
        settings = Settings.from_env()
    if insert_db is None:
        insert_db = Connection(name="insert", **settings.insert_dsn_params())
    if read_db is None:
        read_db = Connection(name="read", **settings.read_dsn_params())

    setup_logging(LogConfig(level=settings.log_level))

    # Anything outside the routes below answers 404.
    app = FastAPI(
        title="Patient SQL API",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        redirect_slashes=False,
    )
    app.state.settings = settings
    app.state.insert_db = insert_db
    app.state.read_db = read_db
    app.state.patient_service = PatientService(insert_db)

    app.add_middleware(PermissiveCorsMiddleware)
    register_error_handlers(app)

    app.include_router(patients_router.router, prefix=settings.api_base, tags=["patients"])
    app.include_router(query_router.router, prefix=settings.api_base, tags=["query"])
    return app


app = create_app()


def run() -> None:
    import uvicorn

    settings = Settings.from_env()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
