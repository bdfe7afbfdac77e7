import logging
from contextlib import asynccontextmanager

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from paw_haven.api.routers import auth, campaigns, donations, pets, users
from paw_haven.core.config import settings
from paw_haven.core.dependencies import get_dynamo_table
from paw_haven.core.exceptions import PawHavenError
from paw_haven.core.logging_config import configure_logging
from paw_haven.data_access.dynamodb import DynamoDataAccess

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        DynamoDataAccess(get_dynamo_table()).ping()
    except (BotoCoreError, ClientError) as e:
        logger.critical(f"Cannot reach table {settings.DYNAMODB_TABLE_NAME}: {e}")
        raise
    logger.info(f"Connected to table {settings.DYNAMODB_TABLE_NAME}")
    yield


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(PawHavenError)
    async def handle_app_error(request: Request, exc: PawHavenError):
        if exc.status_code >= 500:
            logger.error(
                f"{exc.code}: {exc.message} {exc.context}",
                extra={"method": request.method, "path": request.url.path},
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.code, "message": exc.message},
        )

    @app.exception_handler(ClientError)
    async def handle_database_error(request: Request, exc: ClientError):
        logger.error(f"DynamoDB error: {exc}", extra={"method": request.method, "path": request.url.path})
        return JSONResponse(
            status_code=502,
            content={"error": "upstream_failure", "message": "Database error"},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content={"error": "server_error", "message": "Internal server error"},
        )


def create_app() -> FastAPI:
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="Paw Haven API",
        root_path=settings.API_ROOT_PATH,
        lifespan=lifespan,
    )

    # cookies need explicit origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    @app.get("/", response_class=PlainTextResponse)
    def read_root():
        return "Paw Haven is adopting pets"

    for module in (auth, users, pets, campaigns, donations):
        app.include_router(module.router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
