import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.endpoints import health, notification
from app.core.config import settings
from app.core.errors import NotificationError
from app.core.logging import configure_logging
from app.database.mongodb import client

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"{settings.PROJECT_NAME} starting")
    yield
    # Close the directory connection pool on shutdown
    client.close()


app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

MISSING_CONTENT_LOCS = {("body", "title"), ("body", "body")}


def _missing_content(exc: RequestValidationError) -> bool:
    return any(tuple(error["loc"][:2]) in MISSING_CONTENT_LOCS for error in exc.errors())


@app.exception_handler(NotificationError)
async def notification_error_handler(request: Request, exc: NotificationError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    details = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'][1:]) or 'body'}: {error['msg']}"
        for error in exc.errors()
    )
    error = "title and body are required" if _missing_content(exc) else "Invalid request"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content={"error": error, "details": details}
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    error = "Method not allowed" if exc.status_code == 405 else str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"error": error}, headers=exc.headers)


# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix="", tags=["health"])

app.include_router(notification.router, prefix="/api", tags=["notification"])
