from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

load_dotenv()

from app.config import get_settings
from app.logging_config import configure_logging

# IMPORT ROUTERS
from app.routers.health import router as health_router
from app.routers.recalculation import router as recalculation_router
from app.routers.participants import router as participants_router

logger = logging.getLogger(__name__)


# SWAGGER UI - tag display order
_OPENAPI_TAGS = [
    {"name": "Root"},
    {"name": "Health"},
    {"name": "Scoring"},
    {"name": "Participants"},
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings)
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION} ({settings.APP_ENV})")
    yield
    logger.info(f"Shutting down {settings.APP_NAME}")


# FASTAPI APPLICATION CONFIGURATION
app = FastAPI(
    title="HR Assessment Scoring Engine API",
    version=get_settings().APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    openapi_tags=_OPENAPI_TAGS,
    lifespan=lifespan,
)

app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])


# REGISTER EXCEPTION HANDLERS
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are input errors: 400 with {error}."""
    errors = exc.errors()
    if not errors:
        message = "Request validation failed"
    else:
        err = errors[0]
        if "json_invalid" in err.get("type", ""):
            message = "Malformed JSON request body"
        else:
            field = ".".join(str(l) for l in err.get("loc", []) if l != "body")
            message = f"{field}: {err.get('msg', 'invalid value')}" if field else err.get("msg", "Invalid request")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


app.add_exception_handler(RequestValidationError, validation_exception_handler)


async def unhandled_exception_handler(request: Request, exc: Exception):
    """Anything a router did not map becomes 500 with {error}."""
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": str(exc)})


app.add_exception_handler(Exception, unhandled_exception_handler)

# REGISTER ROUTERS (order matches _OPENAPI_TAGS / Swagger UI display order)
app.include_router(health_router)            # Health
app.include_router(recalculation_router)     # Scoring
app.include_router(participants_router)      # Participants


# ROOT ENDPOINT
@app.get("/", tags=["Root"], summary="Root endpoint")
async def root():
    return {
        "service": "HR Assessment Scoring Engine API",
        "version": get_settings().APP_VERSION,
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc"
        },
        "status": "running"
    }


# RUN WITH UVICORN
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
