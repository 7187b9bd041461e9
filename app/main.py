import structlog
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

load_dotenv()

from app.config import settings
from app.core.errors import repository_exception_handler, validation_exception_handler
from app.core.exceptions import RepositoryException
from app.core.logging import configure_logging

# IMPORT ROUTERS
from app.routers.health import router as health_router
from app.routers.use_cases import router as use_cases_router
from app.routers.metadata import router as metadata_router
from app.routers.scoring import router as scoring_router
from app.routers.responses import router as responses_router
from app.routers.recommendations import router as recommendations_router
from app.routers.survey_config import router as survey_config_router

configure_logging()
logger = structlog.get_logger(__name__)


# SWAGGER UI: tag display order
_OPENAPI_TAGS = [
    {"name": "Root"},
    {"name": "Health"},
    {"name": "Use Cases"},
    {"name": "Metadata"},
    {"name": "Scoring"},
    {"name": "Responses"},
    {"name": "Recommendations"},
    {"name": "Survey Config"},
]

# FASTAPI APPLICATION CONFIGURATION
app = FastAPI(
    title=f"{settings.APP_NAME} API",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    openapi_tags=_OPENAPI_TAGS,
)

app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

# REGISTER EXCEPTION HANDLERS
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(RepositoryException, repository_exception_handler)

# REGISTER ROUTERS (order matches _OPENAPI_TAGS / Swagger UI display order)
app.include_router(health_router)           # Health
app.include_router(use_cases_router)        # Use Cases
app.include_router(metadata_router)         # Metadata
app.include_router(scoring_router)          # Scoring
app.include_router(responses_router)        # Responses
app.include_router(recommendations_router)  # Recommendations
app.include_router(survey_config_router)    # Survey Config


# ROOT ENDPOINT
@app.get("/", tags=["Root"], summary="Root endpoint")
@app.get(settings.API_PREFIX, tags=["Root"], summary="API root", include_in_schema=False)
async def root():
    return {
        "service": f"{settings.APP_NAME} API",
        "version": settings.APP_VERSION,
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc"
        },
        "status": "running"
    }


# STARTUP EVENT
@app.on_event("startup")
async def startup_event():
    logger.info(
        "api_starting",
        env=settings.APP_ENV,
        snowflake_configured=settings.snowflake_configured,
        cache_enabled=settings.CACHE_ENABLED,
        recommendation_order=settings.RECOMMENDATION_ORDER,
    )


# SHUTDOWN EVENT
@app.on_event("shutdown")
async def shutdown_event():
    logger.info("api_stopping")


# RUN WITH UVICORN
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
