from contextlib import asynccontextmanager
from dotenv import load_dotenv
import logging
import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.routers.routers import api_router
from app.core.config import settings
from app.core.database import init_database
from app.core.logging_config import configure_logging
from app.middleware import RequestIDMiddleware
from app.tokens import get_token_service


# Load environment variables
load_dotenv()

# Configure logging with request_id support
configure_logging()

logger = logging.getLogger(__name__)

# Initialize Sentry for error tracking
if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        traces_sample_rate=1.0 if settings.is_local else 0.1,
        environment=settings.ENVIRONMENT,
        send_default_pii=False,
    )
    logger.info("Sentry initialized")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown.

    Startup fails when the token signing secret is missing or the database
    cannot be initialized; both are configuration errors, not per-request ones.
    """
    logger.info("Starting Social Login API application...")

    try:
        get_token_service()
        logger.info("Token service initialized")

        await init_database()
        logger.info("Database initialized")

        if not settings.github_oauth_enabled:
            logger.warning("GitHub OAuth not configured - GitHub login disabled")

        yield

    except Exception:
        logger.exception("Failed to start services")
        raise
    finally:
        logger.info("Shutting down Social Login API application...")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    lifespan=lifespan,
    openapi_url="/openapi.json" if settings.is_local else None,
)

# Add Request ID middleware (must be added first to ensure request_id is available)
app.add_middleware(RequestIDMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/health")
async def health_check():
    return {"status": "healthy", "github_login": settings.github_oauth_enabled}
