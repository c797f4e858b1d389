"""FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from jobprep.api.limiter import limiter
from jobprep.config import settings, setup_logging
from jobprep.db.base import init_db
from jobprep.errors import JobPrepError

logger = logging.getLogger(__name__)

ALLOWED_ORIGINS = settings.cors_origins.split(",")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and initialize database on startup."""
    setup_logging()
    try:
        init_db()
    except ValueError:
        logger.warning("DATABASE_URL not set, skipping table creation")
    yield


app = FastAPI(
    title="JobPrep API",
    description="Resume parsing, AI job search and generated application tests",
    version="0.1.0",
    lifespan=lifespan,
)

app.state.limiter = limiter


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    """Return 429 with a clear message when rate limit is exceeded."""
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded: {exc.detail}"},
    )


@app.exception_handler(JobPrepError)
async def jobprep_error_handler(request: Request, exc: JobPrepError):
    """Map service errors to their status code and user-facing message."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.code},
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE"],
    allow_headers=["Content-Type", "Authorization", "X-User-ID"],
)


# Import and include routers
from jobprep.api.routes import applications, jobs, resumes, tests  # noqa: E402

app.include_router(resumes.router, prefix="/resumes", tags=["Resumes"])
app.include_router(jobs.router, prefix="/jobs", tags=["Jobs"])
app.include_router(applications.router, prefix="/applications", tags=["Applications"])
app.include_router(tests.router, prefix="/applications", tags=["Tests"])


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
