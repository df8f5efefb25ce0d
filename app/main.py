from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.log import configure_logging
from app.routers import progress as progress_router
from app.core.errors import (
    ProgressTrackerException,
    progress_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)

configure_logging(settings.LOG_LEVEL)

app = FastAPI(
    title="Progress Tracker API",
    description=(
        "**Progress analytics for the productivity tracker**\n\n"
        "Reads the last N days of tasks from the task storage API and derives "
        "focus hours, streak, productivity and radar-chart scores.\n\n"
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(ProgressTrackerException, progress_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(progress_router.router)


@app.get("/health", tags=["health"], summary="Health check")
def health():
    """
    Returns `{"status": "ok"}` when the API is up.
    The task storage API is not probed; its outages degrade to zero days.
    """
    return {"status": "ok", "env": settings.APP_ENV}
