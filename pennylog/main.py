from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging

from pennylog.core.config import settings
from pennylog.core.exceptions import ValidationError
from pennylog.routers import expenses, health, reports
from pennylog.utils.rules import get_category_rules

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(level=level)
    logging.getLogger("pennylog").setLevel(level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: configure logging and warm the category rule table
    configure_logging()
    logger.info(f"Starting {settings.PROJECT_NAME} with {len(get_category_rules())} category rules")
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    debug=settings.DEBUG,
    lifespan=lifespan,
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8000",
        "capacitor://localhost",
    ],
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    max_age=3600,
)


@app.exception_handler(ValidationError)
async def expense_validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    logger.warning(f"Rejected request to {request.url.path}: {exc}")
    return JSONResponse(status_code=422, content=exc.to_dict())


# Root endpoint
@app.get("/")
def root():
    return {"message": f"Welcome to {settings.PROJECT_NAME} API"}


# Register routers
app.include_router(health.router, prefix=f"{settings.API_PREFIX}", tags=["Health"])  # /api/health
app.include_router(expenses.router, prefix=f"{settings.API_PREFIX}/expenses", tags=["Expenses"])
app.include_router(reports.router, prefix=f"{settings.API_PREFIX}/reports", tags=["Reports"])
