from contextlib import asynccontextmanager
import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from db import engine
from exceptions import HRError
from models import Base
from schemas import ErrorResponse
from router import auth, employees, leave, fun_tasks, projects

load_dotenv()

ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "http://localhost:3000").split(",")
API_PREFIX = os.getenv("API_PREFIX", "/api")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # startup
    Base.metadata.create_all(bind=engine)
    logger.info(f"HR API started, routes mounted under '{API_PREFIX}'")
    yield
    # shutdown
    engine.dispose()


app = FastAPI(
    title="HR Management API",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in ALLOWED_ORIGINS if origin.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Type"],
)


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    if response.headers.get("content-type", "").startswith("application/json"):
        response.headers["content-type"] = "application/json; charset=utf-8"
    return response


# ---------- Error envelopes ----------

def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(message=message).model_dump())


@app.exception_handler(HRError)
async def hr_error_handler(request: Request, exc: HRError):
    return _error(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    messages = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "path", "query")]
        field = ".".join(loc)
        msg = error.get("msg", "Invalid request").removeprefix("Value error, ")
        messages.append(f"{field}: {msg}" if field else msg)
    return _error(status.HTTP_400_BAD_REQUEST, ", ".join(messages) or "Invalid request")


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server Error")


# ---------- Routes ----------

app.include_router(auth.router, prefix=API_PREFIX)
app.include_router(employees.router, prefix=API_PREFIX)
app.include_router(leave.router, prefix=API_PREFIX)
app.include_router(fun_tasks.router, prefix=API_PREFIX)
app.include_router(projects.router, prefix=API_PREFIX)


@app.get(f"{API_PREFIX}/health", tags=["Health"])
def health():
    """Liveness plus a database round trip."""
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    return {"success": True, "data": {"status": "ok", "database": "ok"}}
