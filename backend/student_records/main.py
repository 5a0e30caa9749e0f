import logging
import time
import traceback
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from student_records.api.routes import auth, meta, students
from student_records.core.config import settings
from student_records.core.errors import StudentRecordsError
from student_records.core.logging_config import setup_logging

setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Student Records API", version="0.1.0")

origins = [origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=[
        "Authorization",
        "Content-Type",
        "X-Request-Id",
    ],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    # Method, path and status only; headers and bodies may carry credentials.
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info("%s %s -> %s (%.1f ms)", request.method, request.url.path, response.status_code, elapsed_ms)
    return response


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    request_id = request.headers.get("X-Request-Id") or uuid4().hex
    response = await call_next(request)
    response.headers["X-Request-Id"] = request_id
    return response


def _error_response(request: Request, status_code: int, message: str, exc: Exception) -> JSONResponse:
    body = {"message": message}
    if status_code >= 500:
        logger.error(
            "%s %s -> %s",
            request.method,
            request.url.path,
            status_code,
            exc_info=(type(exc), exc, exc.__traceback__),
        )
        if not settings.is_production:
            body["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return JSONResponse(status_code=status_code, content=body)


@app.exception_handler(StudentRecordsError)
async def handle_app_error(request: Request, exc: StudentRecordsError):
    return _error_response(request, exc.status_code, exc.message, exc)


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(request: Request, exc: RequestValidationError):
    return _error_response(request, 400, "Invalid request body", exc)


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception):
    return _error_response(request, 500, "Something went wrong!", exc)


def _register_routes(prefix: str = "") -> None:
    app.include_router(auth.router, tags=["auth"], prefix=prefix)
    app.include_router(students.router, tags=["students"], prefix=prefix)
    app.include_router(meta.router, tags=["meta"], prefix=prefix)


_register_routes("")
_register_routes("/api")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("student_records.main:app", host="0.0.0.0", port=5000)
