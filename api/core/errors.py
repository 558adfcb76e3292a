"""Error taxonomy shared by services and routes.

Services raise these; the handlers registered on the app turn them into
``{"error": message}`` JSON bodies with the matching status code. Messages
are safe to show to end users; upstream details are only logged.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class StudyAIError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(StudyAIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class ValidationError(StudyAIError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class NotFound(StudyAIError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class UpstreamRateLimited(StudyAIError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_message = "Rate limit exceeded. Please try again later."


class UpstreamQuotaExhausted(StudyAIError):
    status_code = status.HTTP_402_PAYMENT_REQUIRED
    default_message = "AI credits exhausted. Please add credits to continue."


class UpstreamError(StudyAIError):
    default_message = "AI service error"


class StorageError(StudyAIError):
    default_message = "Failed to upload file"


class PersistenceError(StudyAIError):
    default_message = "Failed to save document metadata"


async def studyai_error_handler(request: Request, exc: StudyAIError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append(f"{location}: {err.get('msg')}" if location else err.get("msg", ""))
    message = "; ".join(problems) or "Invalid request"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StudyAIError, studyai_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
