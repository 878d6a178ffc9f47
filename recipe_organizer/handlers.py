# recipe_organizer/handlers.py
from typing import Any, Dict

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from recipe_organizer.errors import (
    Conflict,
    MalformedIdentifier,
    NotFound,
    RecipeError,
    Unexpected,
    ValidationFailure,
    field_errors,
)

logger = structlog.get_logger()

AVAILABLE_ROUTES = [
    "GET /",
    "GET /health",
    "GET /docs",
    "GET /recipes",
    "POST /recipes",
    "GET /recipes/search",
    "GET /recipes/stats",
    "GET /recipes/{id}",
    "PUT /recipes/{id}",
    "DELETE /recipes/{id}",
]


def _envelope(request: Request, exc: RecipeError) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "message": exc.message}
    match exc:
        case ValidationFailure():
            body["errors"] = exc.errors
        case Unexpected():
            dev = request.app.state.settings.is_development
            body["error"] = exc.detail if dev and exc.detail else "Internal server error"
        case MalformedIdentifier() | NotFound() | Conflict():
            pass
    return body


async def recipe_error_handler(request: Request, exc: RecipeError) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "Request failed",
        error_type=type(exc).__name__,
        error=exc.message,
        status_code=exc.status_code,
        method=request.method,
        path=request.url.path,
    )
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(_envelope(request, exc)))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return await recipe_error_handler(request, ValidationFailure(field_errors(list(exc.errors()))))


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        body = {
            "success": False,
            "message": f"Route {request.method} {request.url.path} not found",
            "availableRoutes": AVAILABLE_ROUTES,
        }
    else:
        body = {"success": False, "message": str(exc.detail)}
    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", method=request.method, path=request.url.path)
    return await recipe_error_handler(request, Unexpected(detail=str(exc)))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RecipeError, recipe_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
