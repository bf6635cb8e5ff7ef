"""
Exception handlers for the This or That API.
"""
import logging
from fastapi import Request, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from thisorthat.core.config import settings
from thisorthat.core.exceptions import (
    GameException, ValidationFailed, AuthRequired, NotGameOwner, SlugTaken,
    GameNotFound, PlayerNotFound, QuestionNotFound, GameClosed, BackendError
)

logger = logging.getLogger(__name__)


def create_error_response(status_code: int, detail: str, error_code: str, request: Request) -> JSONResponse:
    """Create a standardized error response."""
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": detail,
            "error_code": error_code,
            "request_id": getattr(request.state, 'request_id', None)
        }
    )


async def validation_failed_handler(request: Request, exc: ValidationFailed) -> JSONResponse:
    """Handle form validation failures."""
    return create_error_response(400, str(exc), "VALIDATION_ERROR", request)


async def auth_required_handler(request: Request, exc: AuthRequired) -> JSONResponse:
    """Handle missing or invalid bearer tokens."""
    return create_error_response(401, str(exc), "AUTH_REQUIRED", request)


async def not_game_owner_handler(request: Request, exc: NotGameOwner) -> JSONResponse:
    """Handle management attempts by someone other than the creator."""
    return create_error_response(403, str(exc), "NOT_GAME_OWNER", request)


async def game_closed_handler(request: Request, exc: GameClosed) -> JSONResponse:
    """Handle answers sent to a closed game."""
    return create_error_response(403, str(exc), "GAME_CLOSED", request)


async def slug_taken_handler(request: Request, exc: SlugTaken) -> JSONResponse:
    """Handle slug collisions."""
    return create_error_response(409, str(exc), "SLUG_TAKEN", request)


async def game_not_found_handler(request: Request, exc: GameNotFound) -> JSONResponse:
    """Handle game not found exceptions."""
    return create_error_response(404, str(exc), "GAME_NOT_FOUND", request)


async def player_not_found_handler(request: Request, exc: PlayerNotFound) -> JSONResponse:
    """Handle player not found exceptions."""
    return create_error_response(404, str(exc), "PLAYER_NOT_FOUND", request)


async def question_not_found_handler(request: Request, exc: QuestionNotFound) -> JSONResponse:
    """Handle question not found exceptions."""
    return create_error_response(404, str(exc), "QUESTION_NOT_FOUND", request)


async def backend_error_handler(request: Request, exc: BackendError) -> JSONResponse:
    """Handle storage and auth backend failures without leaking internals."""
    logger.error(f"Backend error on {request.url.path}: {exc}")
    saved = getattr(exc, "saved", None)
    if saved is not None:
        # Partial writes report how many rows were saved
        detail = str(exc)
    else:
        detail = "Backend request failed"
    return create_error_response(500, detail, "BACKEND_ERROR", request)


async def game_exception_handler(request: Request, exc: GameException) -> JSONResponse:
    """Handle generic game exceptions."""
    return create_error_response(400, str(exc), "GAME_ERROR", request)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request body errors with better formatting."""
    errors = []
    for error in exc.errors():
        errors.append({
            "field": ".".join(str(x) for x in error["loc"][1:]),
            "message": error["msg"],
            "type": error["type"]
        })

    return JSONResponse(
        status_code=400,
        content={
            "detail": "Validation error",
            "errors": errors,
            "error_code": "VALIDATION_ERROR",
            "request_id": getattr(request.state, 'request_id', None)
        }
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle generic HTTP exceptions."""
    return create_error_response(exc.status_code, exc.detail, f"HTTP_{exc.status_code}", request)


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(f"Unexpected error: {exc}", exc_info=True)

    # Don't expose internal errors in production
    if settings.DEBUG:
        detail = str(exc)
    else:
        detail = "An unexpected error occurred"

    return create_error_response(500, detail, "INTERNAL_ERROR", request)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(ValidationFailed, validation_failed_handler)
    app.add_exception_handler(AuthRequired, auth_required_handler)
    app.add_exception_handler(NotGameOwner, not_game_owner_handler)
    app.add_exception_handler(GameClosed, game_closed_handler)
    app.add_exception_handler(SlugTaken, slug_taken_handler)
    app.add_exception_handler(GameNotFound, game_not_found_handler)
    app.add_exception_handler(PlayerNotFound, player_not_found_handler)
    app.add_exception_handler(QuestionNotFound, question_not_found_handler)
    app.add_exception_handler(BackendError, backend_error_handler)
    app.add_exception_handler(GameException, game_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
