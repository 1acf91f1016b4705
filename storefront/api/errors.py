# storefront/api/errors.py
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse

from storefront.domain.errors import (
    StorefrontError,
    Unauthenticated,
    Forbidden,
    NotFound,
    ValidationFailed,
    Conflict,
    UpstreamFailure,
)
from storefront.utils.settings import SAFE_REDIRECT_PATH
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

STATUS_CODES = {
    Unauthenticated: 401,
    NotFound: 404,
    ValidationFailed: 400,
    Conflict: 409,
    UpstreamFailure: 502,
}


def status_for(exc: StorefrontError) -> int:
    for error_type, status_code in STATUS_CODES.items():
        if isinstance(exc, error_type):
            return status_code
    return 500


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(Forbidden)
    async def forbidden_handler(request: Request, exc: Forbidden):
        #non-admins are sent back to a safe page instead of getting an error body
        logger.warning(f"Forbidden {request.method} {request.url.path}: {exc.message}")
        return RedirectResponse(SAFE_REDIRECT_PATH, status_code=303)

    @app.exception_handler(StorefrontError)
    async def storefront_error_handler(request: Request, exc: StorefrontError):
        return JSONResponse({"message": exc.message}, status_code=status_for(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        messages = [f"{'.'.join(str(p) for p in err['loc'][1:])}: {err['msg']}" for err in exc.errors()]
        return JSONResponse({"message": "; ".join(messages)}, status_code=400)
