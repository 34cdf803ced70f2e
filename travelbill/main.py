# travelbill/main.py
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError

from travelbill.api.v1 import v1_router
from travelbill.api.v1.envelope import error_response
from travelbill.core.config import settings
from travelbill.core.logging_config import setup_logging
from travelbill.domain.errors import (
    BillingNotFoundError,
    BillingValidationError,
    DutyNotEligibleError,
    DutyNotFoundError,
    RenderError,
)

logger = logging.getLogger("main")


def create_app() -> FastAPI:
    setup_logging()

    app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG)
    app.include_router(v1_router)

    @app.exception_handler(BillingValidationError)
    async def _validation_error(request: Request, exc: BillingValidationError):
        return error_response(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            str(exc),
            [e.to_dict() for e in exc.errors],
        )

    @app.exception_handler(RequestValidationError)
    async def _request_error(request: Request, exc: RequestValidationError):
        errors = [
            {
                "index": None,
                "field": ".".join(str(part) for part in err["loc"] if part != "body"),
                "message": err["msg"],
            }
            for err in exc.errors()
        ]
        return error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, "Invalid request", errors)

    @app.exception_handler(DutyNotEligibleError)
    async def _duty_not_eligible(request: Request, exc: DutyNotEligibleError):
        return error_response(status.HTTP_409_CONFLICT, str(exc))

    @app.exception_handler(DutyNotFoundError)
    @app.exception_handler(BillingNotFoundError)
    async def _not_found(request: Request, exc: Exception):
        return error_response(status.HTTP_404_NOT_FOUND, str(exc))

    @app.exception_handler(RenderError)
    async def _render_error(request: Request, exc: RenderError):
        # Only the requested artifact failed; the billing itself is untouched
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))

    logger.info("%s started (environment=%s)", settings.APP_NAME, settings.ENVIRONMENT)
    return app


app = create_app()
