# meeting_governance/api/errors.py
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from meeting_governance.core.errors import GovernanceError
from meeting_governance.core.logging import get_logger

logger = get_logger(__name__).bind(component="api")

STATUS_BY_CODE = {
    "not_found": HTTPStatus.NOT_FOUND,
    "invalid_transition": HTTPStatus.CONFLICT,
    "already_terminal": HTTPStatus.CONFLICT,
    "vote_blocked": HTTPStatus.CONFLICT,
    "recused_member": HTTPStatus.FORBIDDEN,
    "uncertified_executive_session": HTTPStatus.CONFLICT,
    "validation_error": HTTPStatus.UNPROCESSABLE_ENTITY,
}


async def governance_error_handler(request: Request, exc: GovernanceError) -> JSONResponse:
    """
    Render a domain error as {"detail", "code", "context"}.
    """
    status_code = STATUS_BY_CODE.get(exc.code, HTTPStatus.BAD_REQUEST)
    logger.warning(
        "request_rejected",
        method=request.method,
        path=request.url.path,
        code=exc.code,
        status_code=int(status_code),
        **{f"ctx_{key}": value for key, value in exc.context.items()},
    )
    return JSONResponse(
        status_code=int(status_code),
        content={"detail": exc.message, "code": exc.code, "context": exc.context},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GovernanceError, governance_error_handler)
