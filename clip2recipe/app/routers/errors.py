from __future__ import annotations

from fastapi.responses import JSONResponse

from clip2recipe.app.schemas.jobs import ErrorResponse


def error_response(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, message=message).model_dump(),
    )
