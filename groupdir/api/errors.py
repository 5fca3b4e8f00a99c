"""
Rendering of directory failures as HTTP responses. Each failure is returned
as `{"code": ..., "message": ...}`; call `add_exception_handlers` on the app
at startup.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from structlog import get_logger

from groupdir.core.extension import InvalidExtensionPath
from groupdir.core.models import ErrorResponse
from groupdir.service.directory import ForbiddenUserError, NoGroupError, UnknownError
from groupdir.service.groups import GroupExistsError


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(code=code, message=message).model_dump(),
    )


async def forbidden_handler(request: Request, exc: ForbiddenUserError):
    return error_response(status.HTTP_403_FORBIDDEN, "ForbiddenUserError", str(exc))


async def no_group_handler(request: Request, exc: NoGroupError):
    return error_response(status.HTTP_400_BAD_REQUEST, "NoGroupError", str(exc))


async def group_exists_handler(request: Request, exc: GroupExistsError):
    return error_response(status.HTTP_409_CONFLICT, "ConflictGroupError", str(exc))


async def invalid_path_handler(request: Request, exc: InvalidExtensionPath):
    return error_response(
        status.HTTP_400_BAD_REQUEST, "InvalidExtensionPathError", str(exc)
    )


async def unknown_handler(request: Request, exc: Exception):
    log = get_logger().bind(path=request.url.path, error=repr(exc))
    await log.aerror("api.unknown_error")
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "UnknownError", str(exc)
    )


def add_exception_handlers(app: FastAPI) -> FastAPI:
    app.add_exception_handler(ForbiddenUserError, forbidden_handler)
    app.add_exception_handler(NoGroupError, no_group_handler)
    app.add_exception_handler(GroupExistsError, group_exists_handler)
    app.add_exception_handler(InvalidExtensionPath, invalid_path_handler)
    app.add_exception_handler(UnknownError, unknown_handler)
    app.add_exception_handler(Exception, unknown_handler)
    return app
