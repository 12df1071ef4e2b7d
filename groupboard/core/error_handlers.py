from fastapi import FastAPI, Request

from groupboard.core.biz_response import BizResponse
from groupboard.core.exceptions import (
    PostNotFound,
    ForbiddenAction,
    InvalidPostPayload,
    NotAuthenticated,
    StoreFailure,
    DecryptionFault,
    ImageStoreError,
)
from groupboard.core.logx import logger

# 业务异常 -> HTTP 状态码（唯一的映射位置）
STATUS_BY_EXCEPTION = {
    PostNotFound: 404,
    ForbiddenAction: 403,
    InvalidPostPayload: 400,
    NotAuthenticated: 401,
    StoreFailure: 500,
    DecryptionFault: 500,
    ImageStoreError: 500,
}


def _biz_error_handler(status_code: int):
    async def handler(request: Request, exc: Exception) -> BizResponse:
        if status_code >= 500:
            logger.exception(exc)
        else:
            logger.warning(f"{request.method} {request.url.path} -> {status_code}: {exc}")
        message = getattr(exc, "message", str(exc))
        return BizResponse(data=None, msg=message, status_code=status_code)

    return handler


async def _unexpected_error_handler(request: Request, exc: Exception) -> BizResponse:
    logger.exception(exc)
    return BizResponse(data=None, msg=str(exc), status_code=500)


def register_exception_handlers(app: FastAPI) -> None:
    for exc_type, status_code in STATUS_BY_EXCEPTION.items():
        app.add_exception_handler(exc_type, _biz_error_handler(status_code))
    app.add_exception_handler(Exception, _unexpected_error_handler)
