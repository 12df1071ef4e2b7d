from fastapi import Request
from pydantic import BaseModel
from starlette.middleware.base import BaseHTTPMiddleware

from groupboard.core.exceptions import NotAuthenticated


class RequestContext(BaseModel):
    """
    显式传给写操作的请求上下文（由认证中间件填充）
    """
    user_id: str


def get_request_context(request: Request) -> RequestContext:
    """
    读取认证中间件写入的 request.state.user_id
    """
    user_id = getattr(request.state, "user_id", None)
    if not user_id:
        raise NotAuthenticated()
    return RequestContext(user_id=user_id)


class TrustedHeaderAuthMiddleware(BaseHTTPMiddleware):
    """
    部署在认证网关之后时使用：网关校验 token 后把用户 ID 写进请求头，
    这里原样搬到 request.state.user_id
    """

    def __init__(self, app, header_name: str):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next):
        user_id = request.headers.get(self.header_name)
        if user_id:
            request.state.user_id = user_id
        return await call_next(request)
