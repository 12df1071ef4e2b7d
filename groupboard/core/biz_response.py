from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


class BizResponse(JSONResponse):
    """
    统一响应体：
        {"code": 200, "message": "ok", "data": ...}
    - code 与 HTTP 状态码保持一致
    - 出错时 data 为 None，message 为错误描述
    """

    def __init__(self, data: Any = None, msg: str = "ok", status_code: int = 200, **kwargs):
        content = {
            "code": status_code,
            "message": msg,
            "data": jsonable_encoder(data),
        }
        super().__init__(content=content, status_code=status_code, **kwargs)
