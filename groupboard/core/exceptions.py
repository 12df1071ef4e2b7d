from typing import Optional


class PostNotFound(Exception):
    """找不到帖子"""
    def __init__(self, pid: Optional[str] = None, message: Optional[str] = None):
        self.pid = pid
        if message:
            self.message = message
        elif pid is not None:
            self.message = f"cannot find Post with id {pid}"
        else:
            self.message = "Post does not exist"
        super().__init__(self.message)


class ForbiddenAction(Exception):
    """当前用户不是帖子作者，不允许修改 / 删除"""
    def __init__(self, message: str = "Request not authorized"):
        self.message = message
        super().__init__(message)


class InvalidPostPayload(Exception):
    """创建 / 修改帖子时请求体不合法（例如标题为空）"""
    def __init__(self, message: str = "Content cannot be empty"):
        self.message = message
        super().__init__(message)


class NotAuthenticated(Exception):
    """请求上下文里没有已认证的用户"""
    def __init__(self, message: str = "Authentication required"):
        self.message = message
        super().__init__(message)


class StoreFailure(Exception):
    """
    数据层查询失败：
    - 数据库不可用 / SQL 执行出错
    - 三个统计查询中任意一个失败或超时
    cause 保留原始异常，message 内嵌原因
    """

    def __init__(self, cause: Exception | str):
        self.cause = cause
        self.message = f"There's an error: {cause}"
        super().__init__(self.message)


class DecryptionFault(Exception):
    """用户邮箱密文无法解密（密文损坏 / 密钥缺失或不匹配）"""
    def __init__(self, message: str = "failed to decrypt author email"):
        self.message = message
        super().__init__(message)


class ImageStoreError(Exception):
    """帖子图片写入 / 删除失败"""
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)
