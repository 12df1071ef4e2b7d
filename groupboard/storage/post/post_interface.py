# groupboard/storage/post/post_interface.py

from typing import Optional, Protocol

from groupboard.schemas.post import (
    PostOnlyCreate,
    PostOut,
    PostFullOut,
    PostUpdate,
    PostSort,
    BatchPostsOut,
    BatchPostSummariesOut,
)


class IPostRepository(Protocol):
    """
    帖子仓库接口协议（数据层抽象接口）
    业务层依赖本接口，而不是具体实现；每种访问方式对应一个明确的方法
    """

    def create_post(self, data: PostOnlyCreate) -> str:
        """创建帖子，返回新帖子的 pid"""
        ...

    def get_post_by_pid(self, pid: str) -> Optional[PostOut]:
        """只查 posts 表本身（修改 / 删除前的存在性与归属校验）"""
        ...

    def get_post_detail_by_pid(self, pid: str) -> Optional[PostFullOut]:
        """
        帖子详情：一次性带出
        - 评论及评论作者（名、姓、头像）
        - 帖子作者（公开字段 + 个人资料 + 邮箱密文）
        - 原始点赞记录
        """
        ...

    def list_posts(self, sort: PostSort, page: int, page_size: int) -> BatchPostsOut:
        """按创建时间排序分页（NEWEST / OLDEST）"""
        ...

    def list_post_summaries(self, page: int, page_size: int) -> BatchPostSummariesOut:
        """带作者摘要和点赞 / 点踩 / 评论数的列表，按创建时间倒序"""
        ...

    def list_posts_by_department(self, department: str, page: int, page_size: int) -> BatchPostsOut:
        """作者所在部门等于 department 的帖子"""
        ...

    def list_posts_by_topic(self, topic: str, page: int, page_size: int) -> BatchPostsOut:
        ...

    def search_posts(self, keyword: str, page: int, page_size: int) -> BatchPostsOut:
        """标题或正文包含关键字（不区分大小写）"""
        ...

    def update_post(self, pid: str, data: PostUpdate) -> bool:
        """帖子不存在返回 False"""
        ...

    def delete_post(self, pid: str) -> bool:
        """硬删除帖子，评论和点赞随之删除；帖子不存在返回 False"""
        ...
