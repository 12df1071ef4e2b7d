# groupboard/storage/post_aggregate/post_aggregate_interface.py

from typing import Protocol

from groupboard.models.like import LikeSign


class IPostAggregateRepository(Protocol):
    """
    帖子实时统计接口：
    - 点赞 / 点踩 / 评论数都不落库，按需从 likes、comments 表计算
    - 三个方法会被并发调用，实现必须保证彼此之间不共享数据库会话
    """

    def count_likes(self, post_id: str, sign: LikeSign) -> int:
        """统计某帖子下 like == sign 的记录数"""
        ...

    def count_comments(self, post_id: str) -> int:
        """统计某帖子下的评论数"""
        ...
