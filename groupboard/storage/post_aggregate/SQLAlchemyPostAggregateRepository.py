from sqlalchemy import func
from sqlalchemy.orm import sessionmaker

from groupboard.models.comment import Comment
from groupboard.models.like import Like, LikeSign
from groupboard.storage.post_aggregate.post_aggregate_interface import IPostAggregateRepository


class SQLAlchemyPostAggregateRepository(IPostAggregateRepository):
    """
    使用 SQLAlchemy 实现的统计仓库
    持有的是会话工厂而不是会话：每次计数单独开一个短会话，
    这样三个计数可以放在不同线程里同时跑
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def count_likes(self, post_id: str, sign: LikeSign) -> int:
        with self.session_factory() as db:
            return (
                db.query(func.count(Like._id))
                .filter(Like.post_id == post_id, Like.like == int(sign))
                .scalar()
            ) or 0

    def count_comments(self, post_id: str) -> int:
        with self.session_factory() as db:
            return (
                db.query(func.count(Comment._id))
                .filter(Comment.post_id == post_id)
                .scalar()
            ) or 0
