from typing import Optional, List

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, joinedload, selectinload

from groupboard.models.post import Post
from groupboard.models.user import User
from groupboard.models.comment import Comment
from groupboard.models.like import Like, LikeSign

from groupboard.schemas.post import (
    PostOnlyCreate,
    PostOut,
    PostFullOut,
    PostUpdate,
    PostSort,
    PostSummaryOut,
    BatchPostsOut,
    BatchPostSummariesOut,
)
from groupboard.schemas.user import PostAuthorSummaryOut
from groupboard.storage.post.post_interface import IPostRepository
from groupboard.core.db import transaction


class SQLAlchemyPostRepository(IPostRepository):
    """
    使用 SQLAlchemy 实现的帖子仓库
    业务层依赖 IPostRepository 抽象接口
    """

    def __init__(self, db: Session):
        self.db = db

    # ---------- 内部基础查询 ----------

    def _newest_first(self, query):
        # 同一时间戳下用自增主键兜底，保证分页稳定
        return query.order_by(Post.created_at.desc(), Post._id.desc())

    def _paginate(self, base_q, page: int, page_size: int) -> BatchPostsOut:
        total = base_q.count()
        posts: List[Post] = (
            base_q
            .offset(page * page_size)
            .limit(page_size)
            .all()
        )

        items = [PostOut.model_validate(post) for post in posts]
        return BatchPostsOut(total=total, count=len(items), items=items)

    # ---------- 创建 ----------

    def create_post(self, data: PostOnlyCreate) -> str:
        payload = data.model_dump(exclude_none=True)
        post = Post(**payload)

        with transaction(self.db):
            self.db.add(post)

        # 刷新以获取 pid
        self.db.refresh(post)
        return post.pid

    # ---------- 查询 ----------

    def get_post_by_pid(self, pid: str) -> Optional[PostOut]:
        post = self.db.query(Post).filter(Post.pid == pid).first()
        return PostOut.model_validate(post) if post else None

    def get_post_detail_by_pid(self, pid: str) -> Optional[PostFullOut]:
        post: Optional[Post] = (
            self.db.query(Post)
            .options(
                selectinload(Post.comments).joinedload(Comment.user),
                joinedload(Post.user),
                selectinload(Post.likes),
            )
            .filter(Post.pid == pid)
            .first()
        )
        if not post:
            return None

        return PostFullOut.model_validate(post)

    def list_posts(self, sort: PostSort, page: int, page_size: int) -> BatchPostsOut:
        base_q = self.db.query(Post)
        if sort == PostSort.OLDEST:
            base_q = base_q.order_by(Post.created_at.asc(), Post._id.asc())
        else:
            base_q = self._newest_first(base_q)

        return self._paginate(base_q, page, page_size)

    def list_post_summaries(self, page: int, page_size: int) -> BatchPostSummariesOut:
        """
        每个帖子的计数用相关子查询在同一条 SQL 里算出，避免 N+1
        """
        comment_count = (
            select(func.count(Comment._id))
            .where(Comment.post_id == Post.pid)
            .correlate(Post)
            .scalar_subquery()
        )
        like_count = (
            select(func.count(Like._id))
            .where(Like.post_id == Post.pid, Like.like == LikeSign.LIKE.value)
            .correlate(Post)
            .scalar_subquery()
        )
        dislike_count = (
            select(func.count(Like._id))
            .where(Like.post_id == Post.pid, Like.like == LikeSign.DISLIKE.value)
            .correlate(Post)
            .scalar_subquery()
        )

        total = self.db.query(Post).count()
        rows = (
            self._newest_first(
                self.db.query(
                    Post,
                    comment_count.label("comment_count"),
                    like_count.label("like_count"),
                    dislike_count.label("dislike_count"),
                ).options(selectinload(Post.user))
            )
            .offset(page * page_size)
            .limit(page_size)
            .all()
        )

        items: List[PostSummaryOut] = []
        for post, comments, likes, dislikes in rows:
            base = PostOut.model_validate(post).model_dump()
            items.append(
                PostSummaryOut(
                    **base,
                    user=PostAuthorSummaryOut.model_validate(post.user),
                    comment_count=comments or 0,
                    like_count=likes or 0,
                    dislike_count=dislikes or 0,
                )
            )

        return BatchPostSummariesOut(total=total, count=len(items), items=items)

    def list_posts_by_department(self, department: str, page: int, page_size: int) -> BatchPostsOut:
        base_q = self._newest_first(
            self.db.query(Post)
            .join(Post.user)
            .filter(User.department == department)
        )
        return self._paginate(base_q, page, page_size)

    def list_posts_by_topic(self, topic: str, page: int, page_size: int) -> BatchPostsOut:
        base_q = self._newest_first(self.db.query(Post).filter(Post.topic == topic))
        return self._paginate(base_q, page, page_size)

    def search_posts(self, keyword: str, page: int, page_size: int) -> BatchPostsOut:
        # % 和 _ 按字面匹配
        keyword = keyword.lower()
        base_q = self._newest_first(
            self.db.query(Post).filter(
                or_(
                    func.lower(Post.title).contains(keyword, autoescape=True),
                    func.lower(Post.description).contains(keyword, autoescape=True),
                )
            )
        )
        return self._paginate(base_q, page, page_size)

    # ---------- 修改 / 删除 ----------

    def update_post(self, pid: str, data: PostUpdate) -> bool:
        post: Optional[Post] = self.db.query(Post).filter(Post.pid == pid).first()
        if not post:
            return False

        update_data = data.model_dump(exclude_none=True)
        with transaction(self.db):
            for field, value in update_data.items():
                setattr(post, field, value)

        return True

    def delete_post(self, pid: str) -> bool:
        post: Optional[Post] = self.db.query(Post).filter(Post.pid == pid).first()
        if not post:
            return False

        # relationship 上配置了 delete-orphan，评论和点赞一并删除
        with transaction(self.db):
            self.db.delete(post)

        return True
