from typing import Optional, List
from datetime import datetime
from enum import IntEnum

from pydantic import BaseModel, ConfigDict

from groupboard.schemas.user import PostAuthorOut, PostAuthorSummaryOut
from groupboard.schemas.comment import CommentOut
from groupboard.schemas.like import LikeOut


# 帖子列表排序方式
class PostSort(IntEnum):
    NEWEST = 0    # 按创建时间倒序（默认）
    OLDEST = 1    # 按创建时间正序
    POPULAR = 2   # 倒序，并附带作者摘要和点赞 / 评论数


class PostCreate(BaseModel):
    """
    创建帖子（请求体），作者由请求上下文决定，不由客户端传
    """
    title: str
    description: Optional[str] = None
    topic: Optional[str] = None

    model_config = ConfigDict(from_attributes=True, extra="forbid")


class PostOnlyCreate(BaseModel):
    """
    创建帖子（内部调用插入 posts 表）
    """
    user_id: str
    title: str
    description: Optional[str] = None
    topic: Optional[str] = None
    image_url: Optional[str] = None


class PostUpdate(BaseModel):
    """
    作者修改帖子：只更新传了值的字段
    """
    title: Optional[str] = None
    description: Optional[str] = None
    topic: Optional[str] = None
    image_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True, extra="forbid")


class PostOut(BaseModel):
    """
    帖子基础信息（列表项）
    """
    pid: str
    title: str
    description: Optional[str] = None
    topic: Optional[str] = None
    image_url: Optional[str] = None
    user_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PostFullOut(PostOut):
    """
    帖子完整记录：作者、评论（含评论作者）、原始点赞记录
    """
    user: PostAuthorOut
    comments: List[CommentOut] = []
    likes: List[LikeOut] = []


class PostDetailOut(BaseModel):
    """
    帖子详情响应：
    - post: 完整帖子记录
    - email: 解密后的作者邮箱
    - like_total / dislike_total / comment_total: 实时统计
    """
    post: PostFullOut
    email: str
    like_total: int
    dislike_total: int
    comment_total: int


class PostSummaryOut(PostOut):
    """
    热门排序下的列表项：带作者摘要和各项计数
    """
    user: PostAuthorSummaryOut
    comment_count: int = 0
    like_count: int = 0
    dislike_count: int = 0


class BatchPostsOut(BaseModel):
    """
    帖子分页列表返回：
    - total: 满足条件的总数
    - count: 当前页返回的数量
    - items: 帖子列表
    """
    total: int
    count: int
    items: List[PostOut]

    model_config = ConfigDict(from_attributes=True)


class BatchPostSummariesOut(BaseModel):
    total: int
    count: int
    items: List[PostSummaryOut]
