import asyncio
from typing import Dict, Optional

from fastapi import UploadFile
from sqlalchemy.exc import SQLAlchemyError

from groupboard.schemas.post import (
    PostCreate,
    PostOnlyCreate,
    PostOut,
    PostUpdate,
    PostSort,
    PostDetailOut,
    BatchPostsOut,
    BatchPostSummariesOut,
)
from groupboard.models.like import LikeSign
from groupboard.storage.post.post_interface import IPostRepository
from groupboard.storage.post_aggregate.post_aggregate_interface import IPostAggregateRepository
from groupboard.core.auth import RequestContext
from groupboard.core.crypto import AESCipher
from groupboard.core.images import IImageStore, filename_from_url
from groupboard.core.db import store_errors
from groupboard.core.exceptions import (
    PostNotFound,
    ForbiddenAction,
    InvalidPostPayload,
    StoreFailure,
    ImageStoreError,
)
from groupboard.core.logx import logger


def _image_url(base_url: str, filename: str) -> str:
    return f"{base_url.rstrip('/')}/images/{filename}"


def _discard_image(image_store: IImageStore, filename: str) -> None:
    # 行已提交后的清理，删不掉只记日志
    try:
        image_store.remove(filename)
    except ImageStoreError as e:
        logger.warning(f"Leftover image {filename}: {e.message}")


def _get_owned_post(post_repo: IPostRepository, ctx: RequestContext, pid: str) -> PostOut:
    """
    修改 / 删除前的校验：帖子存在，且当前用户是作者
    """
    with store_errors():
        post = post_repo.get_post_by_pid(pid)
    if not post:
        raise PostNotFound(pid=pid)
    if post.user_id != ctx.user_id:
        logger.warning(f"User {ctx.user_id} refused on post pid={pid} owned by {post.user_id}")
        raise ForbiddenAction()
    return post


#---------------------------------------- 查 -----------------------------------------

async def get_post_with_aggregates(
    post_repo: IPostRepository,
    aggregate_repo: IPostAggregateRepository,
    cipher: AESCipher,
    pid: str,
    timeout: Optional[float] = None,) -> PostDetailOut:
    """
    帖子详情（含实时统计）：
    1. 带出评论 / 作者 / 点赞记录读取帖子，不存在直接 PostNotFound，不再发统计查询
    2. 并发统计点赞数、点踩数、评论数，三者全部成功才继续，任一失败即整体失败
    3. 解密作者邮箱，失败抛 DecryptionFault
    4. 组装 PostDetailOut
    """
    # 1. 读取帖子
    with store_errors():
        post = await asyncio.to_thread(post_repo.get_post_detail_by_pid, pid)
    if not post:
        raise PostNotFound(pid=pid)

    # 2. 三个统计并发执行
    joined = asyncio.gather(
        asyncio.to_thread(aggregate_repo.count_likes, pid, LikeSign.LIKE),
        asyncio.to_thread(aggregate_repo.count_likes, pid, LikeSign.DISLIKE),
        asyncio.to_thread(aggregate_repo.count_comments, pid),
    )
    try:
        like_total, dislike_total, comment_total = await asyncio.wait_for(joined, timeout)
    except SQLAlchemyError as e:
        raise StoreFailure(e) from e
    except asyncio.TimeoutError as e:
        raise StoreFailure(f"aggregate queries for post {pid} timed out after {timeout}s") from e

    # 3. 解密作者邮箱
    email = cipher.decrypt(post.user.email)

    logger.debug(f"Loaded post pid={pid} likes={like_total} dislikes={dislike_total} comments={comment_total}")
    return PostDetailOut(
        post=post,
        email=email,
        like_total=like_total,
        dislike_total=dislike_total,
        comment_total=comment_total,
    )


def list_posts(post_repo: IPostRepository, sort: PostSort = PostSort.NEWEST, page: int = 0, page_size: int = 20, to_dict: bool = True,) -> Dict | BatchPostsOut | BatchPostSummariesOut:
    """
    帖子列表：
    - NEWEST / OLDEST 按创建时间排序
    - POPULAR 额外带作者摘要和点赞 / 点踩 / 评论数
    """
    with store_errors():
        if sort == PostSort.POPULAR:
            result = post_repo.list_post_summaries(page=page, page_size=page_size)
        else:
            result = post_repo.list_posts(sort=sort, page=page, page_size=page_size)
    return result.model_dump() if to_dict else result


def list_posts_by_department(post_repo: IPostRepository, department: str, page: int = 0, page_size: int = 20, to_dict: bool = True,) -> Dict | BatchPostsOut:
    with store_errors():
        result = post_repo.list_posts_by_department(department=department, page=page, page_size=page_size)
    return result.model_dump() if to_dict else result


def list_posts_by_topic(post_repo: IPostRepository, topic: str, page: int = 0, page_size: int = 20, to_dict: bool = True,) -> Dict | BatchPostsOut:
    with store_errors():
        result = post_repo.list_posts_by_topic(topic=topic, page=page, page_size=page_size)
    return result.model_dump() if to_dict else result


def search_posts(post_repo: IPostRepository, keyword: str, page: int = 0, page_size: int = 20, to_dict: bool = True,) -> Dict | BatchPostsOut:
    """
    标题或正文包含关键字（不区分大小写）
    """
    keyword = keyword.strip()
    if not keyword:
        raise InvalidPostPayload("Search keyword cannot be empty")

    with store_errors():
        result = post_repo.search_posts(keyword=keyword, page=page, page_size=page_size)
    return result.model_dump() if to_dict else result


#---------------------------------------- 增 -----------------------------------------

def create_post(
    post_repo: IPostRepository,
    image_store: IImageStore,
    ctx: RequestContext,
    data: PostCreate,
    image: Optional[UploadFile] = None,
    base_url: str = "",) -> PostOut:
    """
    创建帖子：
    1. 标题不能为空
    2. 有图片先落盘，得到 image_url
    3. 写 posts 表，作者固定为当前用户；写库失败时清理刚存的图片
    """
    if not data.title or not data.title.strip():
        raise InvalidPostPayload("Content cannot be empty")

    filename = image_store.save(image) if image is not None else None

    post_only = PostOnlyCreate(
        **data.model_dump(),
        user_id=ctx.user_id,
        image_url=_image_url(base_url, filename) if filename else None,
    )
    try:
        with store_errors():
            pid = post_repo.create_post(post_only)
            post = post_repo.get_post_by_pid(pid)
    except StoreFailure:
        if filename:
            _discard_image(image_store, filename)
        raise

    if not post:
        # 理论上不应该发生
        raise PostNotFound(message=f"post {pid} not found after creation")

    logger.info(f"Created post pid={pid} for user={ctx.user_id}")
    return post


#------------------------------------- 改 / 删 ----------------------------------------

def update_post(
    post_repo: IPostRepository,
    image_store: IImageStore,
    ctx: RequestContext,
    pid: str,
    data: PostUpdate,
    image: Optional[UploadFile] = None,
    base_url: str = "",) -> None:
    """
    作者修改帖子：
    - 只有作者本人可以修改
    - 上传了新图片则替换旧图片（新图写库成功后再删旧图）
    """
    post = _get_owned_post(post_repo, ctx, pid)

    if data.title is not None and not data.title.strip():
        raise InvalidPostPayload("Content cannot be empty")

    new_filename = None
    if image is not None:
        new_filename = image_store.save(image)
        data = data.model_copy(update={"image_url": _image_url(base_url, new_filename)})

    try:
        with store_errors():
            ok = post_repo.update_post(pid, data)
    except StoreFailure:
        if new_filename:
            _discard_image(image_store, new_filename)
        raise

    if not ok:
        raise PostNotFound(pid=pid)

    old_filename = filename_from_url(post.image_url)
    if new_filename and old_filename:
        _discard_image(image_store, old_filename)

    logger.info(f"Updated post pid={pid} with data={data.model_dump(exclude_none=True)}")


def delete_post(
    post_repo: IPostRepository,
    image_store: IImageStore,
    ctx: RequestContext,
    pid: str,) -> None:
    """
    作者删除帖子：评论和点赞由 ORM 级联删除，之后清理图片文件
    """
    post = _get_owned_post(post_repo, ctx, pid)

    with store_errors():
        ok = post_repo.delete_post(pid)
    if not ok:
        raise PostNotFound(pid=pid)

    filename = filename_from_url(post.image_url)
    if filename:
        _discard_image(image_store, filename)

    logger.info(f"Deleted post pid={pid}")
