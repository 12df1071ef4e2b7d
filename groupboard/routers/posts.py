from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile

from groupboard.schemas.post import (
    PostCreate,
    PostOut,
    PostUpdate,
    PostSort,
    PostDetailOut,
    BatchPostsOut,
)
from groupboard.core.biz_response import BizResponse
from groupboard.core.auth import RequestContext, get_request_context
from groupboard.core.config import Settings, get_settings
from groupboard.core.crypto import AESCipher, get_cipher
from groupboard.core.images import IImageStore, get_image_store
from groupboard.service import post_svc

from groupboard.storage.database import get_post_repo, get_aggregate_repo
from groupboard.storage.post.post_interface import IPostRepository
from groupboard.storage.post_aggregate.post_aggregate_interface import IPostAggregateRepository

posts_router = APIRouter(prefix="/posts", tags=["posts"])

# 业务异常统一由 core/error_handlers.py 转成响应，这里只处理成功路径


# --------------------------------- 列表 / 筛选 / 搜索 ---------------------------------
@posts_router.get("/", response_model=BatchPostsOut)
def list_posts(
    sort: int = Query(PostSort.NEWEST.value, ge=0, le=2),
    page: int = Query(0, ge=0),
    page_size: int = Query(20, ge=1, le=100),
    post_repo: IPostRepository = Depends(get_post_repo),
):
    """
    帖子列表：sort=0 最新，1 最早，2 热门（带作者摘要与计数）
    """
    result = post_svc.list_posts(post_repo=post_repo, sort=PostSort(sort), page=page, page_size=page_size)
    return BizResponse(data=result)


@posts_router.get("/filter/department", response_model=BatchPostsOut)
def filter_by_department(
    department: str,
    page: int = Query(0, ge=0),
    page_size: int = Query(20, ge=1, le=100),
    post_repo: IPostRepository = Depends(get_post_repo),
):
    result = post_svc.list_posts_by_department(post_repo=post_repo, department=department, page=page, page_size=page_size)
    return BizResponse(data=result)


@posts_router.get("/filter/topic", response_model=BatchPostsOut)
def filter_by_topic(
    topic: str,
    page: int = Query(0, ge=0),
    page_size: int = Query(20, ge=1, le=100),
    post_repo: IPostRepository = Depends(get_post_repo),
):
    result = post_svc.list_posts_by_topic(post_repo=post_repo, topic=topic, page=page, page_size=page_size)
    return BizResponse(data=result)


@posts_router.get("/search", response_model=BatchPostsOut)
def search_posts(
    keyword: str,
    page: int = Query(0, ge=0),
    page_size: int = Query(20, ge=1, le=100),
    post_repo: IPostRepository = Depends(get_post_repo),
):
    """
    标题或正文包含关键字的帖子（不区分大小写）
    """
    result = post_svc.search_posts(post_repo=post_repo, keyword=keyword, page=page, page_size=page_size)
    return BizResponse(data=result)


# --------------------------------- 详情 ---------------------------------
@posts_router.get("/{pid}", response_model=PostDetailOut)
async def get_post(
    pid: str,
    post_repo: IPostRepository = Depends(get_post_repo),
    aggregate_repo: IPostAggregateRepository = Depends(get_aggregate_repo),
    cipher: AESCipher = Depends(get_cipher),
    settings: Settings = Depends(get_settings),
):
    """
    帖子详情：帖子 + 评论 + 作者 + 点赞记录，附带解密邮箱和点赞 / 点踩 / 评论数
    """
    detail = await post_svc.get_post_with_aggregates(
        post_repo=post_repo,
        aggregate_repo=aggregate_repo,
        cipher=cipher,
        pid=pid,
        timeout=settings.AGGREGATE_TIMEOUT_SECONDS,
    )
    return BizResponse(data=detail)


# --------------------------------- 创建 / 修改 / 删除 ---------------------------------
@posts_router.post("/", response_model=PostOut)
def create_post(
    request: Request,
    title: str = Form(""),
    description: Optional[str] = Form(None),
    topic: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    ctx: RequestContext = Depends(get_request_context),
    post_repo: IPostRepository = Depends(get_post_repo),
    image_store: IImageStore = Depends(get_image_store),
):
    """
    创建帖子（multipart 表单，图片可选），作者为当前登录用户
    """
    post = post_svc.create_post(
        post_repo=post_repo,
        image_store=image_store,
        ctx=ctx,
        data=PostCreate(title=title, description=description, topic=topic),
        image=image,
        base_url=str(request.base_url),
    )
    return BizResponse(data=post)


@posts_router.put("/{pid}")
def modify_post(
    pid: str,
    request: Request,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    topic: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    ctx: RequestContext = Depends(get_request_context),
    post_repo: IPostRepository = Depends(get_post_repo),
    image_store: IImageStore = Depends(get_image_store),
):
    """
    作者修改帖子：只更新提交了的字段，上传新图片会替换旧图片
    """
    post_svc.update_post(
        post_repo=post_repo,
        image_store=image_store,
        ctx=ctx,
        pid=pid,
        data=PostUpdate(title=title, description=description, topic=topic),
        image=image,
        base_url=str(request.base_url),
    )
    return BizResponse(data=True, msg="Post modified")


@posts_router.delete("/{pid}")
def delete_post(
    pid: str,
    ctx: RequestContext = Depends(get_request_context),
    post_repo: IPostRepository = Depends(get_post_repo),
    image_store: IImageStore = Depends(get_image_store),
):
    post_svc.delete_post(post_repo=post_repo, image_store=image_store, ctx=ctx, pid=pid)
    return BizResponse(data=True, msg="Post deleted")
