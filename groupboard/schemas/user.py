from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UserBriefOut(BaseModel):
    """
    评论里展示的作者信息（只放公开字段）
    """
    uid: str
    first_name: str
    last_name: str
    image_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class PostAuthorOut(BaseModel):
    """
    帖子详情里的作者信息：公开字段 + 个人资料
    - email 是库里的密文，只供业务层解密用，不参与序列化
    """
    uid: str
    first_name: str
    last_name: str
    image_url: Optional[str] = None
    department: Optional[str] = None
    expert_in: Optional[str] = None
    interested_in: Optional[str] = None
    one_word: Optional[str] = None
    is_up_for: Optional[str] = None

    email: Optional[str] = Field(default=None, exclude=True)

    model_config = ConfigDict(from_attributes=True)


class PostAuthorSummaryOut(BaseModel):
    """列表里随帖子返回的作者摘要"""
    first_name: str
    department: Optional[str] = None
    image_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
