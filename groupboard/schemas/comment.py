from typing import Optional
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from groupboard.schemas.user import UserBriefOut


class CommentOut(BaseModel):
    """
    帖子详情中的评论，附带评论作者
    """
    cid: str
    post_id: str
    user_id: str
    text: str
    created_at: Optional[datetime] = None
    user: UserBriefOut

    model_config = ConfigDict(from_attributes=True)
