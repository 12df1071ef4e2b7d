from typing import Optional
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from groupboard.models.like import LikeSign


class LikeOut(BaseModel):
    """原始点赞记录"""
    lid: str
    post_id: str
    user_id: str
    like: LikeSign                       # 1 点赞 / -1 点踩
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
