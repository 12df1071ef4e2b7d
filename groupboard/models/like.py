from sqlalchemy import Column, Integer, String, SmallInteger, TIMESTAMP, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import relationship
import uuid
from enum import IntEnum
from groupboard.models.base import Base
from groupboard.core.time import now_utc


# 点赞记录的符号
class LikeSign(IntEnum):
    LIKE = 1       # 点赞
    DISLIKE = -1   # 点踩


class Like(Base):
    """ 点赞模型，对应 likes 表。like 字段 +1 表示点赞，-1 表示点踩。

        CREATE TABLE IF NOT EXISTS likes (
            _id INT AUTO_INCREMENT PRIMARY KEY,
            lid VARCHAR(36) UNIQUE,
            post_id VARCHAR(36) NOT NULL,                    -- 帖子 ID (FK -> posts.pid)
            user_id VARCHAR(36) NOT NULL,                    -- 用户 ID (FK -> users.uid)
            `like` SMALLINT NOT NULL,                        -- +1 / -1
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,

            CONSTRAINT uq_likes_user_post UNIQUE (user_id, post_id)
        );
        CREATE INDEX idx_likes_post_sign ON likes (post_id, `like`);
    """

    __tablename__ = "likes"

    _id = Column(Integer, primary_key=True, autoincrement=True)
    lid = Column(String(36), unique=True, nullable=False, default=lambda: str(uuid.uuid4()))
    post_id = Column(String(36), ForeignKey("posts.pid"), nullable=False)
    user_id = Column(String(36), ForeignKey("users.uid"), nullable=False)
    like = Column(SmallInteger, nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), default=now_utc)

    post = relationship("Post", back_populates="likes")

    __table_args__ = (
        # 每个用户对同一帖子只保留一条记录（点赞或点踩）
        UniqueConstraint("user_id", "post_id", name="uq_likes_user_post"),
        Index("idx_likes_post_sign", "post_id", "like"),
    )
