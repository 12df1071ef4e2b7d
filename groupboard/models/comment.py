from sqlalchemy import Column, Integer, String, TIMESTAMP, Text, ForeignKey, Index
from sqlalchemy.orm import relationship
import uuid
from groupboard.models.base import Base
from groupboard.core.time import now_utc


class Comment(Base):
    """ 评论表

        CREATE TABLE IF NOT EXISTS comments (
            _id INT AUTO_INCREMENT PRIMARY KEY,               -- 系统主键（自增）
            cid VARCHAR(36) NOT NULL UNIQUE,                  -- 业务主键（UUID）
            post_id VARCHAR(36) NOT NULL,                     -- 所属帖子（FK -> posts.pid）
            user_id VARCHAR(36) NOT NULL,                     -- 评论作者（FK -> users.uid）
            text TEXT NOT NULL,                               -- 评论内容
            created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,

            FOREIGN KEY (post_id) REFERENCES posts(pid),
            FOREIGN KEY (user_id) REFERENCES users(uid)
        );
    """

    __tablename__ = "comments"

    _id = Column(Integer, primary_key=True, autoincrement=True)
    cid = Column(String(36), unique=True, nullable=False, default=lambda: str(uuid.uuid4()))
    post_id = Column(String(36), ForeignKey("posts.pid"), nullable=False)
    user_id = Column(String(36), ForeignKey("users.uid"), nullable=False)
    text = Column(Text, nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), default=now_utc)

    user = relationship("User", back_populates="comments")
    post = relationship("Post", back_populates="comments")

    __table_args__ = (
        Index("idx_comments_post_id", "post_id"),
    )
