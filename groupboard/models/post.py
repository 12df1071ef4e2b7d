from sqlalchemy import Column, Integer, String, TIMESTAMP, Text, ForeignKey, Index
from sqlalchemy.orm import relationship
import uuid
from groupboard.models.base import Base
from groupboard.core.time import now_utc


class Post(Base):
    """ 帖子表。点赞数 / 点踩数 / 评论数不落库，每次读取时按 likes、comments 表现算。

        CREATE TABLE IF NOT EXISTS posts (
            _id INT AUTO_INCREMENT PRIMARY KEY,           -- 系统主键ID（自增）
            pid VARCHAR(36) UNIQUE,                       -- 业务主键PID（UUID）
            title VARCHAR(255) NOT NULL,                  -- 标题
            description TEXT,                             -- 正文
            topic VARCHAR(100),                           -- 话题
            image_url VARCHAR(255),                       -- 配图 URL
            user_id VARCHAR(36) NOT NULL,                 -- 作者 ID (FK -> users.uid)
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,

            FOREIGN KEY (user_id) REFERENCES users(uid)
        );

        CREATE INDEX idx_posts_user_id ON posts (user_id);
        CREATE INDEX idx_posts_topic ON posts (topic);
        CREATE INDEX idx_posts_created_at ON posts (created_at);
    """

    __tablename__ = "posts"

    _id = Column(Integer, primary_key=True, autoincrement=True)  # 系统主键ID，不对外暴露
    pid = Column(String(36), unique=True, nullable=False, default=lambda: str(uuid.uuid4()))

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    topic = Column(String(100), nullable=True)
    image_url = Column(String(255), nullable=True)
    user_id = Column(String(36), ForeignKey("users.uid"), nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), default=now_utc)
    updated_at = Column(TIMESTAMP(timezone=True), default=now_utc, onupdate=now_utc)

    # 反向引用：帖子作者
    user = relationship("User", back_populates="posts")
    # 删除帖子时一并删除评论和点赞
    comments = relationship("Comment", back_populates="post", cascade="all, delete-orphan")
    likes = relationship("Like", back_populates="post", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_posts_user_id", "user_id"),
        Index("idx_posts_topic", "topic"),
        Index("idx_posts_created_at", "created_at"),
    )
