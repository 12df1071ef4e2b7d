from sqlalchemy import Column, Integer, String, TIMESTAMP, Text
from sqlalchemy.orm import relationship
import uuid
from groupboard.models.base import Base
from groupboard.core.time import now_utc


class User(Base):
    """ 用户模型，对应数据库中的 users 表。

        CREATE TABLE IF NOT EXISTS users (
            _id INT AUTO_INCREMENT PRIMARY KEY,        -- 系统主键 ID
            uid VARCHAR(36) UNIQUE,                    -- 用户的业务主键（UUID）
            first_name VARCHAR(100) NOT NULL,          -- 名
            last_name VARCHAR(100) NOT NULL,           -- 姓
            email VARCHAR(255) NOT NULL,               -- 邮箱密文（AES 加密后存储）
            image_url VARCHAR(255),                    -- 头像 URL
            department VARCHAR(100),                   -- 所在部门
            expert_in TEXT,                            -- 擅长领域
            interested_in TEXT,                        -- 兴趣
            one_word VARCHAR(255),                     -- 一句话介绍
            is_up_for TEXT,                            -- 愿意参与的活动
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );
    """

    __tablename__ = "users"
    # 系统主键：自增
    _id = Column(Integer, primary_key=True, autoincrement=True)
    # 业务主键：UUID
    uid = Column(String(36), unique=True, nullable=False, default=lambda: str(uuid.uuid4()))
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)      # 密文，读取时需解密
    image_url = Column(String(255), nullable=True)
    department = Column(String(100), nullable=True)
    expert_in = Column(Text, nullable=True)
    interested_in = Column(Text, nullable=True)
    one_word = Column(String(255), nullable=True)
    is_up_for = Column(Text, nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), default=now_utc)
    updated_at = Column(TIMESTAMP(timezone=True), default=now_utc, onupdate=now_utc)

    # 反向引用：该用户的所有帖子
    posts = relationship("Post", back_populates="user")
    # 反向引用：该用户的所有评论
    comments = relationship("Comment", back_populates="user")
