"""
应用配置：从环境变量 / .env 读取
"""
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal, Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# 项目根目录下的 .env（存在才加载，容器里一般直接走环境变量）
env_path = Path(__file__).resolve().parent.parent.parent / ".env"
if env_path.exists():
    load_dotenv(dotenv_path=env_path)


class Settings(BaseSettings):
    """
    应用配置项
    """
    # 数据库
    DB_HOST: str = Field(default="127.0.0.1")
    DB_PORT: int = Field(default=3306)
    DB_USER: str = Field(default="root")
    DB_PASSWORD: str = Field(default="")
    DB_NAME: str = Field(default="groupboard")
    DB_ECHO: bool = Field(default=False)
    # 启动时自动建表（仅开发环境使用）
    DB_CREATE_TABLES: bool = Field(default=False)

    # 显式给出的连接串优先（测试里用 sqlite）
    DATABASE_URL: Optional[str] = Field(default=None, validate_default=True)

    # 用户邮箱加解密密钥（进程级）
    AES_SECRET_KEY: str = Field(default="")

    # 帖子图片存放目录
    IMAGES_DIR: str = Field(default="images")

    # 点赞 / 点踩 / 评论三个统计查询的总等待时间（秒），None 表示不限
    AGGREGATE_TIMEOUT_SECONDS: Optional[float] = Field(default=10.0)

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")

    # 上游网关认证后写入的用户头，例如 X-User-Id；为空则不启用
    TRUSTED_USER_HEADER: Optional[str] = None

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def assemble_database_url(cls, v: Optional[str], info: Any) -> Optional[str]:
        """
        未提供 DATABASE_URL 时，由 DB_* 拼出 MySQL 连接串
        """
        if v:
            return v

        values = info.data
        return (
            f"mysql+pymysql://{values.get('DB_USER')}:{values.get('DB_PASSWORD')}"
            f"@{values.get('DB_HOST')}:{values.get('DB_PORT')}/{values.get('DB_NAME')}"
            "?charset=utf8mb4"
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
