from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from fastapi import Depends

from groupboard.core.config import get_settings
from groupboard.models.base import Base
# 导入全部模型，保证 relationship 中的字符串引用可以被解析
from groupboard.models import user, post, comment, like  # noqa: F401
from groupboard.storage.post.SQLAlchemyPostRepository import SQLAlchemyPostRepository
from groupboard.storage.post_aggregate.SQLAlchemyPostAggregateRepository import SQLAlchemyPostAggregateRepository

settings = get_settings()

# SQLAlchemy 引擎
engine = create_engine(settings.DATABASE_URL, echo=settings.DB_ECHO, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db() -> None:
    """建表（只建不存在的表，迁移不在这里做）"""
    Base.metadata.create_all(bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_factory() -> sessionmaker:
    return SessionLocal


# 未来可以根据配置切换不同的实现
def get_post_repo(db: Session = Depends(get_db)) -> SQLAlchemyPostRepository:
    return SQLAlchemyPostRepository(db)
def get_aggregate_repo(session_factory: sessionmaker = Depends(get_session_factory)) -> SQLAlchemyPostAggregateRepository:
    return SQLAlchemyPostAggregateRepository(session_factory)
