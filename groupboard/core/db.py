from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from groupboard.core.exceptions import StoreFailure


@contextmanager
def transaction(db: Session):
    """
    写操作事务：
    - 正常结束提交
    - 出错回滚，再把异常抛给上层
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


@contextmanager
def store_errors():
    """
    把 SQLAlchemy 的异常统一转换成 StoreFailure，业务层只认这一种数据层错误
    """
    try:
        yield
    except SQLAlchemyError as e:
        raise StoreFailure(e) from e
