from sqlalchemy.orm import declarative_base

# 所有模型共用的声明基类
Base = declarative_base()
