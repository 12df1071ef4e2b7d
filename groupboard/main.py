import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from groupboard.core.auth import TrustedHeaderAuthMiddleware
from groupboard.core.config import get_settings
from groupboard.core.error_handlers import register_exception_handlers
from groupboard.core.logx import logger
from groupboard.routers import posts
from groupboard.storage.database import init_db


@asynccontextmanager
async def lifespan(app: FastAPI):
    if get_settings().DB_CREATE_TABLES:
        init_db()
        logger.info("Database tables ensured")
    yield


def create_app() -> FastAPI:
    settings = get_settings()
    logger.set_level(settings.LOG_LEVEL)

    app = FastAPI(title="Groupboard", lifespan=lifespan)

    # 注册路由
    app.include_router(posts.posts_router)
    register_exception_handlers(app)

    if settings.TRUSTED_USER_HEADER:
        app.add_middleware(TrustedHeaderAuthMiddleware, header_name=settings.TRUSTED_USER_HEADER)

    # 帖子图片静态访问
    os.makedirs(settings.IMAGES_DIR, exist_ok=True)
    app.mount("/images", StaticFiles(directory=settings.IMAGES_DIR), name="images")

    @app.get("/")
    def root():
        return {"message": "Welcome to Groupboard"}

    return app
