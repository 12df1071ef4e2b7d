import os
import uuid
from typing import Optional, Protocol

from fastapi import UploadFile

from groupboard.core.config import get_settings
from groupboard.core.exceptions import ImageStoreError
from groupboard.core.logx import logger


class IImageStore(Protocol):
    """帖子图片存储接口"""

    def save(self, upload: UploadFile) -> str:
        """保存上传文件，返回存储后的文件名"""
        ...

    def remove(self, filename: str) -> None:
        """删除文件，文件不存在时忽略"""
        ...


def filename_from_url(image_url: Optional[str]) -> Optional[str]:
    """http://host/images/abc.png -> abc.png"""
    if not image_url or "/images/" not in image_url:
        return None
    return image_url.split("/images/", 1)[1]


class LocalImageStore:
    """本地目录存储，目录同时以 /images 静态路由对外提供"""

    def __init__(self, directory: str):
        self.directory = directory

    def save(self, upload: UploadFile) -> str:
        original = os.path.basename(upload.filename or "image")
        filename = f"{uuid.uuid4().hex}_{original.replace(' ', '_')}"
        path = os.path.join(self.directory, filename)
        try:
            os.makedirs(self.directory, exist_ok=True)
            with open(path, "wb") as f:
                f.write(upload.file.read())
        except OSError as e:
            raise ImageStoreError(f"cannot store image {original}: {e}") from e

        logger.debug(f"Stored image {filename}")
        return filename

    def remove(self, filename: str) -> None:
        path = os.path.join(self.directory, os.path.basename(filename))
        try:
            os.remove(path)
        except FileNotFoundError:
            logger.warning(f"Image {filename} already gone")
        except OSError as e:
            raise ImageStoreError(f"cannot remove image {filename}: {e}") from e


def get_image_store() -> LocalImageStore:
    return LocalImageStore(get_settings().IMAGES_DIR)
