import base64
import binascii
import hashlib
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from groupboard.core.config import get_settings
from groupboard.core.exceptions import DecryptionFault

NONCE_SIZE = 12


class AESCipher:
    """
    用户邮箱字段的对称加解密（AES-GCM）：
    - 密钥 = SHA-256(进程级密钥串)
    - 密文格式：urlsafe base64(nonce(12 字节) + ciphertext + tag)
    同一明文每次加密结果不同，因此邮箱唯一性校验不能依赖密文比较
    """

    def __init__(self, secret: str):
        self._secret = secret

    def _aead(self) -> AESGCM:
        if not self._secret:
            raise DecryptionFault("encryption key is not configured")
        key = hashlib.sha256(self._secret.encode("utf-8")).digest()
        return AESGCM(key)

    def encrypt(self, plain_text: str) -> str:
        nonce = os.urandom(NONCE_SIZE)
        sealed = self._aead().encrypt(nonce, plain_text.encode("utf-8"), None)
        return base64.urlsafe_b64encode(nonce + sealed).decode("ascii")

    def decrypt(self, token: str) -> str:
        aead = self._aead()
        try:
            raw = base64.urlsafe_b64decode(token.encode("ascii"))
        except (binascii.Error, ValueError, AttributeError) as e:
            raise DecryptionFault(f"malformed ciphertext: {e}") from e

        if len(raw) <= NONCE_SIZE:
            raise DecryptionFault("malformed ciphertext: too short")

        try:
            plain = aead.decrypt(raw[:NONCE_SIZE], raw[NONCE_SIZE:], None)
        except InvalidTag as e:
            raise DecryptionFault("ciphertext does not match the configured key") from e
        return plain.decode("utf-8")


def get_cipher() -> AESCipher:
    return AESCipher(get_settings().AES_SECRET_KEY)
