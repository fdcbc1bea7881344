"""
Token Signer - SAS 令牌签名

生成服务端校验的 SharedAccessSignature 授权令牌：

    SharedAccessSignature sr=<uri>&sig=<signature>&se=<expiry>&skn=<keyName>

签名算法必须逐字节一致：
1. 目标 URI 为 hub 的 scheme://host（小写）
2. 按查询串规则编码 URI
3. 签名输入为 "<编码后 URI>\\n<过期时间戳>"
4. HMAC-SHA256 后 Base64 编码
"""

import base64
import hashlib
import hmac
import logging
from datetime import datetime
from urllib.parse import quote_plus, urlsplit

from src.notihub.clock import unix_timestamp

logger = logging.getLogger(__name__)

TOKEN_PREFIX = "SharedAccessSignature"


def signing_uri(url: str) -> str:
    """签名作用域：endpoint 的 scheme://host（小写，去掉路径和查询串）"""
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}".lower()


def compute_signature(encoded_uri: str, expiry: str, key_value: str) -> str:
    """计算签名

    Args:
        encoded_uri: 查询串编码后的目标 URI
        expiry: Unix 时间戳字符串
        key_value: 共享密钥

    Returns:
        Base64 编码的 HMAC-SHA256 签名
    """
    string_to_sign = f"{encoded_uri}\n{expiry}"

    hmac_code = hmac.new(
        key_value.encode("utf-8"),
        string_to_sign.encode("utf-8"),
        digestmod=hashlib.sha256,
    ).digest()

    return base64.b64encode(hmac_code).decode("utf-8")


class TokenSigner:
    """SAS 令牌签名器

    使用方式：
        signer = TokenSigner("DefaultFullSharedAccessSignature", "secret")
        token = signer.generate_token("https://ns.servicebus.windows.net", expiry)
    """

    def __init__(self, key_name: str, key_value: str) -> None:
        self._key_name = key_name
        self._key_value = key_value

    @property
    def key_name(self) -> str:
        return self._key_name

    def generate_token(self, uri: str, expiry: datetime) -> str:
        """生成授权令牌

        Args:
            uri: 签名作用域（hub 的 scheme://host）
            expiry: 过期时间

        Returns:
            Authorization 头的值
        """
        encoded_uri = quote_plus(uri.lower())
        se = unix_timestamp(expiry)
        signature = compute_signature(encoded_uri, se, self._key_value)

        logger.debug(f"Generated SAS token for {uri} (se={se}, skn={self._key_name})")

        return (
            f"{TOKEN_PREFIX} sr={encoded_uri}"
            f"&sig={quote_plus(signature)}"
            f"&se={se}"
            f"&skn={quote_plus(self._key_name)}"
        )
