"""
Hub Credentials - 通知中心连接信息

解析连接字符串：

    Endpoint=sb://<host>/;SharedAccessKeyName=<name>;SharedAccessKey=<value>

格式错误的连接字符串不会抛异常，而是得到空的 host 与密钥字段：
hub 仍可构建，请求会在服务端被拒绝而不是在本地失败。
这一行为是有意保留的，但值得重新评估。
"""

import logging
from dataclasses import dataclass, field
from urllib.parse import urlencode, urlsplit

from src.notihub.request_builder import join_url
from src.notihub.signing import signing_uri

logger = logging.getLogger(__name__)

SCHEME_DEFAULT = "https"
API_VERSION_PARAM = "api-version"
API_VERSION_VALUE = "2015-01"

ENDPOINT_KEY = "Endpoint"
KEY_NAME_KEY = "SharedAccessKeyName"
KEY_VALUE_KEY = "SharedAccessKey"


@dataclass(frozen=True)
class HubCredentials:
    """SAS 签名凭据"""

    key_name: str = ""
    key_value: str = ""


@dataclass(frozen=True)
class HubEndpoint:
    """通知中心地址

    Attributes:
        base_url: https://<host>/<hubPath>?api-version=<version>
    """

    base_url: str

    @classmethod
    def for_hub(
        cls,
        host: str,
        hub_path: str,
        scheme: str = SCHEME_DEFAULT,
        api_version: str = API_VERSION_VALUE,
    ) -> "HubEndpoint":
        query = urlencode({API_VERSION_PARAM: api_version})
        return cls(f"{scheme}://{host}/{hub_path.strip('/')}?{query}")

    @property
    def host(self) -> str:
        return urlsplit(self.base_url).netloc

    @property
    def sas_uri(self) -> str:
        """签名作用域（scheme://host，小写）"""
        return signing_uri(self.base_url)

    def url_for(self, segment: str) -> str:
        return join_url(self.base_url, segment)


@dataclass(frozen=True)
class ConnectionInfo:
    """连接字符串解析结果"""

    host: str = ""
    credentials: HubCredentials = field(default_factory=HubCredentials)


def parse_connection_string(connection_string: str) -> ConnectionInfo:
    """解析连接字符串

    Args:
        connection_string: Endpoint=sb://...;SharedAccessKeyName=...;SharedAccessKey=...

    Returns:
        ConnectionInfo，缺失的字段为空字符串
    """
    fields: dict[str, str] = {}
    for part in (connection_string or "").split(";"):
        key, sep, value = part.partition("=")
        if sep:
            fields[key.strip()] = value.strip()

    host = ""
    endpoint = fields.get(ENDPOINT_KEY, "")
    if endpoint:
        host = urlsplit(endpoint).netloc

    info = ConnectionInfo(
        host=host,
        credentials=HubCredentials(
            key_name=fields.get(KEY_NAME_KEY, ""),
            key_value=fields.get(KEY_VALUE_KEY, ""),
        ),
    )

    if not (info.host and info.credentials.key_name and info.credentials.key_value):
        logger.warning(
            "Connection string is missing Endpoint, SharedAccessKeyName or SharedAccessKey; "
            "requests will be rejected by the service"
        )

    return info
