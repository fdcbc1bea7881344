"""
Notification Hub Client - 推送通知中心客户端

- formats: 通知格式注册表
- signing: SAS 令牌签名
- platform_headers: 平台附加请求头
- request_builder: 请求构建
- hub: 发送/定时发送调度
- transport: HTTP 传输
"""

from src.notihub.credentials import HubCredentials, HubEndpoint, parse_connection_string
from src.notihub.errors import InvalidFormatError, NotificationHubError, TransportError
from src.notihub.formats import (
    Notification,
    NotificationFormat,
    get_content_type,
    is_valid,
    new_notification,
)
from src.notihub.hub import NotificationHub
from src.notihub.signing import TokenSigner

__all__ = [
    "HubCredentials",
    "HubEndpoint",
    "parse_connection_string",
    "InvalidFormatError",
    "NotificationHubError",
    "TransportError",
    "Notification",
    "NotificationFormat",
    "get_content_type",
    "is_valid",
    "new_notification",
    "NotificationHub",
    "TokenSigner",
]
