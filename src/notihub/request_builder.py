"""
Request Builder - 请求构建器

组装发往通知中心的 POST 请求：URL、请求头与请求体。
"""

from dataclasses import dataclass, field
from typing import Optional, Sequence
from urllib.parse import urlsplit, urlunsplit

from src.notihub.formats import Notification

MESSAGES_SEGMENT = "messages"
SCHEDULED_SEGMENT = "schedulednotifications"

CONTENT_TYPE_HEADER = "Content-Type"
FORMAT_HEADER = "ServiceBusNotification-Format"
TAGS_HEADER = "ServiceBusNotification-Tags"
SCHEDULE_TIME_HEADER = "ServiceBusNotification-ScheduleTime"
AUTHORIZATION_HEADER = "Authorization"

TAG_SEPARATOR = " || "


@dataclass(frozen=True)
class HubRequest:
    """待发送的请求"""

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""


def join_url(base_url: str, segment: str) -> str:
    """在基础 URL 路径后追加路径段，保留查询串

    Args:
        base_url: e.g. https://host/hub?api-version=2015-01
        segment: e.g. messages

    Returns:
        e.g. https://host/hub/messages?api-version=2015-01
    """
    parts = urlsplit(base_url)
    base_path = parts.path.strip("/")
    path = f"/{base_path}/{segment}" if base_path else f"/{segment}"
    return urlunsplit((parts.scheme, parts.netloc, path, parts.query, parts.fragment))


def format_tags(tags: Optional[Sequence[str]]) -> Optional[str]:
    """将标签拼接为 OR 表达式，空列表返回 None"""
    if not tags:
        return None
    return TAG_SEPARATOR.join(tags)


def build_request(
    base_url: str,
    segment: str,
    notification: Notification,
    token: str,
    tags: Optional[Sequence[str]] = None,
    extra_headers: Optional[dict[str, str]] = None,
) -> HubRequest:
    """构建请求

    Args:
        base_url: hub 基础 URL（含 api-version 查询参数）
        segment: messages 或 schedulednotifications
        notification: 通知
        token: SAS 授权令牌
        tags: 受众标签（OR 关系）
        extra_headers: 平台附加头等

    Returns:
        HubRequest
    """
    headers = {
        CONTENT_TYPE_HEADER: notification.content_type,
        FORMAT_HEADER: notification.format.value,
        AUTHORIZATION_HEADER: token,
    }

    tag_expression = format_tags(tags)
    if tag_expression is not None:
        headers[TAGS_HEADER] = tag_expression

    if extra_headers:
        headers.update(extra_headers)

    return HubRequest(
        method="POST",
        url=join_url(base_url, segment),
        headers=headers,
        body=notification.payload,
    )
