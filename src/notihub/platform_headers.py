"""
Platform Payload Decorator - 平台附加请求头

根据通知格式与负载推导额外的传输头。目前仅 Apple 格式需要：
- 后台推送 (aps.content-available == 1): X-Apns-Push-Type=background, X-Apns-Priority=5
- 其他情况 (alert / 解析失败): X-Apns-Push-Type=alert, X-Apns-Priority=10
"""

import json
import logging
from typing import Any, Callable

from src.notihub.formats import Notification, NotificationFormat

logger = logging.getLogger(__name__)

APNS_PUSH_TYPE_HEADER = "X-Apns-Push-Type"
APNS_PRIORITY_HEADER = "X-Apns-Priority"

APNS_BACKGROUND = "background"
APNS_ALERT = "alert"

_BACKGROUND_HEADERS = {APNS_PUSH_TYPE_HEADER: APNS_BACKGROUND, APNS_PRIORITY_HEADER: "5"}
_ALERT_HEADERS = {APNS_PUSH_TYPE_HEADER: APNS_ALERT, APNS_PRIORITY_HEADER: "10"}

_CONTENT_AVAILABLE_KEYS = ("content-available", "contentAvailable")


def _load_aps(payload: bytes) -> dict[str, Any] | None:
    try:
        data = json.loads(payload)
    except (ValueError, UnicodeDecodeError) as e:
        logger.debug(f"Apple payload is not valid JSON, using alert defaults: {e}")
        return None

    if not isinstance(data, dict):
        return None
    aps = data.get("aps")
    return aps if isinstance(aps, dict) else None


def is_background_push(payload: bytes) -> bool:
    """判断 Apple 负载是否为后台推送

    content-available 为整数 1 且不含 alert 时视为后台推送。
    """
    aps = _load_aps(payload)
    if aps is None or "alert" in aps:
        return False

    for key in _CONTENT_AVAILABLE_KEYS:
        flag = aps.get(key)
        # bool 是 int 的子类，True 不算
        if isinstance(flag, int) and not isinstance(flag, bool) and flag == 1:
            return True
    return False


def apple_headers(notification: Notification) -> dict[str, str]:
    """Apple 推送元数据头"""
    if is_background_push(notification.payload):
        return dict(_BACKGROUND_HEADERS)
    return dict(_ALERT_HEADERS)


def no_headers(notification: Notification) -> dict[str, str]:
    return {}


HeaderRule = Callable[[Notification], dict[str, str]]

_DECORATION_RULES: dict[NotificationFormat, HeaderRule] = {
    NotificationFormat.APPLE: apple_headers,
}


def platform_headers(notification: Notification) -> dict[str, str]:
    """计算通知的平台附加头

    Args:
        notification: 通知

    Returns:
        附加请求头，未配置规则的格式返回空字典
    """
    rule = _DECORATION_RULES.get(notification.format, no_headers)
    return rule(notification)
