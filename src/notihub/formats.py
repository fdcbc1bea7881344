"""
Notification Format Registry - 通知格式注册表

支持的平台格式及其内容类型：
- template / gcm / apple / baidu / adm: application/json
- windows / windowsphone: application/xml
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from src.notihub.errors import InvalidFormatError

JSON_CONTENT_TYPE = "application/json"
XML_CONTENT_TYPE = "application/xml"


class NotificationFormat(str, Enum):
    """通知格式

    值即为 ServiceBusNotification-Format 头的取值。
    """

    TEMPLATE = "template"
    ANDROID = "gcm"
    APPLE = "apple"
    BAIDU = "baidu"
    KINDLE = "adm"
    WINDOWS = "windows"
    WINDOWS_PHONE = "windowsphone"


_CONTENT_TYPES: dict[NotificationFormat, str] = {
    NotificationFormat.TEMPLATE: JSON_CONTENT_TYPE,
    NotificationFormat.ANDROID: JSON_CONTENT_TYPE,
    NotificationFormat.APPLE: JSON_CONTENT_TYPE,
    NotificationFormat.BAIDU: JSON_CONTENT_TYPE,
    NotificationFormat.KINDLE: JSON_CONTENT_TYPE,
    NotificationFormat.WINDOWS: XML_CONTENT_TYPE,
    NotificationFormat.WINDOWS_PHONE: XML_CONTENT_TYPE,
}

# 新增格式时必须同步更新映射表
if set(_CONTENT_TYPES) != set(NotificationFormat):
    missing = sorted(f.value for f in set(NotificationFormat) - set(_CONTENT_TYPES))
    raise RuntimeError(f"Content type mapping incomplete, missing: {missing}")


FormatLike = Union[NotificationFormat, str]


def is_valid(fmt: FormatLike) -> bool:
    """检查格式是否为已知格式

    Args:
        fmt: 格式枚举或其字符串值

    Returns:
        是否有效
    """
    try:
        NotificationFormat(fmt)
    except ValueError:
        return False
    return True


def to_format(fmt: FormatLike) -> NotificationFormat:
    """将字符串转换为格式枚举

    Raises:
        InvalidFormatError: 未知格式
    """
    try:
        return NotificationFormat(fmt)
    except ValueError:
        raise InvalidFormatError(f"Unknown notification format: {fmt!r}") from None


def get_content_type(fmt: FormatLike) -> str:
    """获取格式对应的 Content-Type

    Args:
        fmt: 通知格式

    Returns:
        application/json 或 application/xml
    """
    return _CONTENT_TYPES[to_format(fmt)]


@dataclass(frozen=True)
class Notification:
    """通知

    格式与原始负载（调用方已序列化好的请求体）的不可变组合。

    Attributes:
        format: 通知格式
        payload: 原样发送的请求体
    """

    format: NotificationFormat
    payload: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "format", to_format(self.format))
        if isinstance(self.payload, str):
            object.__setattr__(self, "payload", self.payload.encode("utf-8"))
        elif isinstance(self.payload, bytearray):
            object.__setattr__(self, "payload", bytes(self.payload))
        elif not isinstance(self.payload, bytes):
            raise TypeError(f"payload must be bytes or str, got {type(self.payload).__name__}")

    @property
    def content_type(self) -> str:
        return _CONTENT_TYPES[self.format]


def new_notification(fmt: FormatLike, payload: Union[bytes, str]) -> Notification:
    """创建通知

    Args:
        fmt: 通知格式
        payload: 请求体

    Returns:
        Notification

    Raises:
        InvalidFormatError: 格式无效
    """
    if not is_valid(fmt):
        raise InvalidFormatError(f"Unknown notification format: {fmt!r}")
    return Notification(NotificationFormat(fmt), payload)
