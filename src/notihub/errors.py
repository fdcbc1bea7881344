"""
Notification Hub Errors - 通知中心异常

定义:
- NotificationHubError: 异常基类
- InvalidFormatError: 不支持的通知格式
- TransportError: 传输层错误
"""


class NotificationHubError(Exception):
    """通知中心错误基类"""

    pass


class InvalidFormatError(NotificationHubError, ValueError):
    """通知格式无效

    Raised when a notification is constructed with an unknown format.
    """

    pass


class TransportError(NotificationHubError):
    """传输错误

    包装传输层返回的任何失败（网络错误、非 2xx 状态码、读取失败）。
    """

    pass
