"""
Notification Hub - 通知调度器

公开入口：
- send: 立即发送 (messages)
- schedule: 定时发送 (schedulednotifications)，投递时间不晚于当前时间时退化为立即发送

流程：校验格式 -> 平台附加头 -> SAS 签名 -> 构建请求 -> 传输层执行
"""

import logging
from datetime import datetime, timedelta
from typing import Optional, Sequence

from src.notihub.clock import (
    DEFAULT_TOKEN_TTL,
    Clock,
    ExpiryTimeFunc,
    as_utc,
    build_expiry_time_func,
    system_clock,
)
from src.notihub.config import HubConfig
from src.notihub.credentials import HubCredentials, HubEndpoint, parse_connection_string
from src.notihub.errors import InvalidFormatError, TransportError
from src.notihub.formats import Notification, is_valid
from src.notihub.platform_headers import platform_headers
from src.notihub.request_builder import (
    MESSAGES_SEGMENT,
    SCHEDULE_TIME_HEADER,
    SCHEDULED_SEGMENT,
    build_request,
)
from src.notihub.signing import TokenSigner
from src.notihub.transport.base import HubTransport
from src.notihub.transport.requests_transport import RequestsTransport

logger = logging.getLogger(__name__)

SCHEDULE_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S"


class NotificationHub:
    """通知中心客户端

    构建后不再修改任何状态，可被多个线程并发使用。
    每次调用都重新读取时钟并生成新的令牌。

    使用方式：
        hub = NotificationHub.from_connection_string(conn_str, "myhub")
        notification = new_notification(NotificationFormat.APPLE, payload)
        hub.send(notification, ["user:42"])

    或定时发送：
        hub.schedule(notification, datetime.now(timezone.utc) + timedelta(hours=1))
    """

    def __init__(
        self,
        endpoint: HubEndpoint,
        credentials: HubCredentials,
        transport: Optional[HubTransport] = None,
        expiry_time_func: Optional[ExpiryTimeFunc] = None,
        clock: Clock = system_clock,
    ) -> None:
        """初始化

        Args:
            endpoint: hub 地址
            credentials: SAS 凭据
            transport: 传输层，默认 RequestsTransport
            expiry_time_func: 令牌过期时间函数，默认 clock() + 1 小时
            clock: 定时发送判断使用的时间源
        """
        self._endpoint = endpoint
        self._credentials = credentials
        self._signer = TokenSigner(credentials.key_name, credentials.key_value)
        self._transport = transport if transport is not None else RequestsTransport()
        if expiry_time_func is None:
            expiry_time_func = build_expiry_time_func(clock=clock)
        self._expiry_time_func = expiry_time_func
        self._clock = clock

    @classmethod
    def from_connection_string(
        cls,
        connection_string: str,
        hub_path: str,
        transport: Optional[HubTransport] = None,
        token_ttl: timedelta = DEFAULT_TOKEN_TTL,
    ) -> "NotificationHub":
        """从连接字符串创建

        格式错误的连接字符串得到空的签名字段，请求将在服务端失败。

        Args:
            connection_string: Endpoint=sb://...;SharedAccessKeyName=...;SharedAccessKey=...
            hub_path: hub 名称
            transport: 传输层
            token_ttl: 令牌有效期

        Returns:
            NotificationHub
        """
        info = parse_connection_string(connection_string)
        return cls(
            endpoint=HubEndpoint.for_hub(info.host, hub_path),
            credentials=info.credentials,
            transport=transport,
            expiry_time_func=build_expiry_time_func(token_ttl),
        )

    @classmethod
    def from_config(
        cls,
        config: HubConfig,
        transport: Optional[HubTransport] = None,
    ) -> "NotificationHub":
        """从配置创建"""
        return cls.from_connection_string(
            config.connection_string,
            config.hub_path,
            transport=transport if transport is not None else RequestsTransport(timeout=config.timeout),
            token_ttl=timedelta(seconds=config.token_ttl),
        )

    @property
    def endpoint(self) -> HubEndpoint:
        return self._endpoint

    @property
    def credentials(self) -> HubCredentials:
        return self._credentials

    @property
    def transport(self) -> HubTransport:
        return self._transport

    def send(
        self,
        notification: Notification,
        tags: Optional[Sequence[str]] = None,
        *,
        timeout: Optional[float] = None,
    ) -> bytes:
        """立即发送

        Args:
            notification: 通知
            tags: 受众标签（OR 关系），None 表示广播
            timeout: 透传给传输层的超时

        Returns:
            传输层返回的原始响应体

        Raises:
            InvalidFormatError: 通知格式无效
            TransportError: 传输失败
        """
        return self._dispatch(MESSAGES_SEGMENT, notification, tags, timeout=timeout)

    def schedule(
        self,
        notification: Notification,
        delivery_time: datetime,
        tags: Optional[Sequence[str]] = None,
        *,
        timeout: Optional[float] = None,
    ) -> bytes:
        """定时发送

        投递时间晚于当前时间时发往 schedulednotifications；
        否则退化为立即发送（不能定时到过去）。

        Args:
            notification: 通知
            delivery_time: 投递时间（naive 时间按 UTC 解释）
            tags: 受众标签
            timeout: 透传给传输层的超时

        Returns:
            传输层返回的原始响应体

        Raises:
            InvalidFormatError: 通知格式无效
            TransportError: 传输失败
        """
        delivery_utc = as_utc(delivery_time)
        now = as_utc(self._clock())

        if delivery_utc <= now:
            logger.info(
                f"Delivery time {delivery_utc.isoformat()} is not in the future, sending immediately"
            )
            return self._dispatch(MESSAGES_SEGMENT, notification, tags, timeout=timeout)

        return self._dispatch(
            SCHEDULED_SEGMENT,
            notification,
            tags,
            extra_headers={SCHEDULE_TIME_HEADER: delivery_utc.strftime(SCHEDULE_TIME_FORMAT)},
            timeout=timeout,
        )

    def _dispatch(
        self,
        segment: str,
        notification: Notification,
        tags: Optional[Sequence[str]],
        extra_headers: Optional[dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> bytes:
        if not is_valid(notification.format):
            raise InvalidFormatError(f"Unknown notification format: {notification.format!r}")

        headers = platform_headers(notification)
        if extra_headers:
            headers.update(extra_headers)

        token = self._signer.generate_token(self._endpoint.sas_uri, self._expiry_time_func())

        request = build_request(
            self._endpoint.base_url,
            segment,
            notification,
            token,
            tags=tags,
            extra_headers=headers,
        )

        logger.debug(
            f"Dispatching {notification.format.value} notification to {segment} "
            f"({len(notification.payload)} bytes, tags={list(tags or [])})"
        )

        try:
            body = self._transport.execute(request, timeout=timeout)
        except Exception as e:
            raise TransportError(f"Failed to post notification to {segment}: {e}") from e

        logger.info(f"Notification posted to {segment} ({notification.format.value})")
        return body
