"""
Clock - 时间源

签名过期时间与定时发送判断都通过可注入的时间源获取，便于测试冻结时间。
"""

from datetime import datetime, timedelta, timezone
from typing import Callable

Clock = Callable[[], datetime]
ExpiryTimeFunc = Callable[[], datetime]

DEFAULT_TOKEN_TTL = timedelta(hours=1)


def system_clock() -> datetime:
    """当前 UTC 时间"""
    return datetime.now(timezone.utc)


def as_utc(dt: datetime) -> datetime:
    """转换为带时区的 UTC 时间（naive 时间按 UTC 解释）"""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def unix_timestamp(dt: datetime) -> str:
    """Unix 时间戳（秒）的十进制字符串"""
    return str(int(as_utc(dt).timestamp()))


def build_expiry_time_func(
    ttl: timedelta = DEFAULT_TOKEN_TTL,
    clock: Clock = system_clock,
) -> ExpiryTimeFunc:
    """构建过期时间函数

    每次调用都重新读取时钟，返回 clock() + ttl。

    Args:
        ttl: 令牌有效期
        clock: 时间源

    Returns:
        过期时间函数
    """

    def expiry_time() -> datetime:
        return clock() + ttl

    return expiry_time
