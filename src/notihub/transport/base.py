"""
Base Hub Transport - 传输层基类

传输层接收构建好的请求，成功时返回原始响应体，任何失败都抛出异常。
重试与超时策略属于传输层实现，不属于调度核心。
"""

from abc import ABC, abstractmethod
from typing import Optional

from src.notihub.request_builder import HubRequest


class HubTransport(ABC):
    """传输层基类"""

    @property
    @abstractmethod
    def name(self) -> str:
        """传输名称"""
        pass

    @abstractmethod
    def execute(
        self,
        request: HubRequest,
        timeout: Optional[float] = None,
    ) -> bytes:
        """执行请求

        Args:
            request: 待发送请求
            timeout: 超时（秒），None 表示使用传输默认值

        Returns:
            原始响应体

        Raises:
            TransportError: 网络错误、非 2xx 状态码或读取失败
        """
        pass
