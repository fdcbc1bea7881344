"""
Hub Transports - 传输层

支持的传输：
- RequestsTransport: 基于 requests.Session 的 HTTP 传输
"""

from src.notihub.transport.base import HubTransport
from src.notihub.transport.requests_transport import RequestsTransport

__all__ = ["HubTransport", "RequestsTransport"]
