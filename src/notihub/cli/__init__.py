"""
Notification Hub CLI - 命令行工具

提供命令：
- send: 立即发送通知
- schedule: 定时发送通知
"""

from src.notihub.cli.main import cli

__all__ = ["cli"]
