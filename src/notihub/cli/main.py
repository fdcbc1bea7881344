"""
CLI Main Entry Point - 命令行主入口

使用 Click 库构建命令行工具。
"""

import click

from src.notihub.cli.commands.send import schedule, send


@click.group()
@click.version_option(version="0.1.0", prog_name="notihub")
def cli() -> None:
    """推送通知中心客户端

    发送或定时发送平台推送通知。
    """
    pass


# 注册子命令
cli.add_command(send)
cli.add_command(schedule)


if __name__ == "__main__":
    cli()
