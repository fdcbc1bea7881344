"""
Send Command - 发送通知命令

立即发送或定时发送推送通知。
"""

import logging
from datetime import datetime
from typing import Callable, Optional

import click

from src.notihub.config import HubConfig, load_config
from src.notihub.errors import NotificationHubError
from src.notihub.formats import NotificationFormat, new_notification
from src.notihub.hub import NotificationHub


logger = logging.getLogger(__name__)

FORMAT_CHOICES = [f.value for f in NotificationFormat]


def _common_options(func: Callable) -> Callable:
    """send / schedule 共用参数"""
    options = [
        click.option(
            "--format",
            "-f",
            "fmt",
            type=click.Choice(FORMAT_CHOICES),
            required=True,
            help="通知格式：" + " / ".join(FORMAT_CHOICES),
        ),
        click.option(
            "--payload",
            "-p",
            default=None,
            help="请求体（JSON 或 XML 字符串）",
        ),
        click.option(
            "--payload-file",
            type=click.File("rb"),
            default=None,
            help="从文件读取请求体",
        ),
        click.option(
            "--tag",
            "-t",
            "tags",
            multiple=True,
            help="受众标签，可重复指定（OR 关系）",
        ),
        click.option(
            "--connection-string",
            envvar="NOTIHUB_CONNECTION_STRING",
            default=None,
            help="连接字符串（也可通过 NOTIHUB_CONNECTION_STRING 环境变量设置）",
        ),
        click.option(
            "--hub",
            envvar="NOTIHUB_HUB_PATH",
            default=None,
            help="hub 名称（也可通过 NOTIHUB_HUB_PATH 环境变量设置）",
        ),
        click.option(
            "--config",
            "config_path",
            type=click.Path(exists=True, dir_okay=False),
            default=None,
            help="YAML 配置文件路径",
        ),
        click.option(
            "--timeout",
            type=float,
            default=None,
            help="HTTP 超时（秒）",
        ),
        click.option(
            "--verbose",
            "-v",
            is_flag=True,
            help="显示详细日志",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _setup_logging(verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _resolve_config(
    config_path: Optional[str],
    connection_string: Optional[str],
    hub: Optional[str],
) -> HubConfig:
    """合并配置文件、环境变量与命令行参数（命令行优先）"""
    config = load_config(config_path) if config_path else HubConfig.from_env()
    if connection_string:
        config.connection_string = connection_string
    if hub:
        config.hub_path = hub
    return config


def _read_payload(payload: Optional[str], payload_file) -> bytes:
    if payload is not None and payload_file is not None:
        raise click.UsageError("--payload 与 --payload-file 只能指定一个")
    if payload_file is not None:
        return payload_file.read()
    if payload is not None:
        return payload.encode("utf-8")
    raise click.UsageError("必须指定 --payload 或 --payload-file")


def _parse_delivery_time(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"无法解析时间: {value}（应为 ISO-8601 格式）", param_hint="--at") from None


def _dispatch(
    fmt: str,
    payload: Optional[str],
    payload_file,
    tags: tuple[str, ...],
    connection_string: Optional[str],
    hub: Optional[str],
    config_path: Optional[str],
    timeout: Optional[float],
    verbose: bool,
    delivery_time: Optional[datetime] = None,
) -> None:
    _setup_logging(verbose)

    body = _read_payload(payload, payload_file)
    config = _resolve_config(config_path, connection_string, hub)

    if not config.is_configured:
        click.echo("❌ 配置错误: 缺少连接字符串或 hub 名称", err=True)
        click.echo("💡 提示: 请设置 NOTIHUB_CONNECTION_STRING / NOTIHUB_HUB_PATH 环境变量或使用参数指定")
        raise SystemExit(1)

    try:
        notification = new_notification(fmt, body)
        client = NotificationHub.from_config(config)

        if delivery_time is None:
            click.echo(f"📤 发送 {fmt} 通知到 {config.hub_path}")
            result = client.send(notification, list(tags) or None, timeout=timeout)
        else:
            click.echo(f"📅 定时发送 {fmt} 通知到 {config.hub_path} @ {delivery_time.isoformat()}")
            result = client.schedule(notification, delivery_time, list(tags) or None, timeout=timeout)

    except NotificationHubError as e:
        logger.debug("发送通知出错", exc_info=True)
        click.echo(f"❌ 发送失败: {e}", err=True)
        raise SystemExit(1)

    click.echo("✅ 发送成功！")
    if result:
        click.echo(result.decode("utf-8", errors="replace"))


@click.command()
@_common_options
def send(
    fmt: str,
    payload: Optional[str],
    payload_file,
    tags: tuple[str, ...],
    connection_string: Optional[str],
    hub: Optional[str],
    config_path: Optional[str],
    timeout: Optional[float],
    verbose: bool,
) -> None:
    """立即发送推送通知

    \b
    示例：
      # 广播模板通知
      notihub send -f template -p '{"message": "hello"}'

      # 发送 Apple 通知给指定标签
      notihub send -f apple -p '{"aps": {"alert": "hi"}}' -t user:42 -t vip
    """
    _dispatch(fmt, payload, payload_file, tags, connection_string, hub, config_path, timeout, verbose)


@click.command()
@_common_options
@click.option(
    "--at",
    "at",
    required=True,
    help="投递时间（ISO-8601，无时区按 UTC），不晚于当前时间时立即发送",
)
def schedule(
    fmt: str,
    payload: Optional[str],
    payload_file,
    tags: tuple[str, ...],
    connection_string: Optional[str],
    hub: Optional[str],
    config_path: Optional[str],
    timeout: Optional[float],
    verbose: bool,
    at: str,
) -> None:
    """定时发送推送通知

    \b
    示例：
      notihub schedule -f gcm -p '{"data": {"msg": "hi"}}' --at 2030-01-01T09:00:00+08:00
    """
    delivery_time = _parse_delivery_time(at)
    _dispatch(
        fmt,
        payload,
        payload_file,
        tags,
        connection_string,
        hub,
        config_path,
        timeout,
        verbose,
        delivery_time=delivery_time,
    )
