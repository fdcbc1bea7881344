"""
Hub Configuration - 通知中心配置

配置来源（优先级从高到低）：
1. 环境变量（支持 .env 文件）
2. YAML 配置文件 config/notihub.yaml
3. dataclass 默认值
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "notihub.yaml"

CONNECTION_STRING_ENV = "NOTIHUB_CONNECTION_STRING"
HUB_PATH_ENV = "NOTIHUB_HUB_PATH"
TIMEOUT_ENV = "NOTIHUB_TIMEOUT"
TOKEN_TTL_ENV = "NOTIHUB_TOKEN_TTL"


@dataclass
class HubConfig:
    """通知中心配置

    Attributes:
        connection_string: Endpoint=sb://...;SharedAccessKeyName=...;SharedAccessKey=...
        hub_path: hub 名称
        timeout: HTTP 超时（秒）
        token_ttl: SAS 令牌有效期（秒）
    """

    connection_string: str = ""
    hub_path: str = ""
    timeout: float = 10.0
    token_ttl: int = 3600

    @property
    def is_configured(self) -> bool:
        return bool(self.connection_string and self.hub_path)

    @classmethod
    def from_env(cls) -> "HubConfig":
        """从环境变量加载配置"""
        load_dotenv()
        return cls(
            connection_string=os.getenv(CONNECTION_STRING_ENV, ""),
            hub_path=os.getenv(HUB_PATH_ENV, ""),
            timeout=float(os.getenv(TIMEOUT_ENV, "10")),
            token_ttl=int(os.getenv(TOKEN_TTL_ENV, "3600")),
        )

    @classmethod
    def from_yaml_config(cls, config: dict[str, Any]) -> "HubConfig":
        """从 YAML 配置加载

        hub:
          connection_string_env: NOTIHUB_CONNECTION_STRING
          connection_string: ...
          path_env: NOTIHUB_HUB_PATH
          path: myhub
        http:
          timeout: 10
        token:
          ttl: 3600
        """
        load_dotenv()
        hub = config.get("hub", {}) or {}
        http = config.get("http", {}) or {}
        token = config.get("token", {}) or {}

        # 优先使用环境变量
        conn_env = hub.get("connection_string_env", CONNECTION_STRING_ENV)
        path_env = hub.get("path_env", HUB_PATH_ENV)

        return cls(
            connection_string=os.getenv(conn_env) or hub.get("connection_string", ""),
            hub_path=os.getenv(path_env) or hub.get("path", ""),
            timeout=float(http.get("timeout", 10.0)),
            token_ttl=int(token.get("ttl", 3600)),
        )


def load_config(path: Optional[Union[str, Path]] = None) -> HubConfig:
    """加载配置文件

    Args:
        path: YAML 配置路径，默认 config/notihub.yaml

    Returns:
        HubConfig；文件不存在时仅使用环境变量
    """
    config_path = Path(path) if path else DEFAULT_CONFIG_PATH
    if not config_path.exists():
        if path:
            raise FileNotFoundError(f"Config file not found: {config_path}")
        logger.debug(f"{config_path} not found, loading config from environment")
        return HubConfig.from_env()

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    return HubConfig.from_yaml_config(data)
