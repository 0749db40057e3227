"""
RCON 核心库 - 配置模块

负责配置的加载、解析与强类型转换。
支持从 TOML 文件、环境变量或字典中加载配置。
"""

import codecs
import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .exceptions import ConfigError
from .protocols.constants import FrameConst, SessionConst

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RconConfig:
    """RconSession 的强类型配置对象。

    所有字段均为只读 (frozen=True)，确保配置在运行时不可变。

    Attributes:
        host: RCON 服务器地址。
        port: RCON 端口 (Minecraft 默认为 25575)。
        password: RCON 密码。
        request_id: 登录与命令使用的请求 ID (UID)。
        timeout: socket 超时秒数，None 表示永久阻塞。
        encoding: 命令与响应文本的编码。
        response_delay: 发送后、读取前的固定等待秒数 (0 表示不等待)。
    """

    host: str
    password: str
    port: int = SessionConst.DEFAULT_PORT
    request_id: int = SessionConst.DEFAULT_REQUEST_ID
    timeout: float | None = 10.0
    encoding: str = "utf-8"
    response_delay: float = 0.0

    @property
    def address(self) -> str:
        """`host:port` 形式的目标地址。"""
        return f"{self.host}:{self.port}"

    def __repr__(self) -> str:
        """
        覆盖默认的 repr，隐藏密码字段，防止日志泄露敏感信息。
        """
        return (
            f"<{self.__class__.__name__} "
            f"server={self.host}:{self.port}, "
            f"password='******', "
            f"request_id={self.request_id}, "
            f"timeout={self.timeout}>"
        )


def create_config_from_dict(raw_data: dict[str, Any]) -> RconConfig:
    """通用工厂：将字典转换为强类型配置对象。

    负责字段的清洗、默认值注入和类型转换。

    Args:
        raw_data: 原始配置字典 (来自 TOML 或 Env)。

    Returns:
        RconConfig: 验证并转换后的配置对象。

    Raises:
        ConfigError: 当必要字段缺失或格式错误时抛出。
    """
    try:
        # --- 内部辅助函数 ---
        def _req(key: str) -> Any:
            """获取必要字段，缺失或为空则报错"""
            if key not in raw_data or raw_data[key] in (None, ""):
                raise ConfigError(f"配置缺失: 缺少必要字段 '{key}'")
            return raw_data[key]

        def _get(key: str, default: Any) -> Any:
            """获取可选字段，缺失则使用默认值"""
            val = raw_data.get(key, default)
            return default if val in (None, "") else val

        def _to_int(key: str, default: int) -> int:
            val = _get(key, default)
            try:
                # 允许 "0x64" 形式
                return int(val, 0) if isinstance(val, str) else int(val)
            except (TypeError, ValueError):
                raise ConfigError(f"整数格式无效 '{key}': {val}")

        def _to_timeout(key: str) -> float | None:
            val = raw_data.get(key, 10.0)
            if val is None or str(val).strip().lower() in ("none", "off", ""):
                return None
            try:
                timeout = float(val)
            except (TypeError, ValueError):
                raise ConfigError(f"超时格式无效 '{key}': {val}")
            if timeout <= 0:
                raise ConfigError(f"超时必须为正数 '{key}': {val}")
            return timeout

        # --- 字段校验 ---
        port = _to_int("port", SessionConst.DEFAULT_PORT)
        if not 0 < port < 65536:
            raise ConfigError(f"端口越界: {port}")

        request_id = _to_int("request_id", SessionConst.DEFAULT_REQUEST_ID)
        if not 0 <= request_id <= FrameConst.UINT32_MASK:
            raise ConfigError(f"request_id 超出 32 位范围: {request_id}")
        if request_id == SessionConst.AUTH_FAILURE_ID:
            raise ConfigError("request_id 不能等于认证失败标记 0xFFFFFFFF")

        encoding = str(_get("encoding", "utf-8"))
        try:
            codecs.lookup(encoding)
        except LookupError:
            raise ConfigError(f"未知编码: {encoding}")

        try:
            response_delay = float(_get("response_delay", 0.0))
        except (TypeError, ValueError):
            raise ConfigError(f"延迟格式无效: {raw_data.get('response_delay')}")
        if response_delay < 0:
            raise ConfigError(f"延迟不能为负数: {response_delay}")

        # --- 构建对象 ---
        return RconConfig(
            host=str(_req("host")),
            password=str(_req("password")),
            port=port,
            request_id=request_id,
            timeout=_to_timeout("timeout"),
            encoding=encoding,
            response_delay=response_delay,
        )

    except Exception as e:
        if isinstance(e, ConfigError):
            raise
        raise ConfigError(f"配置生成失败: {e}") from e


def load_config_from_toml(file_path: Path, profile: str = "default") -> RconConfig:
    """从 TOML 文件加载配置。

    支持多层级查找策略:
    1. [profile.xxx]: 优先查找指定的 profile 块。
    2. [rcon]: 单服务器配置块。
    3. Root: 兼容根目录直接配置。

    Args:
        file_path: TOML 文件路径。
        profile: 配置预设名。默认为 "default"。

    Returns:
        RconConfig: 配置对象。

    Raises:
        ConfigError: 文件读取失败或 Profile 不存在。
    """
    if not file_path.exists():
        raise ConfigError(f"配置文件未找到: {file_path}")

    try:
        with open(file_path, "rb") as f:
            data = tomllib.load(f)
    except Exception as e:
        raise ConfigError(f"读取 TOML 失败: {e}") from e

    raw_config = {}

    # 优先查找 profile
    if "profile" in data:
        if profile not in data["profile"]:
            raise ConfigError(f"未找到预设: [profile.{profile}]")
        raw_config = data["profile"][profile]

    elif "rcon" in data:
        if profile != "default":
            logger.warning(f"配置仅包含 [rcon] 节，忽略 profile='{profile}'。")
        raw_config = data["rcon"]
    else:
        raw_config = data

    return create_config_from_dict(raw_config)


def load_config_from_env() -> RconConfig:
    """从环境变量加载配置 (Docker/Cloud Friendly)。

    读取所有以 `RCON_` 开头的已知环境变量，并映射到配置字段。
    例如: `RCON_PASSWORD` -> `password`。

    Returns:
        RconConfig: 配置对象。

    Raises:
        ConfigError: 未检测到任何相关环境变量，或字段校验失败。
    """
    # 字段映射表 (Config Field -> Env Suffix)
    env_map = {
        "host": "HOST",
        "port": "PORT",
        "password": "PASSWORD",
        "request_id": "REQUEST_ID",
        "timeout": "TIMEOUT",
        "encoding": "ENCODING",
        "response_delay": "RESPONSE_DELAY",
    }

    raw_data = {}

    for cfg_key, env_suffix in env_map.items():
        env_key = f"RCON_{env_suffix}"
        val = os.environ.get(env_key)
        if val is not None:
            raw_data[cfg_key] = val

    if not raw_data:
        raise ConfigError("未检测到 RCON_ 前缀的环境变量")

    return create_config_from_dict(raw_data)
