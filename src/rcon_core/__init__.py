"""
RCON-Core v1.0.0
面向游戏服务器远程控制台 (RCON) 协议的同步客户端核心库。
"""

# 暴露核心配置
from .config import (
    RconConfig,
    create_config_from_dict,
    load_config_from_env,
    load_config_from_toml,
)

# 暴露异常体系 (方便上层 try-except)
from .exceptions import (
    AuthFailure,
    ConfigError,
    InvalidResponseEncoding,
    MalformedFrame,
    OversizeMessage,
    ProtocolError,
    RconError,
    StateError,
    TransportError,
)
from .network import TcpTransport

# 暴露会话与状态
from .session import RconSession
from .state import SessionState, SessionStatus

__version__ = "1.0.0"

__all__ = [
    "RconSession",
    "RconConfig",
    "TcpTransport",
    "SessionState",
    "SessionStatus",
    "create_config_from_dict",
    "load_config_from_env",
    "load_config_from_toml",
    "RconError",
    "ConfigError",
    "TransportError",
    "ProtocolError",
    "OversizeMessage",
    "MalformedFrame",
    "AuthFailure",
    "InvalidResponseEncoding",
    "StateError",
]
