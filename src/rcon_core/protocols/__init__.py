# src/rcon_core/protocols/__init__.py
"""
RCON 协议层 (Protocol Layer)

本包负责协议帧的纯粹构建 (Build) 与解析 (Parse)。

- 不包含任何 socket 操作或网络 I/O。
- 不包含任何状态管理 (State)。
- 不依赖于 session 或 network 层。
"""

from . import constants
from .constants import PacketType
from .packets import (
    Frame,
    build_frame,
    parse_frame,
    read_frame_length,
    serialize_frame,
)

# 公共 API
__all__ = [
    "constants",
    "PacketType",
    "Frame",
    "build_frame",
    "serialize_frame",
    "parse_frame",
    "read_frame_length",
]
