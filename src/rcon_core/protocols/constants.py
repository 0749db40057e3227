# src/rcon_core/protocols/constants.py
"""
RCON 协议层 - 常量定义

本模块定义了所有协议相关的魔法数字、偏移量和固定值。
采用命名空间 (Class Namespace) 组织，不使用扁平全局变量。
"""

import struct

# =========================================================================
# 1. 包类型 (Packet Types)
# =========================================================================


class PacketType:
    """帧头部的 Type 字段"""

    LOGIN = 3  # 登录请求 (Client -> Server)
    COMMAND = 2  # 命令请求 (Client -> Server)
    RESPONSE = 0  # 响应 (Server -> Client)，协议上亦用于多包响应


# =========================================================================
# 2. 帧结构 (Frame Layout)
# =========================================================================


class FrameConst:
    # 包头: Length(4) + RequestID(4) + Type(4)，均为小端序
    HEADER = struct.Struct("<III")
    HEADER_LEN = 12
    LENGTH_FIELD = struct.Struct("<I")
    LENGTH_FIELD_LEN = 4

    # 尾部: 空终止符 + 一个必需的填充字节
    TRAILER = b"\x00\x00"

    # length = RequestID(4) + Type(4) + Payload + Trailer(2)
    LENGTH_OVERHEAD = 10

    TRAILER_LEN = 2
    # length 的最小合法值 (空 payload)
    MIN_LENGTH = 10

    UINT32_MASK = 0xFFFFFFFF


# =========================================================================
# 3. 尺寸限制 (Size Limits)
# =========================================================================


class Limits:
    CLIENT_MAX_MESSAGE_SIZE = 1460  # 出站 length 上限
    SERVER_MAX_MESSAGE_SIZE = 4110  # 入站帧上限 (含长度字段)


# =========================================================================
# 4. 会话常量 (Session)
# =========================================================================


class SessionConst:
    DEFAULT_REQUEST_ID = 100  # UID
    AUTH_FAILURE_ID = 0xFFFFFFFF  # 服务器以 -1 表示认证失败
    DEFAULT_PORT = 25575
