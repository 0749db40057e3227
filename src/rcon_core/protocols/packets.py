# File: src/rcon_core/protocols/packets.py
"""
RCON 协议封包构建器与解析器 (Packet Codec)

负责 Python 数据结构与二进制帧之间的相互转换。
本模块是无状态的 (Stateless)，不持有任何配置、会话或 socket。

帧结构 (全部整数为小端序)::

    +-----------+------------+---------+-----------------+---------+
    |  Length   | Request ID |  Type   |     Payload     | Trailer |
    |  4 bytes  |  4 bytes   | 4 bytes | variable length | 2 bytes |
    +-----------+------------+---------+-----------------+---------+

- Length: 其后所有字节数 (RequestID + Type + Payload + Trailer)，不含自身
- Trailer: 空终止符 0x00 + 必需的填充字节 0x00
"""

import logging
from dataclasses import dataclass

from ..exceptions import MalformedFrame, OversizeMessage
from .constants import FrameConst, Limits, PacketType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Frame:
    """一个 RCON 帧。

    Attributes:
        length: 长度字段，恒等于 10 + len(payload)。
        request_id: 客户端生成的 ID，由服务器回显。
        packet_type: 包类型 (3 登录 / 2 命令 / 0 响应)。
        payload: 负载字节，不含尾部终止符。
    """

    length: int
    request_id: int
    packet_type: int
    payload: bytes

    def __repr__(self) -> str:
        # 登录帧的 payload 是密码
        if self.packet_type == PacketType.LOGIN:
            shown = "'******'"
        else:
            shown = repr(self.payload[:32]) + ("..." if len(self.payload) > 32 else "")
        return (
            f"Frame(length={self.length}, request_id={self.request_id}, "
            f"type={self.packet_type}, payload={shown})"
        )

    def to_bytes(self) -> bytes:
        """序列化为线上字节流，等价于 `serialize_frame(self)`。"""
        return serialize_frame(self)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Frame":
        """从线上字节流解析，等价于 `parse_frame(data)`。"""
        return parse_frame(data)


# =========================================================================
# Construct
# =========================================================================


def build_frame(request_id: int, packet_type: int, payload: bytes = b"") -> Frame:
    """构建一个出站帧。

    Request ID 与 Type 会被截断到 32 位无符号范围，
    因此 -1 与 0xFFFFFFFF 表示同一个值。

    Args:
        request_id: 客户端生成的请求 ID。
        packet_type: 包类型，见 `PacketType`。
        payload: 负载字节。

    Returns:
        Frame: 构建好的帧对象。

    Raises:
        OversizeMessage: length 超过客户端上限 (1460) 时抛出。
    """
    length = FrameConst.LENGTH_OVERHEAD + len(payload)
    if length > Limits.CLIENT_MAX_MESSAGE_SIZE:
        raise OversizeMessage(
            f"消息超出客户端最大长度: length={length} > {Limits.CLIENT_MAX_MESSAGE_SIZE}",
            length=length,
        )

    return Frame(
        length=length,
        request_id=request_id & FrameConst.UINT32_MASK,
        packet_type=packet_type & FrameConst.UINT32_MASK,
        payload=bytes(payload),
    )


# =========================================================================
# Serialize
# =========================================================================


def serialize_frame(frame: Frame) -> bytes:
    """将帧序列化为字节流。

    结构: Length(4B) + RequestID(4B) + Type(4B) + Payload + 0x00 0x00

    Args:
        frame: 待序列化的帧。

    Returns:
        bytes: 可直接写入 socket 的字节流。
    """
    header = FrameConst.HEADER.pack(
        frame.length & FrameConst.UINT32_MASK,
        frame.request_id & FrameConst.UINT32_MASK,
        frame.packet_type & FrameConst.UINT32_MASK,
    )
    return header + frame.payload + FrameConst.TRAILER


# =========================================================================
# Deserialize
# =========================================================================


def read_frame_length(prefix: bytes) -> int:
    """解码 4 字节的长度前缀。

    Args:
        prefix: 帧的前 4 个字节。

    Returns:
        int: length 字段的值 (其后还应有多少字节)。

    Raises:
        MalformedFrame: 前缀不足 4 字节时抛出。
    """
    if len(prefix) < FrameConst.LENGTH_FIELD_LEN:
        raise MalformedFrame(f"长度前缀不完整: {len(prefix)} 字节")
    (length,) = FrameConst.LENGTH_FIELD.unpack_from(prefix)
    return length


def parse_frame(data: bytes) -> Frame:
    """将收到的字节流解析为帧。

    只读取 length 声明的范围，忽略其后的缓冲区填充。
    整帧占 4 + length 字节，payload 位于 [12, length + 2)，不包含两个尾部字节。

    Args:
        data: 接收到的原始字节 (从长度字段开始)。

    Returns:
        Frame: 解析出的帧。

    Raises:
        MalformedFrame: 包头不完整，或 length 与实际数据不一致。
    """
    if len(data) < FrameConst.HEADER_LEN:
        raise MalformedFrame(f"帧长度不足: {len(data)} < {FrameConst.HEADER_LEN}")

    length, request_id, packet_type = FrameConst.HEADER.unpack_from(data)

    # 损坏或为 0 的 length 会让 payload 结束位置落在包头之内
    if length < FrameConst.MIN_LENGTH:
        raise MalformedFrame(f"length 字段过小: {length}")

    frame_end = FrameConst.LENGTH_FIELD_LEN + length
    if frame_end > len(data):
        raise MalformedFrame(
            f"length 字段超出实际数据: 需要 {frame_end} 字节，实际 {len(data)} 字节"
        )

    payload_end = frame_end - FrameConst.TRAILER_LEN
    payload = bytes(data[FrameConst.HEADER_LEN : payload_end])
    logger.debug(
        "parse_frame: length=%d request_id=%d type=%d payload_len=%d",
        length,
        request_id,
        packet_type,
        len(payload),
    )
    return Frame(
        length=length,
        request_id=request_id,
        packet_type=packet_type,
        payload=payload,
    )
