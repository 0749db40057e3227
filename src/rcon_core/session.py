# File: src/rcon_core/session.py
"""
RCON 会话 (Session)

职责：
1. 资源组装：Config + Transport + State。
2. 登录握手与命令往返。
3. 生命周期：Connect -> Login -> Command* -> Close。

同一会话同一时刻只允许一个未完成的请求。
"""

import logging
import time
from dataclasses import replace

from .config import RconConfig
from .exceptions import (
    AuthFailure,
    InvalidResponseEncoding,
    MalformedFrame,
    StateError,
    TransportError,
)
from .network import TcpTransport
from .protocols import packets
from .protocols.constants import FrameConst, Limits, PacketType, SessionConst
from .state import SessionState, SessionStatus

logger = logging.getLogger(__name__)


class RconSession:
    """RCON 认证会话 (同步阻塞)。"""

    def __init__(
        self,
        config: RconConfig,
        transport: TcpTransport | None = None,
    ) -> None:
        """初始化会话。

        Args:
            config: 全局配置对象。
            transport: 可选的传输层实例。为空时按配置创建 TcpTransport，
                并在 connect() 时建立连接。
        """
        self.config = config
        self.transport = transport or TcpTransport(config)
        self._state = SessionState()

        self._update_status(SessionStatus.UNAUTHENTICATED, "会话已创建")

    @property
    def state(self) -> SessionState:
        """获取当前会话状态的只读副本。"""
        return replace(self._state)

    @property
    def status(self) -> SessionStatus:
        return self._state.status

    @property
    def peer(self) -> str:
        return self.transport.peer

    def connect(self) -> None:
        """建立 TCP 连接 (若传输层尚未连接)。

        Raises:
            TransportError: 连接失败。会话进入 FAILED。
        """
        self._require_not_terminal()
        try:
            self.transport.connect()
        except TransportError as e:
            self._fail(f"连接失败: {e}")
            raise
        logger.info(f"已连接到 {self.peer}")

    def login(self, password: str | None = None) -> None:
        """执行登录握手。

        每个连接只能调用一次，且必须在任何命令之前调用。

        Args:
            password: RCON 密码，缺省使用配置中的密码。

        Raises:
            AuthFailure: 服务器回显的 Request ID 与发送的不一致 (密码错误)。
            TransportError: 网络通信异常。
            MalformedFrame: 响应无法解析。
            StateError: 会话不处于 UNAUTHENTICATED 状态。
        """
        if self._state.status is not SessionStatus.UNAUTHENTICATED:
            raise StateError(f"无法登录: 当前状态为 {self._state.status.name}")

        if not self.transport.is_connected:
            self.connect()

        secret = self.config.password if password is None else password
        request = packets.build_frame(
            self.config.request_id,
            PacketType.LOGIN,
            secret.encode(self.config.encoding),
        )

        logger.info(f"正在登录 {self.peer}...")
        response = self._exchange(request)

        if response.request_id != request.request_id:
            if response.request_id == SessionConst.AUTH_FAILURE_ID:
                msg = f"登录 {self.peer} 失败，请确认 RCON 密码是否正确"
            else:
                msg = (
                    f"登录 {self.peer} 失败: 期望 Request ID {request.request_id}，"
                    f"实际 {response.request_id}"
                )
            self._fail(msg)
            raise AuthFailure(msg, peer=self.peer, request_id=response.request_id)

        self._update_status(SessionStatus.READY, "登录成功")

    def command(self, text: str) -> str:
        """发送一条命令并返回服务器的文本响应。

        Args:
            text: 命令文本 (如 "/list")。

        Returns:
            str: 解码后的响应文本。

        Raises:
            OversizeMessage: 命令过长，未发生任何网络活动。
            InvalidResponseEncoding: 响应不是合法文本，会话保持可用。
            TransportError: 网络通信异常。
            MalformedFrame: 响应无法解析。
            StateError: 未登录或会话已终止。
        """
        if not self._state.is_ready:
            raise StateError(f"无法发送命令: 当前状态为 {self._state.status.name}")

        request = packets.build_frame(
            self.config.request_id,
            PacketType.COMMAND,
            text.encode(self.config.encoding),
        )
        response = self._exchange(request)
        self._state.commands_sent += 1

        try:
            return response.payload.decode(self.config.encoding)
        except UnicodeDecodeError as e:
            logger.warning(f"响应无法按 {self.config.encoding} 解码: {e}")
            raise InvalidResponseEncoding(
                f"响应不是合法的 {self.config.encoding} 文本: {e}",
                raw=response.payload,
            ) from e

    def close(self) -> None:
        """关闭连接。会话进入 CLOSED，不可再使用。"""
        self.transport.close()
        if self._state.status is not SessionStatus.FAILED:
            self._update_status(SessionStatus.CLOSED, "已关闭")

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def _exchange(self, request: packets.Frame) -> packets.Frame:
        """[Internal] 一次阻塞的请求/响应往返。

        发送请求后按长度前缀读取完整的一帧：先读 4 字节得到 length，
        再精确读取 length 字节。

        Raises:
            TransportError: 读写失败。
            MalformedFrame: 响应帧损坏或超出接收上限。
        """
        self._require_not_terminal()
        logger.debug(f"发送: {request!r}")

        try:
            self.transport.send(packets.serialize_frame(request))

            if self.config.response_delay > 0:
                time.sleep(self.config.response_delay)

            response = self._read_frame()
        except (TransportError, MalformedFrame) as e:
            self._fail(f"交互失败: {e}")
            raise

        logger.debug(f"接收: {response!r}")
        return response

    def _read_frame(self) -> packets.Frame:
        """[Internal] 读取并解析一个长度前缀帧。"""
        prefix = self.transport.receive_exactly(FrameConst.LENGTH_FIELD_LEN)
        length = packets.read_frame_length(prefix)

        if FrameConst.LENGTH_FIELD_LEN + length > Limits.SERVER_MAX_MESSAGE_SIZE:
            raise MalformedFrame(
                f"响应帧超出接收上限: length={length} "
                f"(上限 {Limits.SERVER_MAX_MESSAGE_SIZE} 字节)"
            )

        body = self.transport.receive_exactly(length)
        return packets.parse_frame(prefix + body)

    def _require_not_terminal(self) -> None:
        if self._state.is_terminal:
            raise StateError(f"会话已终止 ({self._state.status.name})，请重新建立连接")

    def _fail(self, msg: str) -> None:
        self._state.last_error = msg
        self._update_status(SessionStatus.FAILED, msg)

    def _update_status(self, status: SessionStatus, msg: str) -> None:
        """更新内部状态并记录日志。"""
        self._state.status = status
        if status is SessionStatus.FAILED:
            logger.error(f"[{status.name}] {msg}")
        else:
            logger.info(f"[{status.name}] {msg}")
