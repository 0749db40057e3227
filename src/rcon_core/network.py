# src/rcon_core/network.py
"""
RCON 核心库 - 网络模块 (Network)

封装 TCP Socket 的连接、发送、精确长度接收与关闭逻辑。
该模块屏蔽了底层 Socket 的复杂性，向会话层提供纯粹的 bytes 收发接口。
全部为同步阻塞 I/O，同一时刻只允许一个调用方使用。
"""

import logging
import socket

from .config import RconConfig
from .exceptions import TransportError

logger = logging.getLogger(__name__)


class TcpTransport:
    """
    封装阻塞式 TCP 操作的客户端。
    """

    def __init__(self, config: RconConfig, sock: socket.socket | None = None):
        """初始化传输层。

        Args:
            config: 全局配置对象 (使用 host/port/timeout)。
            sock: 可选的已连接 socket。传入后 connect() 不再重新建立连接。
        """
        self.config = config
        self.sock: socket.socket | None = sock
        if sock is not None:
            sock.settimeout(config.timeout)

    @property
    def peer(self) -> str:
        """对端地址，用于日志与异常诊断。"""
        return self.config.address

    @property
    def is_connected(self) -> bool:
        return self.sock is not None

    def connect(self) -> None:
        """
        建立到 RCON 服务器的 TCP 连接。
        """
        if self.sock is not None:
            return

        target = (self.config.host, self.config.port)
        try:
            self.sock = socket.create_connection(target, timeout=self.config.timeout)
        except OSError as e:
            raise TransportError(f"连接 {self.peer} 失败: {e}", peer=self.peer) from e
        logger.debug(f"TCP 连接已建立: {self.peer}")

    def send(self, data: bytes) -> None:
        """
        发送全部字节。
        """
        if self.sock is None:
            raise TransportError("Socket 未连接", peer=self.peer)

        try:
            self.sock.sendall(data)
        except socket.timeout:
            raise TransportError(f"发送超时 ({self.config.timeout}s)", peer=self.peer) from None
        except OSError as e:
            raise TransportError(f"发送到 {self.peer} 失败: {e}", peer=self.peer) from e

    def receive_exactly(self, size: int) -> bytes:
        """
        精确接收 size 个字节，对部分读取进行循环。

        Raises:
            TransportError: 超时、I/O 错误，或对端在读满之前关闭连接。
        """
        if self.sock is None:
            raise TransportError("Socket 未连接", peer=self.peer)

        buf = bytearray()
        while len(buf) < size:
            try:
                chunk = self.sock.recv(size - len(buf))
            except socket.timeout:
                raise TransportError(
                    f"接收超时 ({self.config.timeout}s)", peer=self.peer
                ) from None
            except OSError as e:
                raise TransportError(
                    f"从 {self.peer} 接收失败: {e}", peer=self.peer
                ) from e

            if not chunk:
                raise TransportError(
                    f"连接被 {self.peer} 关闭 (已接收 {len(buf)}/{size} 字节)",
                    peer=self.peer,
                )
            buf += chunk

        return bytes(buf)

    def close(self) -> None:
        """关闭 Socket"""
        if self.sock is not None:
            try:
                self.sock.close()
            except OSError as e:
                logger.warning(f"关闭 Socket 异常: {e}")
            self.sock = None
            logger.debug(f"TCP 连接已关闭: {self.peer}")

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
