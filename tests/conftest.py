# tests/conftest.py
import socket
import sys
import threading
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# 确保 src 目录在 sys.path 中
src_path = Path(__file__).resolve().parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from rcon_core.config import RconConfig
from rcon_core.network import TcpTransport
from rcon_core.protocols import packets
from rcon_core.protocols.constants import PacketType

LIST_RESPONSE = "There are 0 of a max of 20 players online:"


@pytest.fixture
def valid_config():
    """
    [Fixture] 返回一个指向本地测试服务器的 RconConfig 对象。
    """
    return RconConfig(
        host="127.0.0.1",
        port=25575,
        password="debug",
        request_id=100,
        timeout=2.0,
    )


@pytest.fixture
def mock_transport():
    """[Fixture] 带有固定对端地址的 Mock 传输层"""
    transport = MagicMock(spec=TcpTransport)
    transport.peer = "127.0.0.1:25575"
    transport.is_connected = True
    return transport


def queue_responses(transport, *frames):
    """辅助函数：把响应帧按 (长度前缀, 剩余部分) 两次读取排入 receive_exactly"""
    chunks = []
    for frame in frames:
        raw = packets.serialize_frame(frame)
        chunks.append(raw[:4])
        chunks.append(raw[4:])
    transport.receive_exactly.side_effect = chunks


class FakeRconServer:
    """
    基于 socketpair 的无状态 RCON 服务器。

    - 登录: 密码正确回显 Request ID，否则回 0xFFFFFFFF。
    - 命令: 回显固定的玩家列表文本。
    - 每个响应分两次写出，以覆盖客户端的部分读取循环。
    """

    def __init__(self, password: str = "debug"):
        self.password = password
        self.client_sock, self.server_sock = socket.socketpair()
        self.received: list[packets.Frame] = []
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    def _recv_exactly(self, size: int) -> bytes:
        buf = b""
        while len(buf) < size:
            chunk = self.server_sock.recv(size - len(buf))
            if not chunk:
                raise ConnectionError("client closed")
            buf += chunk
        return buf

    def _serve(self) -> None:
        try:
            while True:
                prefix = self._recv_exactly(4)
                length = packets.read_frame_length(prefix)
                request = packets.parse_frame(prefix + self._recv_exactly(length))
                self.received.append(request)

                if request.packet_type == PacketType.LOGIN:
                    ok = request.payload == self.password.encode()
                    reply = packets.build_frame(
                        request.request_id if ok else -1, PacketType.RESPONSE
                    )
                else:
                    reply = packets.build_frame(
                        request.request_id,
                        PacketType.RESPONSE,
                        LIST_RESPONSE.encode(),
                    )

                raw = packets.serialize_frame(reply)
                self.server_sock.sendall(raw[:6])
                self.server_sock.sendall(raw[6:])
        except (ConnectionError, OSError):
            pass
        finally:
            self.server_sock.close()

    def close(self) -> None:
        self.client_sock.close()
        self._thread.join(timeout=2.0)


@pytest.fixture
def fake_server():
    server = FakeRconServer()
    yield server
    server.close()
