# File: src/rcon_core/exceptions.py
"""
RCON 核心库 - 异常体系 (Exceptions)

定义库内统一使用的异常类，以便上层应用（如 CLI）能进行精细的错误处理。
核心层从不吞没异常，也不自动重试，所有错误均向上冒泡。
"""


class RconError(Exception):
    """RCON 核心库的所有内部异常的基类。

    上层应用可以通过捕获此异常来处理所有由 rcon-core 抛出的已知错误。
    """

    pass


class ConfigError(RconError):
    """配置加载或校验失败。

    触发场景:
    1. 缺少必要字段 (如 host/password)。
    2. 字段格式错误 (如端口越界、编码名称未知)。
    3. 找不到配置文件或环境变量。
    """

    pass


class TransportError(RconError):
    """传输层面的错误 (I/O 级别)。

    触发场景:
    1. TCP 连接建立失败。
    2. 发送 (send) 或 接收 (recv) 失败、超时。
    3. 对端在一帧尚未读完时关闭了连接。

    注意: 核心层不做重试，会话进入 FAILED 状态后需由上层重新建立连接。
    """

    def __init__(self, message: str, peer: str | None = None) -> None:
        super().__init__(message)
        self.peer = peer


class ProtocolError(RconError):
    """协议交互错误 (逻辑级别)，编解码错误的基类。"""

    pass


class OversizeMessage(ProtocolError):
    """待发送的帧超过客户端允许的最大长度。

    在任何网络活动之前抛出，属于调用方的前置条件错误，
    调用方应缩短命令后再试。
    """

    def __init__(self, message: str, length: int | None = None) -> None:
        super().__init__(message)
        self.length = length


class MalformedFrame(ProtocolError):
    """收到的字节无法解析为合法的帧。

    触发场景:
    1. 数据不足 12 字节 (包头不完整)。
    2. length 字段过小 (payload 结束位置落在包头之内)。
    3. length 字段声明的长度超出实际收到的数据或接收上限。
    """

    pass


class AuthFailure(RconError):
    """认证被拒绝 (服务器回显了 -1 / 0xFFFFFFFF 作为 Request ID)。

    这通常意味着 RCON 密码错误，需要用户干预，不可继续发送命令。
    """

    def __init__(
        self,
        message: str,
        peer: str | None = None,
        request_id: int | None = None,
    ) -> None:
        """初始化认证错误。

        Args:
            message: 错误描述信息。
            peer: 对端地址 (host:port)，便于诊断。
            request_id: 服务器实际回显的 Request ID。
        """
        super().__init__(message)
        self.peer = peer
        self.request_id = request_id


class InvalidResponseEncoding(RconError):
    """响应 Payload 不是合法的文本 (按配置的编码无法解码)。

    原始字节保存在 `raw` 属性中，供调用方自行检查。
    """

    def __init__(self, message: str, raw: bytes = b"") -> None:
        super().__init__(message)
        self.raw = raw


class StateError(RconError):
    """状态机错误 (FSM Violation)。

    触发场景:
    1. 在未登录状态下发送命令。
    2. 在已登录状态下重复调用登录。
    3. 会话已失败或已关闭后继续使用。
    """

    pass
