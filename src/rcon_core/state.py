# File: src/rcon_core/state.py
"""
RCON 核心库 - 状态模块

负责定义和存储会话的易变状态。
本模块不包含业务逻辑，仅作为数据容器供 Session 读写。
"""

from dataclasses import dataclass
from enum import Enum, auto


class SessionStatus(Enum):
    """会话的生命周期状态枚举。

    状态流转示意:
    UNAUTHENTICATED -> READY -> (command)* -> READY -> CLOSED
           |             |
           v             v
         FAILED        FAILED
    """

    UNAUTHENTICATED = auto()
    """初始状态，连接可能已建立但尚未登录。"""

    READY = auto()
    """登录成功，可以发送命令。"""

    FAILED = auto()
    """终止状态。认证失败、传输错误或收到损坏的帧，会话必须丢弃。"""

    CLOSED = auto()
    """终止状态。调用方已主动关闭连接。"""


@dataclass
class SessionState:
    """存储 RCON 会话的易变状态数据。

    该对象是非持久化的。重新建立连接时应创建新的会话，
    而不是复用旧的状态对象。

    Attributes:
        status: 当前会话状态。
        last_error: 最近一次发生的错误信息描述，用于 UI 显示。
        commands_sent: 登录后成功完成的命令往返次数。
    """

    status: SessionStatus = SessionStatus.UNAUTHENTICATED
    last_error: str = ""
    commands_sent: int = 0

    @property
    def is_ready(self) -> bool:
        """判断当前是否可以发送命令。"""
        return self.status is SessionStatus.READY

    @property
    def is_terminal(self) -> bool:
        """判断会话是否已进入终止状态 (FAILED / CLOSED)。"""
        return self.status in (SessionStatus.FAILED, SessionStatus.CLOSED)
