# tests/test_main.py
"""
测试交互式命令行的读取-发送-打印循环与退出码。
"""

from unittest.mock import MagicMock, patch

import pytest

from rcon_core import main as cli
from rcon_core.exceptions import (
    AuthFailure,
    InvalidResponseEncoding,
    OversizeMessage,
    TransportError,
)


@pytest.fixture
def session():
    s = MagicMock()
    s.peer = "127.0.0.1:25575"
    s.command.side_effect = lambda text: f"ok: {text}"
    return s


def test_repl_exit(session, capsys):
    """输入 exit 结束循环，空行被跳过"""
    with patch("builtins.input", side_effect=["/list", "", "  ", "exit", "/never"]):
        cli.run_repl(session)

    session.command.assert_called_once_with("/list")
    assert "ok: /list" in capsys.readouterr().out


def test_repl_eof(session):
    with patch("builtins.input", side_effect=["/list", EOFError]):
        cli.run_repl(session)
    assert session.command.call_count == 1


def test_repl_recoverable_errors(session, capsys):
    """超长命令与解码失败只打印提示，循环继续"""
    session.command.side_effect = [
        OversizeMessage("too long", length=2000),
        InvalidResponseEncoding("bad", raw=b"\xff"),
        "fine",
    ]
    with patch("builtins.input", side_effect=["a", "b", "c", "exit"]):
        cli.run_repl(session)

    captured = capsys.readouterr()
    assert "命令过长" in captured.err
    assert "无法解码" in captured.err
    assert "fine" in captured.out


def test_repl_fatal_error_propagates(session):
    session.command.side_effect = TransportError("连接被关闭")
    with patch("builtins.input", side_effect=["/list"]):
        with pytest.raises(TransportError):
            cli.run_repl(session)


def test_main_config_error(monkeypatch, tmp_path, capsys):
    """没有任何配置来源时返回 1"""
    monkeypatch.chdir(tmp_path)
    for suffix in ("HOST", "PORT", "PASSWORD", "REQUEST_ID", "TIMEOUT", "ENCODING", "RESPONSE_DELAY"):
        monkeypatch.delenv(f"RCON_{suffix}", raising=False)

    assert cli.main([]) == 1
    assert "配置错误" in capsys.readouterr().err


def test_main_loads_dotenv(monkeypatch, tmp_path, session):
    """.env 中的 RCON_ 变量被用于建立会话"""
    monkeypatch.chdir(tmp_path)
    # 先 setenv 再 delenv，测试结束后 monkeypatch 会清理 .env 写入的变量
    for name in ("RCON_HOST", "RCON_PASSWORD"):
        monkeypatch.setenv(name, "placeholder")
        monkeypatch.delenv(name)
    (tmp_path / ".env").write_text("RCON_HOST=10.1.1.1\nRCON_PASSWORD=envfile\n")

    with patch.object(cli, "RconSession", return_value=session) as session_cls, patch(
        "builtins.input", side_effect=["exit"]
    ):
        assert cli.main([]) == 0

    config = session_cls.call_args.args[0]
    assert config.host == "10.1.1.1"
    assert config.password == "envfile"
    session.login.assert_called_once()
    session.close.assert_called_once()


def test_main_auth_failure(tmp_path, session, capsys):
    cfg = tmp_path / "config.toml"
    cfg.write_text('[rcon]\nhost = "127.0.0.1"\npassword = "bad"\n', encoding="utf-8")
    session.login.side_effect = AuthFailure("登录失败", peer="127.0.0.1:25575")

    with patch.object(cli, "RconSession", return_value=session):
        assert cli.main(["--config", str(cfg)]) == 1

    assert "登录失败" in capsys.readouterr().err
    session.close.assert_called_once()
