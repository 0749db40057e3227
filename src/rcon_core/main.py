# src/rcon_core/main.py
"""
RCON 交互式命令行 (CLI)

读取操作员输入的每一行，作为命令发送并打印响应。
输入 exit 结束循环。
"""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from . import __version__
from .config import RconConfig, load_config_from_env, load_config_from_toml
from .exceptions import (
    ConfigError,
    InvalidResponseEncoding,
    OversizeMessage,
    RconError,
)
from .session import RconSession

logger = logging.getLogger("RconCLI")  # CLI 日志记录器

PROMPT = "rcon> "
EXIT_COMMAND = "exit"


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def load_cli_config(config_path: Path | None, profile: str) -> RconConfig:
    """
    为 CLI 工具加载配置。
    指定了 TOML 文件时从文件读取，否则先加载 .env 再读取 RCON_ 环境变量。
    """
    if config_path is not None:
        logger.info(f"CLI: 从 {config_path} 加载配置 (profile={profile})")
        return load_config_from_toml(config_path, profile)

    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path, override=False)
        logger.debug(f"已加载配置文件: {env_path}")
    else:
        logger.debug(f"在 {Path.cwd()} 未找到 .env 文件，仅使用环境变量。")

    return load_config_from_env()


def run_repl(session: RconSession) -> None:
    """读取-发送-打印循环，直到输入 exit 或 EOF。

    Raises:
        RconError: 除 OversizeMessage / InvalidResponseEncoding 外的错误
            直接向上抛出，会话此时已不可用。
    """
    while True:
        try:
            line = input(PROMPT)
        except EOFError:
            print()
            break

        command = line.strip()
        if not command:
            continue
        if command == EXIT_COMMAND:
            break

        try:
            print(session.command(command))
        except OversizeMessage as e:
            print(f"命令过长，请缩短后重试: {e}", file=sys.stderr)
        except InvalidResponseEncoding as e:
            print(f"响应无法解码 ({len(e.raw)} 字节): {e}", file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rcon-core", description="RCON 交互式控制台"
    )
    parser.add_argument(
        "-c", "--config", type=Path, default=None, help="TOML 配置文件路径"
    )
    parser.add_argument("-p", "--profile", default="default", help="配置预设名")
    parser.add_argument("-v", "--verbose", action="store_true", help="输出调试日志")
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """
    程序主入口点。

    Returns:
        int: 进程退出码，0 表示正常退出。
    """
    args = build_parser().parse_args(argv)
    _setup_logging(args.verbose)

    try:
        config = load_cli_config(args.config, args.profile)
    except ConfigError as e:
        print(f"配置错误: {e}", file=sys.stderr)
        return 1

    session = RconSession(config)
    try:
        session.connect()
        print(f"已连接: {session.peer}")
        session.login()
        print("登录成功，输入 exit 退出。")
        run_repl(session)
    except KeyboardInterrupt:
        print()
        logger.info("收到用户中断信号 (Ctrl+C)，准备退出...")
    except RconError as e:
        print(f"错误: {e}", file=sys.stderr)
        return 1
    finally:
        session.close()

    return 0


# 程序入口
if __name__ == "__main__":
    sys.exit(main())
