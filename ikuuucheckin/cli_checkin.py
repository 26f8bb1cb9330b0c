#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import os
import sys
from pathlib import Path

import httpx
from dotenv import find_dotenv, load_dotenv

from ikuuucheckin.config import ConfigError, load_config
from ikuuucheckin.console import error
from ikuuucheckin.constants import (
    DEFAULT_ACCOUNTS_ENV,
    DEFAULT_GITHUB_OUTPUT_ENV,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
    MIN_TIMEOUT_SECONDS,
)
from ikuuucheckin.runner import BatchRunner, write_github_output


class ExitCodes:
    OK = 0
    ERROR = 1


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="iKuuu 多账户自动登录签到。")
    parser.add_argument("--host", default="", help="目标站点域名（默认：环境变量 HOST 或 ikuuu.one）")
    parser.add_argument(
        "--accounts-env",
        default=DEFAULT_ACCOUNTS_ENV,
        help="读取账户 JSON 数组的环境变量名（默认：%(default)s）",
    )
    parser.add_argument(
        "--timeout-seconds",
        type=int,
        default=DEFAULT_TIMEOUT_SECONDS,
        help="请求超时秒数（默认：%(default)s）",
    )
    parser.add_argument("--user-agent", default=DEFAULT_USER_AGENT, help="自定义 User-Agent（默认：Chrome/Linux）")
    parser.add_argument("--no-notify", action="store_true", help="不发送任何 PushPlus 通知")
    return parser.parse_args(argv)


def main(argv: list[str], *, transport: httpx.AsyncBaseTransport | None = None) -> int:
    args = _parse_args(argv)
    if args.timeout_seconds < MIN_TIMEOUT_SECONDS:
        error(f"错误：--timeout-seconds 不能小于 {MIN_TIMEOUT_SECONDS}")
        return ExitCodes.ERROR

    load_dotenv(find_dotenv(usecwd=True))

    try:
        config = load_config(
            os.environ,
            host=args.host,
            accounts_env=args.accounts_env,
            timeout_seconds=args.timeout_seconds,
            user_agent=args.user_agent,
            notify=not args.no_notify,
        )
    except ConfigError as exc:
        message = str(exc)
        error(message)
        output_path = os.environ.get(DEFAULT_GITHUB_OUTPUT_ENV, "").strip()
        if output_path:
            write_github_output(Path(output_path), message)
        return ExitCodes.ERROR

    report = asyncio.run(BatchRunner(config, transport=transport).run())
    return ExitCodes.ERROR if report.failed else ExitCodes.OK


def run() -> None:
    raise SystemExit(main(sys.argv[1:]))


if __name__ == "__main__":
    run()
