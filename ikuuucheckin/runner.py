from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path

import httpx

from ikuuucheckin.config import Account, RunConfig
from ikuuucheckin.console import error, info
from ikuuucheckin.constants import (
    FAILURE_ICON,
    GITHUB_OUTPUT_NAME,
    REPORT_HEADER,
    REPORT_TITLE,
    SUCCESS_ICON,
    account_notification_title,
)
from ikuuucheckin.pushplus import send_global_notifications, send_pushplus_notification
from ikuuucheckin.session import CheckinError, check_in, log_in


@dataclass(frozen=True)
class AccountOutcome:
    account: str
    result: str = ""
    pushplus_sent: bool = False
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str:
        return self.result if self.error is None else self.error

    def report_line(self) -> str:
        icon = SUCCESS_ICON if self.ok else FAILURE_ICON
        return f"{self.account}: {icon} {self.message}"

    def to_dict(self) -> dict[str, object]:
        if not self.ok:
            return {"account": self.account, "error": self.error}
        return {"account": self.account, "result": self.result, "pushplusSent": self.pushplus_sent}


@dataclass(frozen=True)
class BatchReport:
    outcomes: tuple[AccountOutcome, ...]
    lines: tuple[str, ...] = ()

    @property
    def failed(self) -> bool:
        return any(not outcome.ok for outcome in self.outcomes)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


def build_client(config: RunConfig, transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=config.timeout_seconds,
        headers={"user-agent": config.user_agent},
        transport=transport,
    )


def write_github_output(path: Path | None, value: str, *, name: str = GITHUB_OUTPUT_NAME) -> bool:
    if path is None:
        return False
    with path.open("a", encoding="utf-8") as fh:
        fh.write(f"{name}<<EOF\n{value}\nEOF\n")
    return True


async def process_single_account(
    account: Account,
    config: RunConfig,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AccountOutcome:
    async with build_client(config, transport) as client:
        try:
            authenticated = await log_in(client, account, host=config.host, login_url=config.login_url)
            result = await check_in(client, authenticated, checkin_url=config.checkin_url)
        except CheckinError as exc:
            return AccountOutcome(account=account.name, error=str(exc))

        has_token = bool(account.pushplus_token.strip())
        if has_token and config.notify:
            content = f"**{account.name} 签到结果**\n\n{result}"
            info(f"{account.name}: 发送PushPlus通知...")
            await send_pushplus_notification(client, account.pushplus_token, account_notification_title(account.name), content)

    return AccountOutcome(account=account.name, result=result, pushplus_sent=has_token)


class BatchRunner:
    """Check in every configured account concurrently and report the results."""

    def __init__(self, config: RunConfig, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.config = config
        self._transport = transport

    async def _run_accounts(self) -> tuple[AccountOutcome, ...]:
        accounts = self.config.accounts
        settled = await asyncio.gather(
            *(process_single_account(account, self.config, transport=self._transport) for account in accounts),
            return_exceptions=True,
        )

        outcomes: list[AccountOutcome] = []
        for account, item in zip(accounts, settled):
            if isinstance(item, AccountOutcome):
                outcomes.append(item)
            elif isinstance(item, Exception):
                outcomes.append(AccountOutcome(account=account.name, error=str(item) or type(item).__name__))
            else:
                raise item
        return tuple(outcomes)

    async def run(self) -> BatchReport:
        outcomes = await self._run_accounts()

        info(f"\n{REPORT_HEADER}\n")
        lines: list[str] = []
        for outcome in outcomes:
            line = outcome.report_line()
            if outcome.ok:
                info(line)
            else:
                error(line)
            lines.append(line)

        report = BatchReport(outcomes=outcomes, lines=tuple(lines))

        if self.config.notify and self.config.pushplus_tokens:
            async with build_client(self.config, self._transport) as client:
                await send_global_notifications(client, self.config.pushplus_tokens, REPORT_TITLE, report.lines)

        write_github_output(self.config.github_output, report.text)
        return report
