from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ikuuucheckin.constants import (
    DEFAULT_ACCOUNTS_ENV,
    DEFAULT_GITHUB_OUTPUT_ENV,
    DEFAULT_HOST,
    DEFAULT_HOST_ENV,
    DEFAULT_PUSHPLUS_TOKENS_ENV,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
    checkin_url_for_host,
    login_url_for_host,
)

_REQUIRED_ACCOUNT_FIELDS = ("name", "email", "passwd")


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class Account:
    name: str
    email: str
    passwd: str
    pushplus_token: str = ""

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any], index: int = 0) -> Account:
        values: dict[str, str] = {}
        for field in _REQUIRED_ACCOUNT_FIELDS:
            value = raw.get(field)
            if not isinstance(value, str) or not value.strip():
                raise ConfigError(f"❌ 第 {index + 1} 个账户缺少字段：{field}")
            values[field] = value

        token = raw.get("pushplusToken") or ""
        if not isinstance(token, str):
            raise ConfigError(f"❌ 第 {index + 1} 个账户的 pushplusToken 必须是字符串")
        return cls(pushplus_token=token, **values)


@dataclass(frozen=True)
class RunConfig:
    host: str
    accounts: tuple[Account, ...]
    pushplus_tokens: tuple[str, ...] = ()
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    user_agent: str = DEFAULT_USER_AGENT
    github_output: Path | None = None
    notify: bool = True

    @property
    def login_url(self) -> str:
        return login_url_for_host(self.host)

    @property
    def checkin_url(self) -> str:
        return checkin_url_for_host(self.host)


def parse_accounts(raw: str | None) -> tuple[Account, ...]:
    if not raw or not raw.strip():
        raise ConfigError("❌ 未配置账户信息。")

    try:
        loaded = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigError("❌ 账户信息配置格式错误。") from exc

    if not isinstance(loaded, list):
        raise ConfigError("❌ 账户信息配置格式错误：根节点必须是数组")

    accounts: list[Account] = []
    for index, item in enumerate(loaded):
        if not isinstance(item, dict):
            raise ConfigError(f"❌ 第 {index + 1} 个账户必须是对象")
        accounts.append(Account.from_dict(item, index))
    return tuple(accounts)


def parse_pushplus_tokens(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return ()
    return tuple(token for token in raw.split(",") if token.strip())


def load_config(
    environ: Mapping[str, str],
    *,
    host: str | None = None,
    accounts_env: str = DEFAULT_ACCOUNTS_ENV,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    user_agent: str = DEFAULT_USER_AGENT,
    notify: bool = True,
) -> RunConfig:
    resolved_host = (host or environ.get(DEFAULT_HOST_ENV, "")).strip() or DEFAULT_HOST
    output_path = environ.get(DEFAULT_GITHUB_OUTPUT_ENV, "").strip()

    return RunConfig(
        host=resolved_host,
        accounts=parse_accounts(environ.get(accounts_env)),
        pushplus_tokens=parse_pushplus_tokens(environ.get(DEFAULT_PUSHPLUS_TOKENS_ENV)),
        timeout_seconds=timeout_seconds,
        user_agent=user_agent,
        github_output=Path(output_path) if output_path else None,
        notify=notify,
    )
